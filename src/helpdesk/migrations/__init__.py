"""SQL migrations and runner"""
