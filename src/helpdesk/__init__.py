"""
Helpdesk API

REST backend for the helpdesk/ticketing portal: departments, notifications
and role-based navigation.
"""
__version__ = "0.1.0"
