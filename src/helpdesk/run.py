"""
Helpdesk API Runner

Entry point for running the helpdesk API.
"""
import uvicorn
import logging
import os

from .config import Config

logger = logging.getLogger("helpdesk")


def run():
    """Run the helpdesk API"""
    logging.basicConfig(
        level=Config.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logger.info(f"Starting Helpdesk API on {Config.API_HOST}:{Config.API_PORT}")

    uvicorn.run(
        "helpdesk.app:app",
        host=Config.API_HOST,
        port=Config.API_PORT,
        reload=os.getenv("DEBUG", "false").lower() == "true"
    )


if __name__ == "__main__":
    run()
