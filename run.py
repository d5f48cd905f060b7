#!/usr/bin/env python3
"""
Startup script for the Variant Stock Bridge API.
Run with: python run.py
"""
import logging
import sys

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger("variant-stock-bridge")


def main() -> int:
    from app.config import Settings

    settings = Settings()
    missing = settings.missing_credentials()
    if missing:
        logging.basicConfig(level=logging.ERROR, format="%(asctime)s [%(levelname)s] %(message)s")
        for name in missing:
            logger.error("Error: %s is missing in environment or .env file.", name)
        return 1

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
