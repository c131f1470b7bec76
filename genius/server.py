"""
Run the API server:

  python -m genius.server

HOST/PORT and the database settings come from the environment (or .env).
"""

import logging
import sys

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from genius.core.config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    url = settings.database_url
    logger.info("Server running on port %s", settings.PORT)
    logger.info("Database: %s:%s/%s", url.host, url.port, url.database)
    if not settings.DB_API_REQUIRE_AUTH:
        logger.warning("DB_API_REQUIRE_AUTH is disabled; /api/db accepts unauthenticated requests")
    uvicorn.run(
        "genius.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level="debug" if settings.DEBUG else "info",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
