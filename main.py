"""
Main entrypoint: ShortStay API server.

Loads settings once (a missing DATABASE_URL is fatal), builds the app and
serves it with uvicorn on 0.0.0.0:$PORT (default 3000).

Env: DATABASE_URL, DATABASE_NAME, DB_POOL_SIZE, CORS_ORIGIN, PORT,
FIREBASE_PROJECT_ID, FIREBASE_CHECK_REVOKED, ERROR_ALERT_WEBHOOK, LOG_LEVEL, LOG_FORMAT.

Equivalent: uvicorn shortstay_api.api_server.app:app --host 0.0.0.0 --port 3000
"""

import os
import sys

# Configure structured JSON logging before other imports that may log
from shortstay_api.shortstay_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Load settings, build the app, run uvicorn in the main thread."""
    from shortstay_api.config import get_settings
    from shortstay_api.core.exceptions import ConfigError

    try:
        settings = get_settings()
    except ConfigError as e:
        logger.error("main_config_error", message=str(e))
        sys.exit(1)

    from shortstay_api.api_server.server import create_app
    import uvicorn

    app = create_app(settings)
    logger.info("main_server_starting", host="0.0.0.0", port=settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
