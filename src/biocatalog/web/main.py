"""Species catalog web application with dependency injection."""

import logging

import uvicorn

from biocatalog.config import ConfigManager
from biocatalog.system.structlog_configurator import configure_structlog
from biocatalog.web.core.factory import create_app

# Configure logging before anything else imports and creates loggers
config_manager = ConfigManager()
config = config_manager.load()
configure_structlog(config)

# Disable uvicorn access logger since we have our own structured logging middleware
uvicorn_access_logger = logging.getLogger("uvicorn.access")
uvicorn_access_logger.disabled = True

# Keep uvicorn error logger for startup/shutdown messages
uvicorn_error_logger = logging.getLogger("uvicorn.error")
uvicorn_error_logger.setLevel(logging.INFO)

app = create_app()


def run(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Serve the application with uvicorn."""
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    run()
