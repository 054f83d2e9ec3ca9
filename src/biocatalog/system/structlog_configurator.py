"""Structlog-based logging configuration for the species catalog.

Standard library loggers created with ``logging.getLogger(__name__)`` are routed
through the same handlers, so both styles end up in one structured stream.

Supports different deployment targets:
- Docker: stdout with JSON output
- Development: human-readable console output unless BIOCATALOG_JSON_LOGS=true
"""

import logging
import os
import sys
from collections.abc import Callable
from importlib.metadata import PackageNotFoundError, version
from typing import Any

import structlog

from biocatalog.config.models import CatalogConfig


def is_docker_environment() -> bool:
    """Check if running in a Docker container."""
    return os.path.exists("/.dockerenv") or os.environ.get("DOCKER_CONTAINER") == "true"


def get_package_version() -> str:
    """Get the installed package version, or 'unknown' for source checkouts."""
    try:
        return version("biocatalog")
    except PackageNotFoundError:
        return "unknown"


def get_deployment_environment() -> str:
    """Get deployment environment with 'production' fallback."""
    if is_docker_environment():
        return "docker"
    return os.environ.get("BIOCATALOG_ENV", "production")


def _add_static_context(extra_fields: dict[str, str]) -> Callable:
    """Processor to add static context fields to all log entries."""

    def processor(
        logger: structlog.BoundLogger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.update(extra_fields)
        return event_dict

    return processor


def _use_json_output(config: CatalogConfig) -> bool:
    """Decide between JSON and console rendering."""
    if os.environ.get("BIOCATALOG_JSON_LOGS", "").lower() == "true":
        return True
    if config.logging.json_logs is not None:
        return config.logging.json_logs
    return is_docker_environment() or get_deployment_environment() == "production"


def _configure_processors(config: CatalogConfig) -> list:
    """Configure structlog processors based on environment."""
    extra_fields = {
        "service": "biocatalog",
        "version": get_package_version(),
        "deployment": get_deployment_environment(),
        **config.logging.extra_fields,
    }

    processors = [
        structlog.contextvars.merge_contextvars,
        _add_static_context(extra_fields),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
    ]

    if config.logging.include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if _use_json_output(config):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    return processors


def _configure_handlers(config: CatalogConfig) -> None:
    """Route the root logger to stdout at the configured level."""
    root_logger = logging.getLogger()
    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)


def configure_structlog(config: CatalogConfig) -> None:
    """Configure structlog-based logging system.

    Args:
        config: The CatalogConfig instance containing logging settings.
    """
    processors = _configure_processors(config)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.logging.level.upper(), logging.INFO)
        ),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configure_handlers(config)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Structured logging configured",
        version=get_package_version(),
        log_level=config.logging.level,
        environment=get_deployment_environment(),
        json_output=_use_json_output(config),
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog BoundLogger instance
    """
    return structlog.get_logger(name)
