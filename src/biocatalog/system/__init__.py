"""System domain package.

This package contains process-level plumbing:
- PathResolver: Path resolution for configuration, data, and web assets
- StructlogConfigurator: Structured logging configuration
"""

from biocatalog.system import structlog_configurator
from biocatalog.system.path_resolver import PathResolver

__all__ = [
    "PathResolver",
    "structlog_configurator",
]
