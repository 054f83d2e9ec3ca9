"""Configuration loading for the web application."""

from biocatalog.config import CatalogConfig, ConfigManager
from biocatalog.system.path_resolver import PathResolver


def get_config(path_resolver: PathResolver | None = None) -> CatalogConfig:
    """Load the catalog configuration.

    Args:
        path_resolver: Optional PathResolver instance to use. If not provided,
                      creates a new PathResolver instance.

    Returns:
        CatalogConfig: The loaded and validated configuration.
    """
    if path_resolver is None:
        path_resolver = PathResolver()
    return ConfigManager(path_resolver).load()
