"""Catalog configuration package.

This package provides centralized configuration management with:
- Validation through Pydantic models
- Defaults written on first start
- YAML parsing and serialization
"""

from .manager import ConfigManager
from .models import CatalogConfig

__all__ = [
    "CatalogConfig",
    "ConfigManager",
]
