"""Configuration loading and saving."""

import logging
import os
import shutil
from typing import Any

import yaml
from pydantic import ValidationError

from biocatalog.config.models import CatalogConfig
from biocatalog.system.path_resolver import PathResolver

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages configuration loading, saving, and validation."""

    def __init__(self, path_resolver: PathResolver | None = None):
        """Initialize ConfigManager.

        Args:
            path_resolver: Optional PathResolver instance. If None, creates a new one.
        """
        self.path_resolver = path_resolver or PathResolver()
        self.config_path = self.path_resolver.get_config_path()

    def load(self) -> CatalogConfig:
        """Load configuration with validation.

        Returns:
            CatalogConfig: Loaded and validated configuration

        Raises:
            ValueError: If the file content does not satisfy the configuration model
        """
        self._ensure_config_exists()
        raw_config = self._read_yaml()
        return self._create_config_object(raw_config)

    def save(self, config: CatalogConfig) -> None:
        """Save configuration to file with backup.

        Args:
            config: Configuration to save

        Raises:
            PermissionError: If config file cannot be written
        """
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            backup_path = self.config_path.with_suffix(".yaml.backup")
            try:
                shutil.copy2(self.config_path, backup_path)
            except PermissionError:
                logger.warning("Could not create backup at %s", backup_path)

        config_yaml = yaml.dump(config.model_dump(), default_flow_style=False, sort_keys=False)
        self.config_path.write_text(config_yaml)
        logger.info("Configuration saved successfully to %s", self.config_path)

    def reload(self) -> CatalogConfig:
        """Reload configuration from disk."""
        return self.load()

    @staticmethod
    def should_use_development_mode() -> bool:
        """Check whether the process runs in development mode."""
        return os.environ.get("BIOCATALOG_ENV", "production") == "development"

    def _ensure_config_exists(self) -> None:
        """Ensure config file exists, create from model defaults if needed."""
        if self.config_path.exists():
            return

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        config_yaml = yaml.dump(
            CatalogConfig().model_dump(), default_flow_style=False, sort_keys=False
        )
        self.config_path.write_text(config_yaml)
        self.config_path.chmod(0o600)
        logger.info("Created default configuration at %s", self.config_path)

    def _read_yaml(self) -> dict[str, Any]:
        """Read YAML config file.

        Returns:
            dict: Raw configuration dictionary
        """
        config_text = self.config_path.read_text()
        data = yaml.safe_load(config_text) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {self.config_path} must contain a mapping")
        return data

    def _create_config_object(self, raw_config: dict[str, Any]) -> CatalogConfig:
        """Create CatalogConfig object from dictionary.

        Args:
            raw_config: Configuration dictionary

        Returns:
            CatalogConfig: Typed configuration object
        """
        expected_fields = set(CatalogConfig.model_fields.keys())
        filtered_config = {k: v for k, v in raw_config.items() if k in expected_fields}

        unexpected_fields = set(raw_config.keys()) - expected_fields
        if unexpected_fields:
            logger.warning("Filtered out unexpected config fields: %s", unexpected_fields)

        try:
            return CatalogConfig(**filtered_config)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            ]
            raise ValueError(f"Configuration validation failed: {', '.join(errors)}") from e
