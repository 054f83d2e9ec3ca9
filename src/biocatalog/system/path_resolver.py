import os
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class PathResolver:
    """Central authority for all file path resolution in the catalog.

    Uses environment variables for configuration with sensible defaults.
    Read-only web assets ship inside the package; runtime data lives in the data directory.
    """

    def __init__(self) -> None:
        """Initialize PathResolver with environment-based configuration."""
        self.app_dir = Path(os.getenv("BIOCATALOG_APP", str(PACKAGE_DIR)))
        self.data_dir = Path(os.getenv("BIOCATALOG_DATA", "/var/lib/biocatalog"))

    def get_config_path(self) -> Path:
        """Get the path to the main configuration file.

        Checks BIOCATALOG_CONFIG environment variable first, then falls back to default.
        """
        config_path = os.getenv("BIOCATALOG_CONFIG")
        if config_path:
            return Path(config_path)

        return self.data_dir / "config" / "biocatalog.yaml"

    def get_data_dir(self) -> Path:
        """Get the data directory path.

        Returns:
            Path to the data directory where all runtime data is stored.
        """
        return self.data_dir

    def get_database_dir(self) -> Path:
        """Get the directory for database files."""
        return self.data_dir / "database"

    def get_database_path(self) -> Path:
        """Get the path to the main SQLite database."""
        return self.data_dir / "database" / "biocatalog.db"

    # Web application paths (in app directory)
    def get_static_dir(self) -> Path:
        """Get the directory for static web assets."""
        return self.app_dir / "web" / "static"

    def get_templates_dir(self) -> Path:
        """Get the directory for HTML templates."""
        return self.app_dir / "web" / "templates"
