"""
TreeMirror Client - Configuration Manager

Handles loading and saving client configuration from/to config.json.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Dict, Any

# Configure logging
logger = logging.getLogger(__name__)


# Default configuration values
DEFAULT_CONFIG = {
    "server_url": "http://localhost",
    "server_port": 8000,
    "verify_ssl": False,
    "local_root": ".",  # Directory receiving the mirrored files
    "use_cache": True,
    "cache_path": None,  # None means <local_root>/.treemirror/cache.db
    "request_timeout": 30,
    "download_timeout": 300,
    "chunk_size": 65536,
    "log_level": "INFO",
    "log_retention_days": 30
}


def get_base_dir() -> Path:
    """Directory holding config.json and the logs folder"""
    if getattr(sys, 'frozen', False):
        # Running as compiled executable
        return Path(sys.executable).parent
    # Running as script
    return Path.cwd()


class ConfigManager:
    """
    Manages client configuration.

    Responsibilities:
    - Load/save config.json next to the executable (same location as logs folder)
    - Fill in defaults for keys missing from an older config file
    - Provide configuration values to other modules
    """

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Explicit config file path; defaults to config.json in
                         the base directory
        """
        self.config_file = Path(config_file) if config_file else get_base_dir() / "config.json"
        self.config: Dict[str, Any] = {}

    def load_config(self) -> Dict[str, Any]:
        """
        Load configuration from config.json.
        Creates default config if file doesn't exist.

        Returns:
            Configuration dictionary
        """
        if self.config_file.exists():
            logger.debug(f"Loading configuration from {self.config_file}")
            try:
                with open(self.config_file, 'r') as f:
                    self.config = json.load(f)
            except json.JSONDecodeError as e:
                logger.warning(f"Configuration file {self.config_file} is invalid ({e}), using defaults")
                self.config = {}
            # Merge with defaults for any missing keys
            for key, value in DEFAULT_CONFIG.items():
                if key not in self.config:
                    self.config[key] = value
            logger.debug("Configuration loaded successfully")
        else:
            logger.info(f"Configuration file not found, creating default at {self.config_file}")
            self.config = DEFAULT_CONFIG.copy()
            self.save_config()

        return self.config

    def save_config(self):
        """Save current configuration to config.json."""
        logger.debug(f"Saving configuration to {self.config_file}")
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, 'w') as f:
            json.dump(self.config, f, indent=2)

    def get(self, key: str, default=None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return self.config.get(key, default)

    def get_cache_path(self, local_root: Path) -> Path:
        """
        Get the metadata cache database location.

        Args:
            local_root: Mirror destination, used when cache_path is unset

        Returns:
            Path to the SQLite cache file
        """
        cache_path = self.get("cache_path")
        if cache_path:
            return Path(cache_path)
        return Path(local_root) / ".treemirror" / "cache.db"
