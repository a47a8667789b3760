"""Configuration management."""

from typing import Dict, Any, Optional
from pathlib import Path
import json


class Config:
    """Application configuration manager."""

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_file: Path to configuration file
        """
        self.config_file = Path(config_file) if config_file else Path("config.json")
        self._config: Dict[str, Any] = self._get_default_config()
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file, layered over the defaults."""
        if not self.config_file.exists():
            return

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (json.JSONDecodeError, IOError):
            return

        if isinstance(loaded, dict):
            self._config.update(loaded)

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "default_language": "ja",
            "batch_workers": 4,
            "registry_file": None,
            "fetcher": "auto"
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        value = self._config.get(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value.

        Args:
            key: Configuration key
            value: Configuration value
        """
        self._config[key] = value

    def save(self) -> None:
        """Save configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2)
