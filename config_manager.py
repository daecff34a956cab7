"""
Configuration management system for storage, calculation and logging settings
"""
import copy
import json
import os
import logging
from typing import Dict, Any, List

from config import FlightLogConfig
from utils import resource_path, setup_logging


DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "app": {
        "version": "1.0",
        "title": "Flight Hours Log",
        "debug_mode": False
    },
    "storage": {
        "directory": None,  # None = default per-user data directory
        "key": FlightLogConfig.STORAGE_KEY
    },
    "calculation": {
        "long_haul_adjustment": False
    },
    "export": {
        "include_timestamps": True
    },
    "logging": {
        "level": "INFO",
        "file_enabled": True,
        "file_name": "flight_log.log",
        "max_file_size": 10485760,  # 10MB
        "backup_count": 3
    }
}


class ConfigManager:
    """Manages application configuration with file-based persistence"""

    def __init__(self, config_file: str = "app_config.json"):
        self.config_file = resource_path(config_file)
        self.config: Dict[str, Any] = {}
        self.logger = logging.getLogger(__name__)
        self._load_config()

    def _load_config(self):
        """Load configuration from file over the defaults"""
        self.config = copy.deepcopy(DEFAULT_CONFIG)

        if os.path.exists(self.config_file):
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                self._merge_config(file_config)
                self.logger.info(f"Configuration loaded from {self.config_file}")
            except (OSError, ValueError, AttributeError) as e:
                self.logger.warning(f"Could not load config file: {e}, using defaults")

    def _merge_config(self, file_config: Dict[str, Any]):
        """Merge file configuration with defaults"""
        for section, values in file_config.items():
            if section in self.config and isinstance(values, dict):
                self.config[section].update(values)
            else:
                self.config[section] = values

    def save_config(self) -> bool:
        """Save current configuration to file"""
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=2, ensure_ascii=False)
            self.logger.info(f"Configuration saved to {self.config_file}")
            return True
        except (OSError, TypeError) as e:
            self.logger.error(f"Could not save config file: {e}")
            return False

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get configuration value"""
        return self.config.get(section, {}).get(key, default)

    def set(self, section: str, key: str, value: Any) -> None:
        """Set configuration value"""
        if section not in self.config:
            self.config[section] = {}
        self.config[section][key] = value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire configuration section"""
        return self.config.get(section, {}).copy()

    def update_section(self, section: str, values: Dict[str, Any]) -> None:
        """Update entire configuration section"""
        if section not in self.config:
            self.config[section] = {}
        self.config[section].update(values)

    def reset_to_defaults(self) -> None:
        """Reset configuration to defaults and save"""
        self.config = copy.deepcopy(DEFAULT_CONFIG)
        self.save_config()

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of issues"""
        issues = []

        storage_config = self.get_section("storage")
        directory = storage_config.get("directory")
        if directory is not None and not isinstance(directory, str):
            issues.append("Invalid directory in storage section")
        key = storage_config.get("key")
        if not isinstance(key, str) or not key:
            issues.append("Invalid key in storage section")

        calc_config = self.get_section("calculation")
        if not isinstance(calc_config.get("long_haul_adjustment"), bool):
            issues.append("Invalid long_haul_adjustment in calculation section, must be true or false")

        if not isinstance(self.get("export", "include_timestamps"), bool):
            issues.append("Invalid include_timestamps in export section, must be true or false")

        log_config = self.get_section("logging")
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if log_config.get("level") not in valid_levels:
            issues.append(f"Invalid logging level, must be one of: {valid_levels}")

        max_size = log_config.get("max_file_size", 0)
        if not isinstance(max_size, int) or max_size <= 0:
            issues.append("Invalid max_file_size in logging section")

        backup_count = log_config.get("backup_count", 0)
        if not isinstance(backup_count, int) or backup_count < 0:
            issues.append("Invalid backup_count in logging section")

        return issues

    def configure_logging(self) -> logging.Logger:
        """Apply the logging section through utils.setup_logging"""
        log_config = self.get_section("logging")
        log_file = log_config.get("file_name") if log_config.get("file_enabled") else None
        return setup_logging(
            debug=self.get("app", "debug_mode", False),
            level=log_config.get("level"),
            log_file=log_file,
            max_bytes=log_config.get("max_file_size", 10485760),
            backup_count=log_config.get("backup_count", 3)
        )


# Global configuration instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get or create the global configuration manager"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config(section: str, key: str, default: Any = None) -> Any:
    """Convenience function to get configuration value"""
    return get_config_manager().get(section, key, default)


def set_config(section: str, key: str, value: Any) -> None:
    """Convenience function to set configuration value"""
    get_config_manager().set(section, key, value)


def save_config() -> bool:
    """Convenience function to save configuration"""
    return get_config_manager().save_config()
