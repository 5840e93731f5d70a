"""
Configuration Management

Handles loading configuration from environment variables and config files.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional
import json

from dotenv import load_dotenv

from .errors import ConfigurationError


@dataclass
class Config:
    """
    Memory store configuration.

    Configuration priority (highest to lowest):
    1. Environment variables (MEMORY_*)
    2. Config file (JSON)
    3. Default values

    ``auto_import_mode`` is kept as given; it is validated when propagation
    runs so a bad value never blocks startup.
    """
    # Store
    storage_unit_name: str = 'Memory_Storage'
    self_unit_name: str = 'Memory_Functions'

    # Bootstrap
    host_module: str = 'xapi'
    auto_import_mode: str = 'never'  # always | never | activeOnly | customList | customActiveList
    auto_import_custom_list: List[str] = field(default_factory=list)

    # Developer host
    host_db: Path = field(default_factory=lambda: Path('./macro_host.db'))

    # Logging
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables."""
        load_dotenv()

        config = cls()

        # Store
        config.storage_unit_name = os.getenv('MEMORY_STORAGE_UNIT', config.storage_unit_name)
        config.self_unit_name = os.getenv('MEMORY_SELF_UNIT', config.self_unit_name)

        # Bootstrap
        config.host_module = os.getenv('MEMORY_HOST_MODULE', config.host_module)
        config.auto_import_mode = os.getenv('MEMORY_AUTO_IMPORT_MODE', config.auto_import_mode)

        custom = os.getenv('MEMORY_AUTO_IMPORT_LIST', '')
        if custom:
            config.auto_import_custom_list = [
                name.strip() for name in custom.split(',') if name.strip()
            ]

        # Developer host
        host_db = os.getenv('MEMORY_HOST_DB')
        if host_db:
            config.host_db = Path(host_db)

        # Logging
        config.log_level = os.getenv('MEMORY_LOG_LEVEL', config.log_level)

        return config

    @classmethod
    def from_file(cls, path: Path) -> 'Config':
        """Load configuration from a JSON file."""
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must hold a JSON object")

        custom = data.get('autoImportCustomList', [])
        if not isinstance(custom, list) or not all(isinstance(n, str) for n in custom):
            raise ConfigurationError(
                f"autoImportCustomList in {path} must be a list of unit names"
            )

        config = cls()

        # Store
        config.storage_unit_name = data.get('storageUnitName', config.storage_unit_name)
        config.self_unit_name = data.get('selfUnitName', config.self_unit_name)

        # Bootstrap
        config.host_module = data.get('hostModule', config.host_module)
        config.auto_import_mode = data.get('autoImportMode', config.auto_import_mode)
        config.auto_import_custom_list = list(custom)

        # Developer host
        if 'hostDb' in data:
            config.host_db = Path(data['hostDb'])

        # Logging
        config.log_level = data.get('logLevel', config.log_level)

        return config

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'storageUnitName': self.storage_unit_name,
            'selfUnitName': self.self_unit_name,
            'hostModule': self.host_module,
            'autoImportMode': self.auto_import_mode,
            'autoImportCustomList': list(self.auto_import_custom_list),
            'hostDb': str(self.host_db),
            'logLevel': self.log_level,
        }

    def save(self, path: Path):
        """Save configuration to a JSON file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from file and environment.

    Environment variables override file settings.
    """
    # Start with defaults
    config = Config()

    # Load from file if provided
    if config_path and config_path.exists():
        config = Config.from_file(config_path)

    # Override with environment variables
    env_config = Config.from_env()

    # Merge (env takes precedence for non-default values)
    defaults = Config()
    for key in ['storage_unit_name', 'self_unit_name', 'host_module',
                'auto_import_mode', 'host_db', 'log_level']:
        env_val = getattr(env_config, key)
        if env_val != getattr(defaults, key):
            setattr(config, key, env_val)

    if env_config.auto_import_custom_list:
        config.auto_import_custom_list = env_config.auto_import_custom_list

    return config


# Example config file template
EXAMPLE_CONFIG = """
{
  "storageUnitName": "Memory_Storage",
  "selfUnitName": "Memory_Functions",
  "hostModule": "xapi",
  "autoImportMode": "customActiveList",
  "autoImportCustomList": ["Room_Scheduler", "Panel_Controls"],
  "hostDb": "./macro_host.db",
  "logLevel": "INFO"
}
"""
