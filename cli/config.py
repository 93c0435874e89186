#!/usr/bin/env python3
"""
Configuration Management Module for the txval CLI

Handles hierarchical configuration loading, environment variable mapping,
validation, and management of settings across different environments.

Precedence, lowest to highest: defaults, profile, config file, environment.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional, List, Union

import yaml

from validator.errors import ConfigurationError


# Configuration file locations in order of precedence (highest to lowest)
CONFIG_SEARCH_PATHS = [
    Path.cwd() / '.txval.yml',              # Project-specific YAML
    Path.cwd() / '.txval.json',             # Project-specific JSON
    Path.home() / '.txval' / 'config.yml',  # User global YAML
    Path.home() / '.txval' / 'config.json', # User global JSON
    Path('/etc/txval/config.yml'),          # System-wide YAML
    Path('/etc/txval/config.json'),         # System-wide JSON
]

# Environment variable prefix
ENV_PREFIX = 'TXVAL_'

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
OUTPUT_FORMATS = ['table', 'json', 'yaml']
REPORT_FORMATS = ['text', 'json', 'markdown']

# Default configuration values. Leaf keys avoid underscores so that every key can
# be set from the environment (TXVAL_LOGGING_LEVEL -> logging.level).
DEFAULT_CONFIG = {
    'logging': {
        'level': 'WARNING',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    },

    'cli': {
        'output': 'table',
        'color': True
    },

    # Default UTXO snapshot file for `txval validate`
    'pool': {
        'snapshot': None
    },

    'report': {
        'format': 'text'
    }
}

# Configuration profiles
PROFILES = {
    'production': {
        'logging': {'level': 'WARNING'},
        'cli': {'output': 'json', 'color': False}
    },
    'development': {
        'logging': {'level': 'DEBUG'},
        'cli': {'output': 'table', 'color': True}
    }
}


class ConfigurationManager:
    """Manages hierarchical configuration with environment variable support."""

    def __init__(self, config_file: Optional[str] = None, profile: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Explicit configuration file path
            profile: Configuration profile to load (production, development)
        """
        self.logger = logging.getLogger('txval-cli.config')
        self.config_file = config_file
        self.profile = profile
        self._config_cache = None
        self._config_sources = []

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from all sources in hierarchical order.

        Returns:
            Merged configuration dictionary

        Raises:
            ConfigurationError: If an explicit config file or the profile is invalid
        """
        if self._config_cache is not None:
            return self._config_cache

        configs = []
        self._config_sources = []

        # 1. Start with default configuration
        configs.append(copy.deepcopy(DEFAULT_CONFIG))
        self._config_sources.append("defaults")

        # 2. Apply profile if specified
        if self.profile:
            if self.profile not in PROFILES:
                raise ConfigurationError(f"Unknown profile: {self.profile}")
            configs.append(copy.deepcopy(PROFILES[self.profile]))
            self._config_sources.append(f"profile:{self.profile}")
            self.logger.debug(f"Applied profile: {self.profile}")

        # 3. Load configuration files
        if self.config_file:
            path = Path(self.config_file)
            if not path.exists():
                raise ConfigurationError(f"Config file not found: {path}")
            configs.append(self._load_config_file(path))
            self._config_sources.append(f"file:{self.config_file}")
        else:
            for config_path in CONFIG_SEARCH_PATHS:
                if config_path.exists():
                    try:
                        config_data = self._load_config_file(config_path)
                    except ConfigurationError as e:
                        self.logger.error(str(e))
                        continue
                    configs.append(config_data)
                    self._config_sources.append(f"file:{config_path}")
                    self.logger.debug(f"Loaded config from {config_path}")
                    break  # Use first found config file

        # 4. Apply environment variables
        env_config = self._load_environment_variables()
        if env_config:
            configs.append(env_config)
            self._config_sources.append("environment")

        # Merge all configurations (later ones override earlier ones)
        self._config_cache = self._deep_merge(*configs)

        self._expand_paths(self._config_cache)

        return self._config_cache

    def _load_config_file(self, path: Path) -> Dict[str, Any]:
        """Load configuration from file."""
        try:
            with open(path, 'r') as f:
                if path.suffix in ['.yml', '.yaml']:
                    data = yaml.safe_load(f)
                elif path.suffix == '.json':
                    data = json.load(f)
                else:
                    raise ConfigurationError(f"Unknown config file format: {path}")
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load config from {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        return data

    def _load_environment_variables(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config = {}

        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                config_key = key[len(ENV_PREFIX):].lower()

                # e.g., TXVAL_LOGGING_LEVEL -> {'logging': {'level': value}}
                parts = config_key.split('_')
                current = env_config

                for part in parts[:-1]:
                    if not isinstance(current.get(part), dict):
                        current[part] = {}
                    current = current[part]

                current[parts[-1]] = self._parse_env_value(value)

        return env_config

    def _parse_env_value(self, value: str) -> Union[str, int, float, bool, None]:
        """Parse environment variable value to appropriate type."""
        # Try to parse as JSON first (for complex types)
        try:
            return json.loads(value)
        except ValueError:
            pass

        if value.lower() in ['true', 'yes']:
            return True
        elif value.lower() in ['false', 'no']:
            return False

        return value

    def _deep_merge(self, *dicts: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge multiple dictionaries."""
        result = {}

        for dictionary in dicts:
            for key, value in dictionary.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = self._deep_merge(result[key], value)
                else:
                    result[key] = copy.deepcopy(value)

        return result

    def _expand_paths(self, config: Dict[str, Any]):
        """Expand ~ and environment variables in path values."""
        for key, value in config.items():
            if isinstance(value, dict):
                self._expand_paths(value)
            elif isinstance(value, str) and key != 'format':
                if '~' in value or '$' in value:
                    config[key] = os.path.expanduser(os.path.expandvars(value))

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Args:
            key_path: Dot-separated path (e.g., 'logging.level')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        config = self.load()

        current = config
        for key in key_path.split('.'):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default

        return current

    def set(self, key_path: str, value: Any):
        """
        Set configuration value by dot-notation path.

        Args:
            key_path: Dot-separated path (e.g., 'cli.output')
            value: Value to set
        """
        config = self.load()

        keys = key_path.split('.')
        current = config

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def save(self, path: Optional[str] = None, format: str = 'yaml'):
        """
        Save current configuration to file.

        Args:
            path: File path to save to (default: project config file)
            format: Output format ('yaml' or 'json')
        """
        config = self.load()

        if not path:
            path = Path.cwd() / ('.txval.yml' if format == 'yaml' else '.txval.json')

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            if format == 'yaml':
                yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(config, f, indent=2)

        self.logger.info(f"Configuration saved to {path}")

    def validate(self) -> List[str]:
        """
        Validate current configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        config = self.load()
        errors = []

        level = str(config.get('logging', {}).get('level', '')).upper()
        if level not in LOG_LEVELS:
            errors.append(f"Invalid log level: {config.get('logging', {}).get('level')}")

        output_format = config.get('cli', {}).get('output')
        if output_format not in OUTPUT_FORMATS:
            errors.append(f"Invalid output format: {output_format}")

        if not isinstance(config.get('cli', {}).get('color'), bool):
            errors.append("cli.color must be true or false")

        snapshot = config.get('pool', {}).get('snapshot')
        if snapshot is not None and not isinstance(snapshot, str):
            errors.append("pool.snapshot must be a file path or null")

        report_format = config.get('report', {}).get('format')
        if report_format not in REPORT_FORMATS:
            errors.append(f"Invalid report format: {report_format}")

        return errors

    def get_sources(self) -> List[str]:
        """Get list of configuration sources that were loaded."""
        self.load()
        return self._config_sources

    def export_environment(self) -> Dict[str, str]:
        """
        Export configuration as environment variables.

        Returns:
            Dictionary of environment variable names and values
        """
        config = self.load()
        env_vars = {}

        def flatten(obj: Dict[str, Any], prefix: str = ''):
            for key, value in obj.items():
                env_key = f"{prefix}_{key}".upper() if prefix else key.upper()

                if isinstance(value, dict):
                    flatten(value, env_key)
                else:
                    env_name = f"{ENV_PREFIX}{env_key}"
                    if isinstance(value, bool):
                        env_vars[env_name] = 'true' if value else 'false'
                    elif value is None:
                        env_vars[env_name] = 'null'
                    else:
                        env_vars[env_name] = str(value)

        flatten(config)
        return env_vars

    def reset(self):
        """Reset configuration cache."""
        self._config_cache = None
        self._config_sources = []


def load_config(config_file: Optional[str] = None,
                profile: Optional[str] = None) -> Dict[str, Any]:
    """
    Convenience function to load configuration.

    Args:
        config_file: Optional configuration file path
        profile: Optional configuration profile

    Returns:
        Configuration dictionary
    """
    return ConfigurationManager(config_file, profile).load()
