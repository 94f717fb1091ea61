#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("vendorbranch")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. VENDORBRANCH_CONFIG environment variable
    2. ~/.vendorbranch/ directory
    """
    if 'VENDORBRANCH_CONFIG' in os.environ:
        path = Path(os.environ['VENDORBRANCH_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.vendorbranch'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def get_default_config():
    """Get default configuration."""
    return {
        "cookbook_path": ["~/chef-repo/cookbooks"],
        "default_branch": "master",
        "site": {
            "url": "https://supermarket.chef.io",
            "timeout_seconds": 30
        },
        "git": {
            "timeout_seconds": 300
        },
        "logging": {
            "level": "INFO"
        }
    }


def merge_configs(base, override):
    """Recursively merge override into a copy of base."""
    result = dict(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def split_path_list(value):
    """'a:b' -> ['a', 'b']; lists pass through."""
    if isinstance(value, str):
        return [p for p in value.split(':') if p]
    return list(value or [])


def ensure_sections(config):
    """Replace section values that are not mappings (e.g. `site: null`) with defaults."""
    defaults = get_default_config()
    for section, value in defaults.items():
        if isinstance(value, dict) and not isinstance(config.get(section), dict):
            if config.get(section) is not None:
                logger.warning(f"Config section '{section}' should be a mapping, using defaults")
            config[section] = value
    return config


def apply_env_overrides(config):
    """Apply VENDORBRANCH_* environment variable overrides."""
    if os.environ.get('VENDORBRANCH_COOKBOOK_PATH'):
        config["cookbook_path"] = split_path_list(os.environ['VENDORBRANCH_COOKBOOK_PATH'])
    if os.environ.get('VENDORBRANCH_DEFAULT_BRANCH'):
        config["default_branch"] = os.environ['VENDORBRANCH_DEFAULT_BRANCH']
    if os.environ.get('VENDORBRANCH_SITE_URL'):
        config["site"]["url"] = os.environ['VENDORBRANCH_SITE_URL']
    return config


def load_config():
    """Load configuration from defaults, config file and environment."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            if config_path.suffix.lower() == '.toml':
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f)
            else:
                # Default to JSON format
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            if isinstance(file_config, dict):
                config = merge_configs(config, file_config)
            elif file_config is not None:
                logger.error(f"Ignoring config {config_path}: expected a mapping at the top level")
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    config = ensure_sections(config)
    config = apply_env_overrides(config)
    config["cookbook_path"] = split_path_list(config.get("cookbook_path"))

    return config


def set_log_level(level):
    """Set the vendorbranch logger level from a name like 'DEBUG'."""
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
