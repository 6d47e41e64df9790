"""
Path configuration system for Chipsie.
Centralizes all file path handling with environment variable support.
"""

import os
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

# Base paths from environment with sensible defaults
BASE_DIR = Path(os.getenv('CHIPSIE_BASE_DIR', Path(__file__).parent.parent))
DATA_DIR = Path(os.getenv('CHIPSIE_DATA_DIR', BASE_DIR / 'data'))

# Subdirectories
DATABASE_DIR = Path(os.getenv('CHIPSIE_DATABASE_DIR', DATA_DIR / 'databases'))
LOG_DIR = Path(os.getenv('CHIPSIE_LOG_DIR', DATA_DIR / 'logs'))
CONFIG_DIR = Path(os.getenv('CHIPSIE_CONFIG_DIR', BASE_DIR))

def ensure_directories():
    """Create necessary directories if they don't exist."""
    for dir_path in [DATABASE_DIR, LOG_DIR]:
        try:
            dir_path.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Ensured directory exists: {dir_path}")
        except PermissionError:
            logger.error(f"Permission denied creating directory: {dir_path}")
            raise

def get_database_path(filename: str) -> Path:
    """Get absolute path for database file."""
    return DATABASE_DIR / filename

def get_config_path(filename: str) -> Path:
    """Get absolute path for config file."""
    return CONFIG_DIR / filename

def get_channel_log_dir(channel: str) -> Path:
    """Get channel-specific log directory."""
    channel_log_dir = LOG_DIR / 'channels' / channel
    channel_log_dir.mkdir(parents=True, exist_ok=True)
    return channel_log_dir

def get_channel_log_path(channel: str, filename: str) -> Path:
    """Get absolute path for channel-specific log file."""
    return get_channel_log_dir(channel) / filename

def log_path_configuration():
    """Log current path configuration for debugging."""
    logger.info("Path configuration:")
    logger.info(f"  BASE_DIR: {BASE_DIR}")
    logger.info(f"  DATA_DIR: {DATA_DIR}")
    logger.info(f"  DATABASE_DIR: {DATABASE_DIR}")
    logger.info(f"  LOG_DIR: {LOG_DIR}")
    logger.info(f"  CONFIG_DIR: {CONFIG_DIR}")
