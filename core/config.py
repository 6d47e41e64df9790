import os
import json
import logging
from typing import Any, Dict, Optional
from dotenv import load_dotenv
from pathlib import Path
from .exceptions import ConfigurationError
from .paths import get_config_path, get_database_path

logger = logging.getLogger(__name__)

class ConfigError(ConfigurationError):
    """Raised when configuration is invalid or missing"""
    pass

REQUIRED_AUTH_KEYS = ('token', 'client_id', 'nick', 'channel')

class BotConfig:
    """Centralized configuration: auth file credentials plus environment overrides"""

    def __init__(self, auth_file: Optional[str] = None, db_file: Optional[str] = None):
        load_dotenv(get_config_path('.env'))
        self.AUTH_FILE = auth_file or os.getenv('CHIPSIE_AUTH_FILE', 'auth/auth.json')
        self._load_config(db_file)

    def _load_auth_config(self) -> Dict[str, Any]:
        """Load credentials from the JSON auth file"""
        auth_path = Path(self.AUTH_FILE)
        if not auth_path.is_absolute():
            auth_path = get_config_path(self.AUTH_FILE)

        if not auth_path.exists():
            raise ConfigError(f"Auth configuration file not found: {auth_path}. "
                              f"Create it with the keys {', '.join(REQUIRED_AUTH_KEYS)}.")

        try:
            with open(auth_path, 'r') as f:
                auth = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in auth configuration file: {e}")
        except OSError as e:
            raise ConfigError(f"Error loading auth configuration: {e}")

        if not isinstance(auth, dict):
            raise ConfigError("Auth configuration must be a JSON object")

        missing = [key for key in REQUIRED_AUTH_KEYS if not auth.get(key)]
        if missing:
            raise ConfigError(f"Missing keys in auth configuration: {missing}")

        logger.info("Loaded auth credentials successfully! 8D")
        return auth

    def _load_config(self, db_file: Optional[str]):
        auth = self._load_auth_config()

        # Credentials
        self.TOKEN = auth['token']
        self.CLIENT_ID = auth['client_id']
        self.NICK = auth['nick']
        self.CHANNEL = auth['channel'].lstrip('#')

        # Server
        self.HOST = os.getenv('CHIPSIE_HOST', 'irc.chat.twitch.tv')
        self.PORT = int(os.getenv('CHIPSIE_PORT', '6667'))

        # Commands
        self.COMMAND_PREFIX = os.getenv('COMMAND_PREFIX', '!')

        # Twitch allows 20 messages per 30 seconds for regular users
        self.RATE_LIMIT_MESSAGES = int(os.getenv('RATE_LIMIT_MESSAGES', '20'))
        self.RATE_LIMIT_PERIOD = int(os.getenv('RATE_LIMIT_PERIOD', '30'))

        # Reconnect backoff, seconds
        self.RECONNECT_DELAY = float(os.getenv('RECONNECT_DELAY', '2'))
        self.MAX_RECONNECT_DELAY = float(os.getenv('MAX_RECONNECT_DELAY', '300'))

        # Logging configuration
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

        # Database settings
        db_name = db_file or os.getenv('CHIPSIE_DB_FILE', 'chipsie.db')
        self.DATABASE_PATH = str(get_database_path(db_name)) if not Path(db_name).is_absolute() else db_name

    @property
    def oauth_password(self) -> str:
        """Token in the form the server expects for PASS"""
        if self.TOKEN.startswith('oauth:'):
            return self.TOKEN
        return f"oauth:{self.TOKEN}"

    def validate(self):
        """Validate configuration is complete and valid"""
        if not self.HOST:
            raise ConfigError("Chat server host not configured")
        if not self.NICK:
            raise ConfigError("Bot nick not configured")
        if not self.CHANNEL:
            raise ConfigError("No channel configured")
        if not self.TOKEN:
            raise ConfigError("OAuth token not configured")
        if len(self.COMMAND_PREFIX) != 1:
            raise ConfigError(f"Command prefix must be a single character, got {self.COMMAND_PREFIX!r}")
        return True

_config: Optional[BotConfig] = None

def get_config(auth_file: Optional[str] = None, db_file: Optional[str] = None) -> BotConfig:
    """Get the process-wide configuration, loading it on first use"""
    global _config
    if _config is None:
        _config = BotConfig(auth_file, db_file)
    return _config

def reset_config():
    """Forget the loaded configuration"""
    global _config
    _config = None
