import logging
import logging.handlers
import sys
from .paths import get_channel_log_path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

class BotLogger:
    """Centralized logging configuration for the chat bot"""

    def __init__(self, channel: str = "default", log_level: str = "INFO"):
        self.channel = channel
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)
        self.setup_logging()

    def setup_logging(self):
        """Configure logging with file rotation and structured output"""
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)

        # Clear any existing handlers
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(console_handler)

        file_formatter = logging.Formatter(FILE_LOG_FORMAT, datefmt=DATE_FORMAT)

        # Full debug log with rotation
        file_handler = logging.handlers.RotatingFileHandler(
            get_channel_log_path(self.channel, f"{self.channel}_bot.log"),
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

        # Errors and above
        error_handler = logging.handlers.RotatingFileHandler(
            get_channel_log_path(self.channel, f"{self.channel}_errors.log"),
            maxBytes=5*1024*1024,  # 5MB
            backupCount=3
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(file_formatter)
        root_logger.addHandler(error_handler)

def setup_logging(channel: str = "default", log_level: str = "INFO"):
    """Setup logging for the bot"""
    return BotLogger(channel, log_level)
