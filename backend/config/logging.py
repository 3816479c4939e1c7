import logging
import logging.handlers
import os

from config.env import settings

# Libraries that are too chatty at INFO
QUIET_LOGGERS = [
    'uvicorn.access',
    'sqlalchemy.engine',
    'httpx',
    'httpcore',
]


def get_logs_dir() -> str:
    """Resolve the log directory, creating it if it doesn't exist."""
    logs_dir = settings.log_dir or os.path.join(os.path.dirname(os.path.dirname(__file__)), 'logs')
    os.makedirs(logs_dir, exist_ok=True)
    return logs_dir


# Configure logging
def setup_logging():
    logs_dir = get_logs_dir()

    # Create formatters
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_formatter = logging.Formatter(
        '%(levelname)s: %(message)s'
    )

    # File handler for all logs
    all_handler = logging.handlers.RotatingFileHandler(
        os.path.join(logs_dir, 'flashcards.log'),
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    all_handler.setFormatter(file_formatter)
    all_handler.setLevel(logging.DEBUG)

    # File handler for errors only
    error_handler = logging.handlers.RotatingFileHandler(
        os.path.join(logs_dir, 'error.log'),
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    error_handler.setFormatter(file_formatter)
    error_handler.setLevel(logging.ERROR)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(settings.log_level.upper())

    # Get root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Remove any existing handlers
    root_logger.handlers = []

    # Add handlers
    root_logger.addHandler(all_handler)
    root_logger.addHandler(error_handler)
    root_logger.addHandler(console_handler)

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    # Create logger for this module
    logger = logging.getLogger(__name__)
    logger.info('Logging setup completed')
