import logging
import logging.handlers
import traceback
from datetime import datetime
from pathlib import Path

from warehouse_slotting.config import config

PACKAGE_LOGGER = 'warehouse_slotting'
RUN_LOGGER = 'warehouse_slotting.runs'

class Logger:
    """Logging manager for the Warehouse Slotting System.

    Module loggers live under the ``warehouse_slotting`` namespace and share
    one rotating file attached to the package logger. Analysis run summaries
    are also written to their own rotating file.
    """

    _instance = None

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the logger if not already initialized."""
        if self._initialized:
            return

        self._log_config = config.log_config
        self._log_dir = Path(self._log_config['directory'])
        self._formatter = logging.Formatter(self._log_config['format'])
        self._level = getattr(logging, self._log_config['level'].upper(), logging.INFO)

        if not self._log_dir.exists():
            self._log_dir.mkdir(parents=True)

        if self._log_config['console_output'] and not logging.getLogger().handlers:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(self._formatter)
            logging.getLogger().addHandler(console_handler)

        self._attach_file(PACKAGE_LOGGER, 'slotting.log')
        self._attach_file(RUN_LOGGER, 'runs.log')

        self._initialized = True

    def _attach_file(self, name, filename):
        target = logging.getLogger(name)
        target.setLevel(self._level)

        file_handler = logging.handlers.RotatingFileHandler(
            self._log_dir / filename,
            maxBytes=self._log_config['max_size_mb'] * 1024 * 1024,
            backupCount=self._log_config['backup_count']
        )
        file_handler.setFormatter(self._formatter)
        target.addHandler(file_handler)

    def get_logger(self, name):
        """Get a logger inside the package namespace.

        Args:
            name: Module name; names outside the package are nested under it

        Returns:
            Logger writing to the package log file
        """
        if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
            name = f"{PACKAGE_LOGGER}.{name}"
        return logging.getLogger(name)

    def log_exception(self, logger_name, exception, message=None, level=logging.ERROR):
        """Log an exception with stack trace.

        Args:
            logger_name: Logger name
            exception: Exception object
            message: Optional message to include
            level: Log level to use
        """
        target = self.get_logger(logger_name)
        text = f"{message}: {str(exception)}" if message else str(exception)
        target.log(level, text)
        target.log(level, traceback.format_exc())

    def run_start_log(self, process_name, additional_info=None):
        """Log the start of an analysis run.

        Returns:
            Dictionary to hand back to run_end_log
        """
        run_logger = logging.getLogger(RUN_LOGGER)
        run_logger.info(f"Starting {process_name}")
        if additional_info:
            run_logger.info(f"Run info: {additional_info}")

        return {'process_name': process_name, 'start_time': datetime.now()}

    def run_end_log(self, log_info, success=True, result_info=None):
        """Log the outcome and duration of an analysis run."""
        run_logger = logging.getLogger(RUN_LOGGER)
        process_name = log_info.get('process_name', 'Unknown')
        duration = datetime.now() - log_info.get('start_time', datetime.now())

        if success:
            run_logger.info(f"Completed {process_name} in {duration}")
        else:
            run_logger.error(f"Failed {process_name} after {duration}")

        if result_info:
            run_logger.info(f"Run results: {result_info}")

# Global logger instance
logger = Logger()

def get_logger(name):
    """Get a logger with the specified name."""
    return logger.get_logger(name)

def log_exception(logger_name, exception, message=None, level=logging.ERROR):
    """Log an exception with stack trace."""
    logger.log_exception(logger_name, exception, message, level)
