"""Logging service for centralized application logging."""

import sys
import queue
import threading
import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Any, List, Optional
from datetime import datetime

from orae.utils.path_resolver import resolve_data_file_path


LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'


class LoggingService:
    """Service for centralized application logging.

    This service provides:
    - Console and/or file output (configurable)
    - Multiple log levels (DEBUG, INFO, WARNING, ERROR)
    - Rolling log files (size-based rotation)
    - Non-blocking logging via QueueHandler/QueueListener

    This is a singleton service - use get_instance() to get the shared instance.
    Callers only enqueue records; a listener thread writes them to the handlers.
    """

    _instance: Optional['LoggingService'] = None
    _lock = threading.Lock()

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the logging service.

        Args:
            config: Configuration dictionary.
        """
        self.config = config or {}
        self._logger: Optional[logging.Logger] = None
        self._queue: Optional[queue.Queue] = None
        self._listener: Optional[logging.handlers.QueueListener] = None
        self._handlers: List[logging.Handler] = []
        self._initialized = False
        self._log_path: Optional[Path] = None
        self._instance_lock = threading.RLock()

        self._load_config()

    @classmethod
    def get_instance(cls, config: Optional[Dict[str, Any]] = None) -> 'LoggingService':
        """Get the singleton instance of LoggingService.

        Args:
            config: Configuration dictionary. If provided and the instance exists,
                the instance is reconfigured.

        Returns:
            The singleton LoggingService instance.
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls(config)
        elif config is not None:
            with cls._instance._instance_lock:
                cls._instance.config = config
                cls._instance._load_config()
                if cls._instance._initialized:
                    cls._instance._stop_listener()
                    cls._instance._initialized = False
        return cls._instance

    def _load_config(self) -> None:
        """Load logging configuration from config dictionary."""
        logging_config = self.config.get('logging', {})

        console_config = logging_config.get('console', {})
        self._console_enabled = bool(console_config.get('enabled', True))
        self._console_level = console_config.get('level', 'WARNING')

        file_config = logging_config.get('file', {})
        self._file_enabled = bool(file_config.get('enabled', False))
        self._file_level = file_config.get('level', 'DEBUG')
        self._log_filename = file_config.get('filename', 'orae.log')
        self._max_size_mb = file_config.get('max_size_mb', 10)
        self._backup_count = file_config.get('backup_count', 5)

    def initialize(self) -> None:
        """Set up the logger, its queue handler and the listener thread."""
        with self._instance_lock:
            if self._initialized:
                return

            self._logger = logging.getLogger('ORAE')
            self._logger.setLevel(logging.DEBUG)
            self._logger.propagate = False
            for handler in self._logger.handlers[:]:
                self._logger.removeHandler(handler)

            handlers = self._build_handlers()
            self._handlers = handlers
            if handlers:
                self._queue = queue.Queue()
                self._logger.addHandler(logging.handlers.QueueHandler(self._queue))
                self._listener = logging.handlers.QueueListener(
                    self._queue, *handlers, respect_handler_level=True
                )
                self._listener.start()

            self._initialized = True

        if self._file_enabled and self._log_path:
            self.debug(f"Log file path resolved: filename={self._log_filename}, path={self._log_path}")

    def _build_handlers(self) -> List[logging.Handler]:
        """Create the console and file handlers enabled by the configuration.

        Returns:
            List of configured handlers (possibly empty).
        """
        handlers: List[logging.Handler] = []

        if self._console_enabled:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(self._get_log_level(self._console_level))
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
            handlers.append(console_handler)

        if self._file_enabled:
            try:
                if self._log_path is None:
                    date = datetime.now().strftime('%Y-%m-%d')
                    if '.' in self._log_filename:
                        name, ext = self._log_filename.rsplit('.', 1)
                        dated_filename = f"{name}_{date}.{ext}"
                    else:
                        dated_filename = f"{self._log_filename}_{date}"
                    self._log_path, _ = resolve_data_file_path(dated_filename)

                self._log_path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.handlers.RotatingFileHandler(
                    str(self._log_path),
                    maxBytes=self._max_size_mb * 1024 * 1024,
                    backupCount=self._backup_count,
                    encoding='utf-8'
                )
                file_handler.setLevel(self._get_log_level(self._file_level))
                file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
                handlers.append(file_handler)
            except OSError as e:
                print(f"Warning: Failed to initialize file logging: {e}", file=sys.stderr)

        return handlers

    def _get_log_level(self, level_str: str) -> int:
        """Convert log level string to logging constant.

        Args:
            level_str: Log level string (DEBUG, INFO, WARNING, ERROR).

        Returns:
            Logging level constant.
        """
        level_map = {
            'DEBUG': logging.DEBUG,
            'INFO': logging.INFO,
            'WARNING': logging.WARNING,
            'ERROR': logging.ERROR,
        }
        return level_map.get(str(level_str).upper(), logging.INFO)

    def _log(self, level: int, message: str, exc_info: Optional[BaseException] = None) -> None:
        """Internal logging method.

        Args:
            level: Logging level constant.
            message: Log message.
            exc_info: Optional exception whose traceback is attached.
        """
        if not self._initialized:
            self.initialize()

        if self._logger is None or self._queue is None:
            return

        exc_info_param = None
        if exc_info is not None:
            exc_info_param = (type(exc_info), exc_info, exc_info.__traceback__)

        self._logger.log(level, message, exc_info=exc_info_param)

    def debug(self, message: str) -> None:
        """Log a DEBUG level message.

        Args:
            message: Debug message.
        """
        self._log(logging.DEBUG, message)

    def info(self, message: str) -> None:
        """Log an INFO level message.

        Args:
            message: Info message.
        """
        self._log(logging.INFO, message)

    def warning(self, message: str) -> None:
        """Log a WARNING level message.

        Args:
            message: Warning message.
        """
        self._log(logging.WARNING, message)

    def error(self, message: str, exc_info: Optional[BaseException] = None) -> None:
        """Log an ERROR level message.

        Args:
            message: Error message.
            exc_info: Optional exception to include traceback.
        """
        self._log(logging.ERROR, message, exc_info=exc_info)

    def _stop_listener(self) -> None:
        """Flush pending records and stop the listener thread."""
        if self._listener is not None:
            self._listener.stop()
            self._listener = None
        for handler in self._handlers:
            handler.close()
        self._handlers = []
        if self._logger is not None:
            for handler in self._logger.handlers[:]:
                handler.close()
                self._logger.removeHandler(handler)
        self._queue = None

    def shutdown(self) -> None:
        """Shutdown the logging service gracefully.

        Flushes all pending log messages and stops the queue listener.
        """
        with self._instance_lock:
            if not self._initialized:
                return
            self._stop_listener()
            self._initialized = False
