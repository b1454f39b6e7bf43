"""
Central logging setup for ArtFS
"""
import fnmatch
import logging
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler


class ArtFSLogger:
    """Central logger with console output and optional rotating log file."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ArtFSLogger, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not ArtFSLogger._initialized:
            self.setup_logging()  # Console only until main() passes the config
            ArtFSLogger._initialized = True

    def _cleanup_old_logs(self, log_dir, max_files=10):
        """
        Remove old log files, keeping only the most recent ones.

        Args:
            log_dir: Path to log directory
            max_files: Maximum number of log files to keep (0 = keep all)
        """
        if max_files == 0:
            return

        log_files = sorted(
            log_dir.glob('artfs_*.log*'),
            key=lambda f: f.stat().st_mtime,
            reverse=True
        )

        for old_file in log_files[max_files:]:
            try:
                old_file.unlink()
            except OSError as e:
                logging.getLogger(__name__).warning(f"Failed to delete {old_file.name}: {e}")

    def setup_logging(self, log_dir=None, log_level=logging.DEBUG, console_level=logging.WARNING, max_log_files=10):
        """
        Configure the root logger.

        Args:
            log_dir: Directory for log files (None = console only)
            log_level: Level for the log file
            console_level: Level for console output (default: WARNING)
            max_log_files: Maximum number of log files to keep (0 = keep all)
        """
        root_logger = logging.getLogger()
        root_logger.setLevel(min(log_level, console_level))
        root_logger.handlers.clear()

        detailed_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_formatter = logging.Formatter(
            '%(levelname)-8s | %(name)s | %(message)s'
        )

        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)
        self.console_handler = console_handler
        self.file_handler = None
        self.log_file = None

        # stupidArtnet and urllib3 are chatty at DEBUG
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('stupidArtnet').setLevel(logging.WARNING)

        if log_dir is None:
            return

        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        self._cleanup_old_logs(log_path, max_files=max_log_files)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        log_file = log_path / f'artfs_{timestamp}.log'

        # 10 MB per file, 5 backups
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10*1024*1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)
        self.file_handler = file_handler
        self.log_file = log_file

        # Startup banner goes to the file only
        root_logger.removeHandler(console_handler)
        root_logger.info("=" * 80)
        root_logger.info("ArtFS ArtNet bridge started")
        root_logger.info(f"Log file: {log_file}")
        root_logger.info("=" * 80)
        root_logger.addHandler(console_handler)

    def set_console_log_level(self, level):
        """
        Change the console log level.

        Args:
            level: logging.DEBUG, logging.INFO, logging.WARNING, etc.
        """
        self.console_handler.setLevel(level)
        root_logger = logging.getLogger()
        if level < root_logger.level:
            root_logger.setLevel(level)
        logging.getLogger(__name__).debug(f"Console log level set to {logging.getLevelName(level)}")

    def get_console_log_level(self):
        return self.console_handler.level

    def apply_debug_modules(self, debug_modules):
        """
        Enable DEBUG for every logger matching one of the given patterns.

        Args:
            debug_modules: List of module patterns (e.g. ['artfs.bridge.*'])
        """
        for module_pattern in debug_modules or []:
            # Loggers are created at import time, so they already exist here
            for logger_name in list(logging.Logger.manager.loggerDict):
                if fnmatch.fnmatch(logger_name, module_pattern):
                    logging.getLogger(logger_name).setLevel(logging.DEBUG)


def get_logger(name):
    """
    Get a named logger, making sure ArtFSLogger is initialised.

    Args:
        name: Logger name (usually __name__)

    Returns:
        logging.Logger: Configured logger
    """
    ArtFSLogger()
    return logging.getLogger(name)


def log_dmx_frame(logger, universe, frame, frame_count, every=120):
    """
    Log incoming DMX data, throttled to one line per `every` frames.

    Args:
        logger: Logger instance
        universe: Port address the frame was received on
        frame: Sequence of channel values
        frame_count: Running frame counter
        every: Log only every n-th frame
    """
    if (frame_count - 1) % every:
        return
    values_str = ', '.join(str(v) for v in list(frame)[:8])
    logger.debug(f"DMX universe {universe}: {len(frame)} channels [{values_str}...] (frame #{frame_count})")
