"""
Categorized logging for Media Bridge.

Each module logs through ``logging.getLogger(__name__)``. Loggers are grouped
into a few categories whose levels can be tuned independently and persisted
in the settings store under ``log_level_<category>``.
"""
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Dict, List, Optional


class LoggerCategory:
    """Named categories for application loggers"""
    CORE = "core"          # mapping, provider, context
    API = "api"            # REST clients
    NETWORK = "network"    # sessions, file size probes
    SETTINGS = "settings"  # settings store and loading


DEFAULT_LOG_LEVELS = {
    LoggerCategory.CORE: logging.INFO,
    LoggerCategory.API: logging.INFO,
    LoggerCategory.NETWORK: logging.WARNING,  # one line per probe otherwise
    LoggerCategory.SETTINGS: logging.INFO,
}

# Logger name prefix -> category; the longest matching prefix wins.
MODULE_TO_CATEGORY = {
    'media_bridge': LoggerCategory.CORE,
    'media_bridge.core.api': LoggerCategory.API,
    'media_bridge.core.http_client': LoggerCategory.NETWORK,
    'media_bridge.core.file_size_probe': LoggerCategory.NETWORK,
    'media_bridge.core.settings': LoggerCategory.SETTINGS,
    'media_bridge.core.database': LoggerCategory.SETTINGS,
}

NOISY_LOGGERS = ('urllib3', 'requests', 'aiohttp', 'asyncio')

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILENAME = "media_bridge.log"


def category_for(logger_name: str) -> Optional[str]:
    best = None
    for prefix in MODULE_TO_CATEGORY:
        if logger_name == prefix or logger_name.startswith(prefix + "."):
            if best is None or len(prefix) > len(best):
                best = prefix
    return MODULE_TO_CATEGORY[best] if best else None


def _level_from_name(name, fallback: int) -> int:
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else fallback


class LoggingManager:
    """Owns handler setup and per-category levels"""

    def __init__(self, log_dir: Optional[Path] = None, store=None):
        """
        Args:
            log_dir: Directory for the rotating log file
            store: Settings store (get_config / set_config) for persisted levels
        """
        self.log_dir = log_dir or (Path.home() / ".media-bridge" / "logs")
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.store = store
        self._category_levels: Dict[str, int] = dict(DEFAULT_LOG_LEVELS)
        if store is not None:
            for category, default in DEFAULT_LOG_LEVELS.items():
                stored = store.get_config(f'log_level_{category}')
                if stored is not None:
                    self._category_levels[category] = _level_from_name(stored, default)

    @property
    def log_file(self) -> Path:
        return self.log_dir / LOG_FILENAME

    def get_category_level(self, category: str) -> int:
        return self._category_levels.get(category, logging.INFO)

    def get_all_levels(self) -> Dict[str, int]:
        return dict(self._category_levels)

    def set_category_level(self, category: str, level: int):
        """Change a category's level now and persist it."""
        self._category_levels[category] = level
        if self.store is not None:
            self.store.set_config(f'log_level_{category}', logging.getLevelName(level))
        self._apply_category_level(category, level)

    def _apply_category_level(self, category: str, level: int):
        for prefix, cat in MODULE_TO_CATEGORY.items():
            if cat == category:
                logging.getLogger(prefix).setLevel(level)

    def _build_handlers(self, console_level: Optional[int]) -> List[logging.Handler]:
        formatter = logging.Formatter(LOG_FORMAT)

        # Rotate daily, keep a week
        file_handler = TimedRotatingFileHandler(
            self.log_file,
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
        console = logging.StreamHandler()
        if console_level is not None:
            console.setLevel(console_level)

        for handler in (file_handler, console):
            handler.setFormatter(formatter)
        return [file_handler, console]

    def setup_logging(self, root_level: int = logging.INFO, console_level: Optional[int] = None):
        """
        Replace root handlers with the file + console pair and apply levels.

        Args:
            root_level: Root logger level
            console_level: Console handler threshold (root level when None)
        """
        root = logging.getLogger()
        root.setLevel(root_level)
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in self._build_handlers(console_level):
            root.addHandler(handler)

        for category, level in self._category_levels.items():
            self._apply_category_level(category, level)

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


_logging_manager: Optional[LoggingManager] = None


def get_logging_manager(store=None, log_dir: Optional[Path] = None) -> LoggingManager:
    """Get or create the process-wide logging manager"""
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager(log_dir=log_dir, store=store)
    return _logging_manager


def setup_logging(store=None, log_dir: Optional[Path] = None, console_level: Optional[int] = None):
    """Convenience entry used by the CLI"""
    manager = get_logging_manager(store, log_dir)
    manager.setup_logging(console_level=console_level)
    return manager
