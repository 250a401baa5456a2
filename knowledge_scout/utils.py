import logging
import os
import sys
from pathlib import Path
from functools import lru_cache
import yaml
from colorama import init, Fore, Style

init()

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
LOG_DIR = Path("logs")
SETTINGS_PATH = Path("config/settings.yaml")
SETTINGS_ENV = "KNOWLEDGE_SCOUT_SETTINGS"

class LevelColorFormatter(logging.Formatter):
    """Colors the whole console line by level."""
    LEVEL_COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record):
        line = super().format(record)
        return f"{self.LEVEL_COLORS.get(record.levelno, Fore.WHITE)}{line}{Style.RESET_ALL}"

def setup_logger(name: str = "scout", log_level: int = logging.INFO, log_dir: Path = LOG_DIR) -> logging.Logger:
    """
    Builds the scout logger once: a plain file log under ``log_dir`` and a
    colored console on stderr, so JSON printed to stdout stays parseable.
    Later calls only change the level.
    """
    scout_logger = logging.getLogger(name)
    scout_logger.setLevel(log_level)
    if scout_logger.handlers:
        return scout_logger

    log_dir.mkdir(exist_ok=True)
    to_file = logging.FileHandler(log_dir / f"{name}.log", encoding="utf-8")
    to_file.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    scout_logger.addHandler(to_file)

    to_console = logging.StreamHandler(sys.stderr)
    to_console.setFormatter(LevelColorFormatter(LOG_FORMAT, datefmt='%H:%M:%S'))
    scout_logger.addHandler(to_console)
    return scout_logger

logger = setup_logger()

def settings_path() -> Path:
    return Path(os.environ.get(SETTINGS_ENV, SETTINGS_PATH))

@lru_cache()
def load_settings() -> dict:
    """
    Reads the YAML settings file once. A missing, unreadable or non-mapping
    file yields ``{}`` and the code defaults apply.
    """
    path = settings_path()
    if not path.exists():
        return {}

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning(f"Failed to load {path}, using defaults: {exc}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"{path} is not a mapping, using defaults")
        return {}
    return data
