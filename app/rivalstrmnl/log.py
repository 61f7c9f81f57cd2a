import logging
import os
from typing import Optional

from .config import load_config

log = logging.getLogger("rivalstrmnl")

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def _level_from_name(name, default: int = logging.INFO) -> int:
    return logging._nameToLevel.get(str(name).upper(), default)


def _resolve_log_level() -> int:
    env_level = os.getenv("RIVALSTRMNL_LOG_LEVEL")
    if env_level:
        return _level_from_name(env_level)

    cfg = load_config()
    return _level_from_name(cfg.get("logging", {}).get("level", "INFO"))


def configure_logging(level: Optional[int] = None, *, verbose: bool = False) -> None:
    """Set up root logging for a run.

    ``verbose`` forces DEBUG. urllib3 connection chatter stays at WARNING
    unless the run itself is at DEBUG.
    """
    if verbose:
        resolved = logging.DEBUG
    else:
        resolved = level if level is not None else _resolve_log_level()
    logging.basicConfig(level=resolved, format=DEFAULT_LOG_FORMAT)
    if resolved > logging.DEBUG:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
