from __future__ import annotations
import logging
from pathlib import Path
import yaml
from typing import Optional

from kvclient_lib.config.config import DEFAULT_CONFIG_PATH

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s]: %(message)s'


def _level_from_config(cfg_path: Path) -> int:
    level = logging.WARNING
    if not cfg_path.exists():
        return level
    try:
        with cfg_path.open('r', encoding='utf-8') as _f:
            _cfg = yaml.safe_load(_f) or {}
    except (OSError, yaml.YAMLError):
        logging.getLogger(__name__).warning('Could not read log level from %s', cfg_path)
        return level
    _lvl = _cfg.get('log_level') if isinstance(_cfg, dict) else None
    if isinstance(_lvl, str):
        _numeric = getattr(logging, _lvl.upper(), None)
        if isinstance(_numeric, int):
            level = _numeric
    return level


def configure_logging(config_path: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """Configure root logging for command line use of the client.

    The level comes from `level` when given, otherwise from `log_level` in
    the YAML client config, defaulting to WARNING. Returns a module logger.
    """
    cfg_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    default_level = _level_from_config(cfg_path)
    if level:
        _numeric = getattr(logging, level.upper(), None)
        if isinstance(_numeric, int):
            default_level = _numeric

    # Reconfigure root handlers to use the selected level and format
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=default_level, format=LOG_FORMAT)
    logger = logging.getLogger(__name__)

    # Keep known noisy libraries quiet by default
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logger.debug('Log level set to: %s', logging.getLevelName(default_level))

    return logger
