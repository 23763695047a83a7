"""Client configuration.

A configuration is either built directly, loaded from a YAML file, or left
empty, in which case the endpoint is read once from the environment when a
client is constructed.

Example YAML::

    endpoint_url: https://kv.example.com/v0/token
    do_cache: true
    timeout: 10
    log_level: debug
"""
from __future__ import annotations
from pathlib import Path
from typing import Mapping, Optional
import logging
import os

import yaml
from pydantic import BaseModel, ValidationError as PydanticValidationError

from kvclient_lib.errors import ConfigurationError
from kvclient_lib.transport.protocol import normalize_endpoint

logger = logging.getLogger(__name__)

DEFAULT_ENV_VAR = "REPLIT_DB_URL"
DEFAULT_CONFIG_PATH = Path("kvclient.yml")


class ClientConfig(BaseModel):
    endpoint_url: Optional[str] = None
    do_cache: bool = True
    timeout: Optional[float] = 30.0
    log_level: Optional[str] = None
    env_var: str = DEFAULT_ENV_VAR


def load_config(path: Optional[Path | str] = None) -> ClientConfig:
    """Load a `ClientConfig` from YAML. A missing file yields the defaults."""
    cfg_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        logger.debug("No client config at %s, using defaults", cfg_path)
        return ClientConfig()
    with cfg_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Client config {cfg_path} must be a mapping")
    logger.debug("Loaded client config from %s", cfg_path)
    try:
        return ClientConfig(**data)
    except PydanticValidationError as err:
        raise ConfigurationError(f"Invalid client config {cfg_path}:\n{err}") from err


def resolve_endpoint(
    explicit: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    env_var: str = DEFAULT_ENV_VAR,
) -> str:
    """Return the base endpoint URL of the store.

    An explicit URL wins; otherwise `env_var` is looked up in `environ`
    (the process environment when not given).
    """
    if explicit:
        return normalize_endpoint(explicit)
    env = os.environ if environ is None else environ
    url = env.get(env_var)
    if url:
        return normalize_endpoint(url)
    raise ConfigurationError(
        f"No database URL set! Either set {env_var} in the environment or pass an endpoint URL."
    )
