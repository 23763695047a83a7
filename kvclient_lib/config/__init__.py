from .config import ClientConfig, load_config, resolve_endpoint

__all__ = ["ClientConfig", "load_config", "resolve_endpoint"]
