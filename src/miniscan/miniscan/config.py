import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .networks import NetworkRegistry

DEFAULT_NETWORK = "ethereum"
DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_MAX_PROXY_HOPS = 3


@dataclass(frozen=True)
class Config:
    registry: NetworkRegistry = field(default_factory=lambda: NetworkRegistry.from_env({}))
    default_network: str = DEFAULT_NETWORK
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = 1
    backoff_seconds: float = 0.5
    max_proxy_hops: int = DEFAULT_MAX_PROXY_HOPS
    log_level: str = "INFO"


def load_config(env: Optional[Mapping[str, str]] = None) -> Config:
    """Load configuration from environment variables."""
    if env is None:
        env = os.environ

    registry = NetworkRegistry.from_env(env)

    default_network = (env.get("DEFAULT_NETWORK") or DEFAULT_NETWORK).strip().lower()
    # Fail at startup rather than on the first request.
    registry.lookup(default_network)

    timeout = float(env.get("REQUEST_TIMEOUT", DEFAULT_TIMEOUT_SECONDS))
    max_retries = int(env.get("REQUEST_RETRIES", "1"))
    backoff = float(env.get("REQUEST_BACKOFF_SECONDS", "0.5"))
    max_hops = int(env.get("MAX_PROXY_HOPS", DEFAULT_MAX_PROXY_HOPS))
    log_level = (env.get("LOG_LEVEL") or "INFO").strip().upper()

    if timeout <= 0:
        raise ValueError("REQUEST_TIMEOUT must be positive.")
    if max_hops < 0:
        raise ValueError("MAX_PROXY_HOPS must be zero or positive.")

    return Config(
        registry=registry,
        default_network=default_network,
        request_timeout=timeout,
        max_retries=max(1, max_retries),
        backoff_seconds=backoff,
        max_proxy_hops=max_hops,
        log_level=log_level,
    )
