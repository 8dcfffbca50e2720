from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ConfigurationError, require_config

DEFAULT_REGION = "cn-beijing"
DEFAULT_TIMEOUT_SECONDS = 120
DEFAULT_CONNECT_TIMEOUT_SECONDS = 30
DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.7
BASE_URL_TEMPLATE = "https://ark.{region}.volces.com/api/v3/chat/completions"


@dataclass(frozen=True)
class ChatConfig:
    """Startup configuration for one ark-chat process.

    ``timeout`` bounds the wait for response data, ``connect_timeout`` the TCP/TLS
    handshake. Both are in seconds.
    """

    api_key: str
    endpoint_id: str
    region: str = DEFAULT_REGION
    timeout: int = DEFAULT_TIMEOUT_SECONDS
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        object.__setattr__(self, "api_key", require_config(self.api_key, "--apikey"))
        object.__setattr__(self, "endpoint_id", require_config(self.endpoint_id, "--endpoint"))
        object.__setattr__(self, "region", require_config(self.region, "--region"))
        if self.timeout <= 0:
            raise ConfigurationError(f"--timeout must be > 0; got {self.timeout}")
        if self.connect_timeout <= 0:
            raise ConfigurationError(f"connect timeout must be > 0; got {self.connect_timeout}")
        if self.max_tokens <= 0:
            raise ConfigurationError(f"--max-tokens must be > 0; got {self.max_tokens}")

    @property
    def url(self) -> str:
        return BASE_URL_TEMPLATE.format(region=self.region)

    @property
    def http_timeout(self) -> tuple[int, int]:
        """``(connect, read)`` pair in the form ``requests`` expects."""
        return (self.connect_timeout, self.timeout)

    def __repr__(self) -> str:
        return (
            f"ChatConfig(endpoint_id={self.endpoint_id!r}, region={self.region!r}, "
            f"timeout={self.timeout}, max_tokens={self.max_tokens}, "
            f"temperature={self.temperature})"
        )
