import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Self


@dataclass(frozen=True)
class MastodonConfig:
    """Configuration settings for the Mastodon client and terminal app."""

    instance_url: str
    access_token: str | None = None
    request_timeout: int = 30
    rate_limit_requests: int = 300
    rate_limit_period: int = 300
    page_size: int = 40
    refresh_interval: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "instance_url", self.instance_url.rstrip("/"))

    @classmethod
    def from_toml(cls, path: Path) -> Self:
        """Create configuration from TOML file."""
        with path.open("rb") as f:
            config_data = tomllib.load(f)
        return cls(**config_data["mastodon"])
