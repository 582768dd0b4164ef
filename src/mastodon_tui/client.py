from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Any

import aiohttp
import backoff
import structlog
from aiohttp import ClientTimeout

from .config import MastodonConfig
from .models import FeedItem, MastodonStatus
from .source import SourceError

logger = structlog.get_logger()


class MastodonAPIError(SourceError):
    """Custom exception for Mastodon API errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code:
            return f"{super().__str__()} (Status: {self.status_code})"
        return super().__str__()


class RateLimiter:
    """Rate limiting for API requests using async locking."""

    def __init__(self, max_requests: int, period: int) -> None:
        self.max_requests = max_requests
        self.period = period
        self.requests: list[datetime] = []
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait if necessary to maintain rate limits."""
        async with self._lock:
            now = datetime.now()
            cutoff = now - timedelta(seconds=self.period)
            self.requests = [req_time for req_time in self.requests if req_time > cutoff]

            if len(self.requests) >= self.max_requests:
                if oldest := min(self.requests, default=None):
                    sleep_time = (
                        oldest + timedelta(seconds=self.period) - now
                    ).total_seconds()
                    if sleep_time > 0:
                        logger.debug("rate_limit_sleep", duration=sleep_time)
                        await asyncio.sleep(sleep_time)

            self.requests.append(now)


class MastodonClient:
    """Asynchronous read-only Mastodon client implementing ``FeedSource``."""

    def __init__(self, config: MastodonConfig) -> None:
        self.config = config
        self.rate_limiter = RateLimiter(
            config.rate_limit_requests, config.rate_limit_period
        )
        self.timeout = ClientTimeout(total=config.request_timeout)

    @property
    def headers(self) -> dict[str, str]:
        if self.config.access_token:
            return {"Authorization": f"Bearer {self.config.access_token}"}
        return {}

    @backoff.on_exception(
        backoff.expo,
        (aiohttp.ClientError, asyncio.TimeoutError),
        max_tries=3,
        logger=logger,
    )
    async def _make_request(
        self, session: aiohttp.ClientSession, url: str, params: dict | None = None
    ) -> Any:
        """Make an HTTP request with retry and rate limiting."""
        await self.rate_limiter.acquire()

        async with session.get(url, params=params, timeout=self.timeout) as response:
            match response.status:
                case 200:
                    return await response.json()
                case 401:
                    raise MastodonAPIError("Unauthorized, check the access token", 401)
                case 404:
                    raise MastodonAPIError("Resource not found", 404)
                case 429:
                    raise MastodonAPIError("Rate limited by the server", 429)
                case _:
                    raise MastodonAPIError(
                        f"API request failed with status {response.status}",
                        response.status,
                    )

    async def _get(self, path: str, params: dict | None = None) -> Any:
        url = f"{self.config.instance_url}{path}"
        async with aiohttp.ClientSession(headers=self.headers) as session:
            try:
                return await self._make_request(session, url, params)
            except MastodonAPIError:
                raise
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error("request_error", error=str(e), url=url)
                raise MastodonAPIError(f"Request to {path} failed: {e}") from e

    async def _get_statuses(
        self, path: str, limit: int, since_id: str = "", **extra: str
    ) -> list[FeedItem]:
        params = {"limit": str(limit), **extra}
        if since_id:
            params["since_id"] = since_id

        statuses: list[MastodonStatus] = await self._get(path, params)
        try:
            items = [FeedItem.from_status(status) for status in statuses]
        except (KeyError, TypeError) as e:
            logger.error("malformed_status", error=str(e), path=path)
            raise MastodonAPIError(f"Malformed status in response: {e}") from e

        logger.debug("statuses_fetched", path=path, count=len(items), since_id=since_id)
        return items

    async def fetch_home(self, limit: int, since_id: str = "") -> list[FeedItem]:
        return await self._get_statuses("/api/v1/timelines/home", limit, since_id)

    async def fetch_public(
        self, limit: int, local_only: bool, since_id: str = ""
    ) -> list[FeedItem]:
        return await self._get_statuses(
            "/api/v1/timelines/public",
            limit,
            since_id,
            local="true" if local_only else "false",
        )

    async def fetch_trending(self, limit: int) -> list[FeedItem]:
        return await self._get_statuses("/api/v1/trends/statuses", limit)

    async def fetch_account_statuses(
        self, account_id: str, limit: int, since_id: str = ""
    ) -> list[FeedItem]:
        if not account_id:
            raise ValueError("account_id is required for account statuses")
        return await self._get_statuses(
            f"/api/v1/accounts/{account_id}/statuses", limit, since_id
        )

    async def resolve_current_account_id(self) -> str:
        """Look up the id of the account the access token belongs to."""
        account = await self._get("/api/v1/accounts/verify_credentials")
        try:
            account_id = account["id"]
        except (KeyError, TypeError) as e:
            raise MastodonAPIError("Malformed account in response") from e

        logger.info("account_resolved", account_id=account_id)
        return account_id
