"""AUR RPC API client.

Every RPC call acquires a rate-limiter permit and goes through the retry
policy. Snapshot downloads use the retry policy only.
"""

import logging
from urllib.parse import quote
from types import TracebackType
from typing import Self

import httpx
from pydantic import ValidationError

from aurctl import __version__
from aurctl.aur.rate_limit import RateLimiter
from aurctl.aur.retry import RetryConfig, retry_request
from aurctl.core.config import AurctlConfig
from aurctl.core.errors import (
    DownloadFailedError,
    InvalidInputError,
    PackageNotFoundError,
    RemoteError,
)
from aurctl.models.aur import PackageRecord, RpcResponse

logger = logging.getLogger(__name__)

AUR_URL = "https://aur.archlinux.org"

# The RPC endpoint becomes unreliable with more names per info request.
BATCH_CHUNK_SIZE = 50

# Characters of a failing response body quoted in error messages
_BODY_PREVIEW_CHARS = 200


class AurClient:
    """Client for the AUR RPC v5 API.

    Example:
        >>> async with AurClient() as client:
        ...     pkg = await client.info("yay")
        ...     print(pkg.version)
    """

    def __init__(
        self,
        *,
        max_concurrent: int = 10,
        delay_ms: int = 100,
        retry_config: RetryConfig | None = None,
        base_url: str = AUR_URL,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            max_concurrent: Maximum concurrent RPC requests.
            delay_ms: Minimum delay between RPC requests in milliseconds.
            retry_config: Retry policy settings.
            base_url: AUR web root.
            timeout: Per-request timeout in seconds.
            http_client: Preconfigured httpx client (used by tests).
        """
        self._base_url = base_url.rstrip("/")
        self._rate_limiter = RateLimiter(max_concurrent, delay_ms)
        self._retry_config = retry_config or RetryConfig()
        self._http = http_client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": f"aurctl/{__version__}"},
            follow_redirects=True,
        )

    @classmethod
    def from_config(cls, config: AurctlConfig) -> Self:
        """Create a client using the rate limits from the user configuration."""
        return cls(
            max_concurrent=config.max_concurrent_requests,
            delay_ms=config.request_delay_ms,
        )

    @property
    def rpc_url(self) -> str:
        return f"{self._base_url}/rpc/v5"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    def snapshot_url(self, name: str) -> str:
        """Get the snapshot tarball URL for a package base."""
        return f"{self._base_url}/cgit/aur.git/snapshot/{name}.tar.gz"

    def git_url(self, name: str) -> str:
        """Get the git clone URL for a package base."""
        return f"{self._base_url}/{name}.git"

    async def search(self, query: str, by: str = "name-desc") -> list[PackageRecord]:
        """Search for packages matching a query.

        Args:
            query: Search term, at least two characters.
            by: Field to search by (name, name-desc, maintainer, ...).

        Returns:
            Matching packages, possibly empty.

        Raises:
            InvalidInputError: If the query is shorter than two characters.
            RemoteError: If the API reports an error or cannot be reached.
        """
        if len(query) < 2:
            msg = "Search query must be at least 2 characters"
            raise InvalidInputError(msg)

        url = f"{self.rpc_url}/search/{quote(query, safe='')}"
        response = await self._rpc_get(url, params={"by": by})
        envelope = self._parse(response, "search")
        if envelope.is_error:
            msg = f"AUR search failed: {envelope.error or 'Unknown error'}"
            raise RemoteError(msg)
        return envelope.results

    async def info(self, name: str) -> PackageRecord:
        """Get information about a single package.

        Raises:
            PackageNotFoundError: If the AUR has no package with this name.
            RemoteError: If the API reports an error or cannot be reached.
        """
        response = await self._rpc_get(f"{self.rpc_url}/info/{quote(name, safe='')}")
        envelope = self._parse(response, "info")
        if envelope.is_error:
            msg = f"AUR info query failed: {envelope.error or 'Unknown error'}"
            raise RemoteError(msg)
        if envelope.resultcount == 0 or not envelope.results:
            raise PackageNotFoundError(name)
        return envelope.results[0]

    async def info_batch(self, names: list[str]) -> list[PackageRecord]:
        """Get information about many packages.

        Names are sent in chunks of BATCH_CHUNK_SIZE, one rate-limited
        request per chunk. Names the AUR does not know are simply absent
        from the result.

        Raises:
            RemoteError: If any chunk fails; results of other chunks are
                discarded.
        """
        records: list[PackageRecord] = []
        for start in range(0, len(names), BATCH_CHUNK_SIZE):
            chunk = names[start : start + BATCH_CHUNK_SIZE]
            logger.debug("Querying AUR info for %d packages", len(chunk))
            params = [("arg[]", name) for name in chunk]
            response = await self._rpc_get(f"{self.rpc_url}/info", params=params)

            if not response.is_success:
                msg = (
                    f"AUR batch info failed with HTTP {response.status_code}: "
                    f"{response.text[:_BODY_PREVIEW_CHARS]}"
                )
                raise RemoteError(msg)

            envelope = self._parse(response, "batch info")
            if envelope.is_error:
                msg = (
                    f"AUR batch info failed: {envelope.error or 'Unknown error'} "
                    f"(body: {response.text[:_BODY_PREVIEW_CHARS]})"
                )
                raise RemoteError(msg)
            records.extend(envelope.results)
        return records

    async def download_snapshot(self, name: str) -> bytes:
        """Download the gzip-compressed snapshot of a package base.

        Raises:
            DownloadFailedError: On a non-success status or when every
                attempt failed at the transport level.
        """
        url = self.snapshot_url(name)
        try:
            response = await retry_request(lambda: self._http.get(url), self._retry_config)
        except httpx.TransportError as e:
            msg = f"Failed to download {name} after retries: {e}"
            raise DownloadFailedError(msg) from e

        if not response.is_success:
            msg = f"Failed to download {name}: HTTP {response.status_code}"
            raise DownloadFailedError(msg)
        return response.content

    async def _rpc_get(
        self,
        url: str,
        params: dict[str, str] | list[tuple[str, str]] | None = None,
    ) -> httpx.Response:
        """Issue one rate-limited, retried GET against the RPC endpoint."""
        async with self._rate_limiter.acquire():
            try:
                return await retry_request(
                    lambda: self._http.get(url, params=params),
                    self._retry_config,
                )
            except httpx.TransportError as e:
                msg = f"AUR request to {url} failed after retries: {e}"
                raise RemoteError(msg) from e

    @staticmethod
    def _parse(response: httpx.Response, operation: str) -> RpcResponse:
        """Parse a response body as an RPC envelope.

        Raises:
            RemoteError: If the body is not a valid envelope.
        """
        try:
            return RpcResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            msg = (
                f"Failed to parse AUR {operation} response "
                f"(HTTP {response.status_code}): {response.text[:_BODY_PREVIEW_CHARS]}"
            )
            raise RemoteError(msg) from e
