"""AUR access: RPC client, rate limiting, retries and package downloads."""

from aurctl.aur.client import AurClient
from aurctl.aur.download import PackageFetcher
from aurctl.aur.rate_limit import RateLimiter
from aurctl.aur.retry import RetryConfig, retry_request

__all__ = ["AurClient", "PackageFetcher", "RateLimiter", "RetryConfig", "retry_request"]
