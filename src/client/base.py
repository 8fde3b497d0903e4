"""
HTTP foundation for the dex-lookup API client.

BaseClient gives every concrete client:

  - A requests.Session pre-configured with exponential-backoff retries
  - Transparent disk caching of JSON responses, keyed by URL
  - A fixed-interval rate limiter that is safe to share between threads
  - A ThreadExecutor for fetching independent resources concurrently

Failures are raised, never swallowed: a 404 becomes ResourceNotFoundError,
anything else ApiRequestError.  Callers decide whether a failure is fatal.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from configs.constants import Constants
from src.client.errors import ApiRequestError, ResourceNotFoundError
from utils.custom_threading import ThreadExecutor

# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------


@dataclass
class ClientConfig:
    """
    Configuration of the API client.

    Parameters
    ----------
    cache_dir : Path
        Where raw HTTP responses are cached on disk.  A warm cache answers
        repeated lookups without any HTTP request.
    use_cache : bool
        Read cached responses.  Responses are always written back.
    calls_per_second : float
        Maximum request rate towards PokeAPI.
    max_retries : int
        How many times to retry a failed request (with exponential back-off).
    timeout : int
        Per-request timeout in seconds.
    max_workers : int
        Threads used to fetch independent resources; 1 fetches sequentially.
    """

    cache_dir: Path = field(default_factory=lambda: Path(Constants.DEFAULT_CACHE_DIR))
    use_cache: bool = True
    calls_per_second: float = 10.0
    max_retries: int = 3
    timeout: int = 30
    max_workers: int = 4

    def __post_init__(self) -> None:
        # Accept plain strings so callers can write ClientConfig(cache_dir="…")
        self.cache_dir = Path(self.cache_dir)


# ---------------------------------------------------------------------------
# Rate limiter dataclass
# ---------------------------------------------------------------------------


@dataclass
class RateLimiter:
    """
    Simple fixed-interval rate limiter.

    Tracks the timestamp of the last outbound call and sleeps just long
    enough to honour ``calls_per_second`` before each new request.  The
    lock serialises waiting threads so the interval holds across workers.
    """

    calls_per_second: float = 10.0
    _last_call: float = field(default=0.0, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def wait(self) -> None:
        """Block until it is safe to make the next request."""
        if self.calls_per_second <= 0:
            return
        interval = 1.0 / self.calls_per_second
        with self._lock:
            now = time.monotonic()
            sleep_for = interval - (now - self._last_call)
            if sleep_for > 0:
                time.sleep(sleep_for)
            self._last_call = time.monotonic()


# ---------------------------------------------------------------------------
# Base client
# ---------------------------------------------------------------------------


class BaseClient:
    """
    Cached JSON-over-HTTP client.

    Subclasses add endpoint helpers on top of :py:meth:`get_json`.
    """

    def __init__(self, config: ClientConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.config.cache_dir.mkdir(parents=True, exist_ok=True)

        self._rate_limiter = RateLimiter(config.calls_per_second)
        self._session = session if session is not None else self._build_session()
        self.executor = ThreadExecutor(max_workers=config.max_workers)
        self.logger = logging.getLogger(self.__class__.__name__)

    # ------------------------------------------------------------------
    # Session setup
    # ------------------------------------------------------------------

    def _build_session(self) -> requests.Session:
        """Build a requests.Session with retry logic and a descriptive User-Agent."""
        session = requests.Session()
        retry = Retry(
            total=self.config.max_retries,
            backoff_factor=1.0,
            status_forcelist=[429, 500, 502, 503, 504],
            respect_retry_after_header=True,
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers["User-Agent"] = Constants.USER_AGENT
        return session

    # ------------------------------------------------------------------
    # Cache path helpers
    # ------------------------------------------------------------------

    def _cache_path(self, url: str) -> Path:
        """
        Derive a filesystem-safe cache file path from a URL.

        Strips the scheme, replaces ``/`` with ``__`` and appends ``.json``.
        """
        safe = (
            url.split("://", 1)[-1]
            .strip("/")
            .replace("/", "__")
            .replace("?", "__q__")
            .replace("&", "__a__")
            .replace(":", "__c__")
        )
        # Truncate to avoid hitting OS filename length limits
        if len(safe) > 200:
            safe = safe[:160] + "__" + hashlib.md5(safe.encode()).hexdigest()[:8]
        return self.config.cache_dir / f"{safe}.json"

    def clear_cache(self) -> int:
        """Delete every cached response and return how many files were removed."""
        removed = 0
        for path in self.config.cache_dir.glob("*.json"):
            path.unlink()
            removed += 1
        self.logger.info(f"Removed {removed} cached responses from {self.config.cache_dir}")
        return removed

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    def get_json(self, url: str, use_cache: bool | None = None) -> Any:
        """
        Fetch *url* and return parsed JSON (dict or list).

        Parameters
        ----------
        url : str
            Full URL to fetch.
        use_cache : bool, optional
            Overrides ``config.use_cache`` for this call.

        Raises
        ------
        ResourceNotFoundError
            The API answered 404.
        ApiRequestError
            Any other HTTP, transport or decoding failure.
        """
        if use_cache is None:
            use_cache = self.config.use_cache
        cache_file = self._cache_path(url)

        if use_cache and cache_file.exists():
            try:
                with open(cache_file, encoding="utf-8") as fh:
                    data = json.load(fh)
                self.logger.debug(f"Cache hit: {url}")
                return data
            except (json.JSONDecodeError, OSError):
                self.logger.warning(f"Corrupt JSON cache at {cache_file}, re-fetching.")

        self.logger.debug(f"Fetching {url}")
        self._rate_limiter.wait()
        try:
            resp = self._session.get(url, timeout=self.config.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.HTTPError as exc:
            code = exc.response.status_code if exc.response is not None else "?"
            if code == 404:
                raise ResourceNotFoundError(url) from exc
            raise ApiRequestError(url, f"HTTP {code} fetching {url}: {exc}") from exc
        except (requests.RequestException, ValueError) as exc:
            raise ApiRequestError(url, f"Request / parse error for {url}: {exc}") from exc

        try:
            cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(cache_file, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False)
        except OSError as exc:
            self.logger.warning(f"Could not write cache file {cache_file}: {exc}")

        return data
