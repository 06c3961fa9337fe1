"""Thread-safe HTTP client for the planetary and NEO REST APIs.

Wraps a shared requests.Session and converts every failure into a
typed FetchResult so callers can tell network errors, HTTP errors and
malformed payloads apart. Nothing is retried or cached.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Mapping, Optional

import requests

from utils.constants import DEFAULT_HTTP_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)


class FetchStatus(Enum):
    COMPLETE = auto()
    FAILED = auto()


class FetchErrorKind(Enum):
    NETWORK = auto()  # timeout, DNS, refused connection
    HTTP = auto()  # non-2xx response
    MALFORMED = auto()  # body is not the JSON object we expected


@dataclass
class FetchResult:
    """Result of a JSON fetch."""
    status: FetchStatus
    url: str
    data: Optional[dict[str, Any]] = None
    error: Optional[str] = None
    error_kind: Optional[FetchErrorKind] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == FetchStatus.COMPLETE


class Downloader:
    """Thread-safe JSON fetcher sharing one connection pool."""

    def __init__(self, timeout: float = DEFAULT_HTTP_TIMEOUT):
        self._timeout = timeout
        self._lock = threading.Lock()
        self._session: Optional[requests.Session] = None

    def _get_session(self) -> requests.Session:
        """Lazy-init a requests.Session (reuses TCP connections)."""
        with self._lock:
            if self._session is None:
                self._session = requests.Session()
                self._session.headers.update({
                    "User-Agent": USER_AGENT,
                    "Accept": "application/json",
                })
            return self._session

    def fetch_json(
        self,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> FetchResult:
        """GET ``url`` and decode a JSON object body."""
        timeout = self._timeout if timeout is None else timeout
        logger.debug("Fetching %s", url)
        try:
            session = self._get_session()
            response = session.get(
                url, params=params, headers=headers, timeout=timeout
            )
            response.raise_for_status()
            payload = response.json()

        except requests.exceptions.Timeout:
            msg = f"Request timed out after {timeout}s: {url}"
            logger.warning(msg)
            return FetchResult(
                status=FetchStatus.FAILED,
                url=url,
                error=msg,
                error_kind=FetchErrorKind.NETWORK,
            )

        except requests.exceptions.ConnectionError as e:
            msg = f"Connection error fetching {url}: {e}"
            logger.warning(msg)
            return FetchResult(
                status=FetchStatus.FAILED,
                url=url,
                error=msg,
                error_kind=FetchErrorKind.NETWORK,
            )

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            msg = f"HTTP error fetching {url}: {e}"
            logger.warning(msg)
            return FetchResult(
                status=FetchStatus.FAILED,
                url=url,
                error=msg,
                error_kind=FetchErrorKind.HTTP,
                status_code=status_code,
            )

        except ValueError as e:
            # requests raises a ValueError subclass on undecodable JSON
            msg = f"Malformed JSON from {url}: {e}"
            logger.warning(msg)
            return FetchResult(
                status=FetchStatus.FAILED,
                url=url,
                error=msg,
                error_kind=FetchErrorKind.MALFORMED,
            )

        except requests.exceptions.RequestException as e:
            msg = f"Unexpected error fetching {url}: {e}"
            logger.error(msg)
            return FetchResult(
                status=FetchStatus.FAILED,
                url=url,
                error=msg,
                error_kind=FetchErrorKind.NETWORK,
            )

        if not isinstance(payload, dict):
            msg = f"Expected a JSON object from {url}, got {type(payload).__name__}"
            logger.warning(msg)
            return FetchResult(
                status=FetchStatus.FAILED,
                url=url,
                error=msg,
                error_kind=FetchErrorKind.MALFORMED,
                status_code=response.status_code,
            )

        return FetchResult(
            status=FetchStatus.COMPLETE,
            url=url,
            data=payload,
            status_code=response.status_code,
        )

    def close(self) -> None:
        with self._lock:
            if self._session is not None:
                self._session.close()
                self._session = None
