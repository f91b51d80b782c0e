"""HTTP requester and the top-level Ecwid API client."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional
from urllib.error import HTTPError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from .carts import CartsService
from .categories import CategoriesService
from .config import DEFAULT_BASE_URL

_RATE_LIMITED = 429
_MAX_BACKOFF = 30.0


class APIError(Exception):
    """An error response returned by the Ecwid API."""

    def __init__(
        self,
        status_code: int,
        message: str = "",
        error_code: str = "",
        body: bytes = b"",
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.error_code = error_code
        self.body = body
        text = f"ecwid api error: status {status_code}"
        if message:
            text += f": {message}"
        super().__init__(text)


def _api_error(status: int, raw: bytes) -> APIError:
    message = ""
    error_code = ""
    try:
        parsed = json.loads(raw) if raw.strip() else None
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        message = str(parsed.get("errorMessage") or "")
        error_code = str(parsed.get("errorCode") or "")
    if not message:
        message = raw.decode("utf-8", errors="replace").strip()
    return APIError(status, message, error_code, raw)


def _retry_delay(headers: Any, attempt: int) -> float:
    value = headers.get("Retry-After") if headers is not None else None
    if value is not None:
        try:
            return max(0.0, float(value))
        except ValueError:
            pass
    return min(float(2**attempt), _MAX_BACKOFF)


class Requester:
    """Sends authenticated JSON requests to one store's API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        store_id: str = "",
        token: str = "",
        max_retries: int = 0,
        timeout: float = 30.0,
        logger: Optional[logging.Logger] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.store_id = store_id
        self.max_retries = max(0, max_retries)
        self.timeout = timeout
        self._token = token
        self._logger = logger or logging.getLogger(__name__)
        self._sleep = sleep

    def get(self, path: str, query: Optional[Mapping[str, str]] = None) -> Any:
        return self._request("GET", path, query=query)

    def post(self, path: str, body: Any = None) -> Any:
        return self._request("POST", path, body=body)

    def put(self, path: str, body: Any = None) -> Any:
        return self._request("PUT", path, body=body)

    def delete(self, path: str) -> Any:
        return self._request("DELETE", path)

    def _url(self, path: str, query: Optional[Mapping[str, str]]) -> str:
        url = f"{self.base_url}/{quote(self.store_id, safe='')}{path}"
        if query:
            url += "?" + urlencode(dict(query))
        return url

    def _request(
        self,
        method: str,
        path: str,
        query: Optional[Mapping[str, str]] = None,
        body: Any = None,
    ) -> Any:
        url = self._url(path, query)
        data = json.dumps(body).encode("utf-8") if body is not None else None
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
        }
        if data is not None:
            headers["Content-Type"] = "application/json"

        attempt = 0
        while True:
            self._logger.debug("ecwid request %s %s", method, path)
            request = Request(url, data=data, headers=headers, method=method)
            try:
                with urlopen(request, timeout=self.timeout) as response:
                    raw = response.read()
            except HTTPError as exc:
                raw = exc.read() or b""
                status = exc.code
                if status == _RATE_LIMITED and attempt < self.max_retries:
                    delay = _retry_delay(exc.headers, attempt)
                    self._logger.info(
                        "rate limited, retrying %s %s in %.1fs", method, path, delay
                    )
                    self._sleep(delay)
                    attempt += 1
                    continue
                raise _api_error(status, raw) from None
            return self._decode(raw)

    @staticmethod
    def _decode(raw: bytes) -> Any:
        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise ValueError(f"decode response: {exc}") from exc


@dataclass
class Client:
    """The Ecwid API client with one attribute per domain service."""

    carts: CartsService
    categories: CategoriesService


def new_client(requester: Any) -> Client:
    """Build a client whose services all share one requester."""
    return Client(
        carts=CartsService(requester),
        categories=CategoriesService(requester),
    )