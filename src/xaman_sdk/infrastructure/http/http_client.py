from __future__ import annotations

import asyncio
import logging
import time
from functools import lru_cache
from typing import Any, Mapping, Optional

import httpx
from prometheus_client import Counter, Histogram
from pydantic import TypeAdapter, ValidationError

from ...application.error_dtos import ApiErrorDTO, FatalApiErrorDTO
from ...application.shared.serialization import RequestModel
from ...domain.errors import XamanApiError, XamanError
from ...env import XamanSettings
from ...version import __version__

logger = logging.getLogger(__name__)

USER_AGENT = f"XamanPython/{__version__}"

REQUEST_DURATION_BUCKETS = (
    [float(x) for x in range(25, 250, 25)]  # 25..225ms (25ms resolution)
    + [float(x) for x in range(250, 2001, 250)]  # 250..2000ms (250ms resolution)
    + [5000.0, 10000.0, 30000.0, float("inf")]
)

xaman_http_requests_total = Counter(
    "xaman_http_requests_total",
    "Total HTTP requests sent to the Xaman API",
    ["method", "status"],
)

xaman_http_request_retries_total = Counter(
    "xaman_http_request_retries_total",
    "HTTP requests to the Xaman API that were retried",
    ["method"],
)

xaman_http_request_duration_milliseconds = Histogram(
    "xaman_http_request_duration_milliseconds",
    "Wall time of a request to the Xaman API, retries included (ms)",
    ["method"],
    buckets=REQUEST_DURATION_BUCKETS,
)


@lru_cache(maxsize=None)
def _adapter(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


def decode_error_response(response: httpx.Response) -> XamanApiError:
    """Map an unsuccessful response onto an ``XamanApiError``.

    Tries the fatal envelope first, then the nested ``error`` envelope, and
    falls back to the HTTP reason phrase.
    """
    status_code = response.status_code
    text = response.text

    try:
        fatal = FatalApiErrorDTO.model_validate_json(text)
        if fatal.message.strip():
            return XamanApiError(
                status_code, fatal.message, fatal.reference, fatal.code
            )
    except ValidationError:
        logger.debug("No fatal error envelope in %d response body", status_code)

    try:
        nested = ApiErrorDTO.model_validate_json(text)
        reference = nested.error.reference
        code = nested.error.code
        message = (
            f"Error code {code}, see Xaman Dev Console, reference: '{reference}'."
        )
        return XamanApiError(status_code, message, reference, code)
    except ValidationError:
        logger.debug("No error envelope in %d response body", status_code)

    return XamanApiError(status_code, response.reason_phrase or "Unknown error")


class XamanHttpClient:
    """Reliable JSON request sender for the Xaman REST API.

    - Normalizes base URLs and paths.
    - Injects credential and standard headers, applies the configured timeout.
    - Retries 5xx responses and transport failures with linear backoff
      (``retry_delay * attempt``); never retries 4xx responses.
    - Decodes error envelopes into ``XamanApiError``.
    """

    def __init__(
        self,
        settings: XamanSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._base_url = settings.base_url.rstrip("/")
        self._transport = transport

    @property
    def settings(self) -> XamanSettings:
        return self._settings

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    def build_client(
        self,
        use_credentials: bool = True,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.AsyncClient:
        """Build a pre-configured client; the caller owns and closes it."""
        headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        if use_credentials:
            headers["X-API-Key"] = self._settings.api_key
            headers["X-API-Secret"] = self._settings.api_secret
        if extra_headers:
            headers.update(extra_headers)
        return httpx.AsyncClient(
            headers=headers,
            timeout=self._settings.http_timeout,
            transport=self._transport,
        )

    async def send(
        self,
        method: str,
        path: str,
        response_type: Any,
        *,
        body: Any = None,
        use_credentials: bool = True,
        client: Optional[httpx.AsyncClient] = None,
    ) -> Any:
        start_time = time.perf_counter()
        try:
            if client is not None:
                return await self._send_with(
                    client, method, path, response_type, body
                )
            async with self.build_client(use_credentials) as owned:
                return await self._send_with(owned, method, path, response_type, body)
        finally:
            elapsed = (time.perf_counter() - start_time) * 1000
            xaman_http_request_duration_milliseconds.labels(method=method).observe(
                elapsed
            )

    async def get(self, path: str, response_type: Any, **kwargs: Any) -> Any:
        return await self.send("GET", path, response_type, **kwargs)

    async def get_public(self, path: str, response_type: Any) -> Any:
        return await self.send("GET", path, response_type, use_credentials=False)

    async def post(
        self, path: str, response_type: Any, body: Any, **kwargs: Any
    ) -> Any:
        return await self.send("POST", path, response_type, body=body, **kwargs)

    async def delete(self, path: str, response_type: Any, **kwargs: Any) -> Any:
        return await self.send("DELETE", path, response_type, **kwargs)

    async def _send_with(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        response_type: Any,
        body: Any,
    ) -> Any:
        try:
            response = await self._send_with_retries(client, method, path, body)
            if response is None:
                raise XamanApiError(
                    500, "Unable to send request to Xaman API after multiple retries"
                )
            if not response.is_success:
                raise decode_error_response(response)
            return self._deserialize(response, path, response_type)
        except asyncio.CancelledError:
            logger.debug("Request cancelled for endpoint: %s", path)
            raise
        except XamanError:
            raise
        except Exception as e:
            logger.exception("Unexpected error from Xaman API [%s:%s]", method, path)
            raise XamanApiError(500, f"Unexpected error from Xaman API: {e}") from e

    async def _send_with_retries(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        body: Any,
    ) -> Optional[httpx.Response]:
        max_retries = self._settings.max_retries
        retry_count = 0
        response: Optional[httpx.Response] = None

        while True:
            try:
                response = await client.request(
                    method, self._url(path), **self._body_kwargs(body)
                )
            except httpx.TransportError as e:
                xaman_http_requests_total.labels(method=method, status="error").inc()
                if retry_count >= max_retries:
                    logger.warning(
                        "Giving up on %s %s after %d retries: %s",
                        method,
                        path,
                        retry_count,
                        e,
                    )
                    return response
                logger.info("Transport error on %s %s, retrying: %s", method, path, e)
            else:
                xaman_http_requests_total.labels(
                    method=method, status=str(response.status_code)
                ).inc()
                if response.status_code < 500 or retry_count >= max_retries:
                    return response
                logger.info(
                    "Server error %d on %s %s, retrying",
                    response.status_code,
                    method,
                    path,
                )

            retry_count += 1
            xaman_http_request_retries_total.labels(method=method).inc()
            await asyncio.sleep(self._settings.retry_delay * retry_count)

    @staticmethod
    def _body_kwargs(body: Any) -> dict[str, Any]:
        if body is None:
            return {}
        if isinstance(body, RequestModel):
            return {"json": body.to_request_body()}
        if isinstance(body, str):
            return {
                "content": body.encode("utf-8"),
                "headers": {"Content-Type": "application/json"},
            }
        return {"json": body}

    @staticmethod
    def _deserialize(response: httpx.Response, path: str, response_type: Any) -> Any:
        data = response.json() if response.content else None
        if data is None:
            raise XamanApiError(
                500, f"Unexpected response for {path}: Unable to deserialize response"
            )
        try:
            return _adapter(response_type).validate_python(data)
        except ValidationError as e:
            raise XamanApiError(
                500, f"Unexpected response for {path}: {e}"
            ) from e

