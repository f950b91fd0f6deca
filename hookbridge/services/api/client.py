"""
API Client

Thin async HTTP client for calling a platform's REST API once an
integration holds tokens. Adds base URL and default headers, client-side
rate limiting, retry with backoff on transient failures, and interceptor
hooks around every request.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, TypeVar, Union

import httpx

from hookbridge.config import get_settings
from hookbridge.core.exceptions import ApiError
from hookbridge.core.retry import calculate_retry_delay, default_api_retry_policy
from hookbridge.models.contracts.api import ApiConfig
from hookbridge.models.contracts.webhooks import RetryPolicy
from hookbridge.services.api.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({408, 429})


@dataclass
class ApiRequest:
    """Outbound request as seen by request interceptors"""
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] | None = None
    json: Any = None
    timeout: int | None = None  # ms


@dataclass
class ApiResponse:
    """Successful response (headers lower-cased)"""
    data: Any
    status: int
    status_text: str
    headers: dict[str, str]


T = TypeVar("T")
Interceptor = Callable[[T], Union[T, Awaitable[T]]]


def is_retryable_status(status: int) -> bool:
    return status >= 500 or status in RETRYABLE_STATUS_CODES


class ApiClient:
    """
    HTTP client bound to one platform API.

    Raises ApiError for every failure: ``HTTP_<status>`` when the platform
    answered, ``REQUEST_FAILED`` for network errors.
    """

    def __init__(self, config: ApiConfig, http_client: httpx.AsyncClient | None = None):
        self.config = config
        self.rate_limiter = RateLimiter(config.rate_limit) if config.rate_limit else None
        self._request_interceptors: list[Interceptor[ApiRequest]] = []
        self._response_interceptors: list[Interceptor[ApiResponse]] = []
        self._error_interceptors: list[Interceptor[ApiError]] = []

        settings = get_settings()
        self._timeout_ms = config.timeout or settings.api_timeout_ms
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(
                timeout=self._timeout_ms / 1000,
                headers={
                    "Content-Type": "application/json",
                    "User-Agent": settings.user_agent,
                },
            )
        self.http = http_client

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http.aclose()

    @property
    def retry_policy(self) -> RetryPolicy:
        return self.config.retry_policy or default_api_retry_policy()

    # ==================== INTERCEPTORS ====================

    def add_request_interceptor(self, interceptor: Interceptor[ApiRequest]) -> None:
        self._request_interceptors.append(interceptor)

    def add_response_interceptor(self, interceptor: Interceptor[ApiResponse]) -> None:
        self._response_interceptors.append(interceptor)

    def add_error_interceptor(self, interceptor: Interceptor[ApiError]) -> None:
        self._error_interceptors.append(interceptor)

    # ==================== REQUESTS ====================

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        json: Any = None,
        timeout: int | None = None,
    ) -> ApiResponse:
        """
        Send a request, retrying transient failures.

        Args:
            method: HTTP method
            url: Path relative to base_url, or an absolute URL
            headers: Extra headers for this request
            params: Query parameters
            json: JSON body
            timeout: Per-request timeout (ms)

        Raises:
            ApiError: Request failed after retries
        """
        if self.rate_limiter:
            await self.rate_limiter.wait_for_slot()

        api_request = ApiRequest(
            method=method.upper(),
            url=url,
            headers=dict(headers or {}),
            params=params,
            json=json,
            timeout=timeout,
        )
        for interceptor in self._request_interceptors:
            api_request = await _apply(interceptor, api_request)

        try:
            response = await self._execute_with_retry(api_request)
        except ApiError as e:
            error = e
            for interceptor in self._error_interceptors:
                error = await _apply(interceptor, error)
            if error is e:
                raise
            raise error from e

        api_response = ApiResponse(
            data=_response_data(response),
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=_normalize_headers(response.headers),
        )
        for interceptor in self._response_interceptors:
            api_response = await _apply(interceptor, api_response)
        return api_response

    async def get(self, url: str, **kwargs: Any) -> ApiResponse:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, json: Any = None, **kwargs: Any) -> ApiResponse:
        return await self.request("POST", url, json=json, **kwargs)

    async def put(self, url: str, json: Any = None, **kwargs: Any) -> ApiResponse:
        return await self.request("PUT", url, json=json, **kwargs)

    async def patch(self, url: str, json: Any = None, **kwargs: Any) -> ApiResponse:
        return await self.request("PATCH", url, json=json, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> ApiResponse:
        return await self.request("DELETE", url, **kwargs)

    # ==================== INTERNALS ====================

    def build_url(self, url: str) -> str:
        if url.startswith(("http://", "https://")):
            return url
        return f"{self.config.base_url.rstrip('/')}/{url.lstrip('/')}"

    async def _execute_with_retry(self, api_request: ApiRequest) -> httpx.Response:
        policy = self.retry_policy
        timeout_ms = api_request.timeout or self._timeout_ms

        attempt = 0
        while True:
            try:
                response = await self.http.request(
                    api_request.method,
                    self.build_url(api_request.url),
                    headers={**self.config.headers, **api_request.headers},
                    params=api_request.params,
                    json=api_request.json,
                    timeout=timeout_ms / 1000,
                )
                if not response.is_error:
                    return response
                error = self._http_error(response)
            except httpx.TransportError as e:
                error = ApiError(
                    "REQUEST_FAILED",
                    str(e) or type(e).__name__,
                    retryable=True,
                )

            if not error.retryable or attempt >= policy.max_retries:
                logger.error(
                    f"{api_request.method} {api_request.url} failed: {error.message}",
                    extra={"code": error.code, "status": error.status, "attempts": attempt + 1},
                )
                raise error

            delay_ms = calculate_retry_delay(policy, attempt)
            logger.warning(
                f"{api_request.method} {api_request.url} failed ({error.code}), "
                f"retrying in {delay_ms:.0f}ms"
            )
            await asyncio.sleep(delay_ms / 1000)
            attempt += 1

    @staticmethod
    def _http_error(response: httpx.Response) -> ApiError:
        return ApiError(
            f"HTTP_{response.status_code}",
            response.reason_phrase or f"HTTP {response.status_code}",
            status=response.status_code,
            response=ApiResponse(
                data=_response_data(response),
                status=response.status_code,
                status_text=response.reason_phrase,
                headers=_normalize_headers(response.headers),
            ),
            retryable=is_retryable_status(response.status_code),
        )


async def _apply(interceptor: Interceptor[T], value: T) -> T:
    result = interceptor(value)
    if inspect.isawaitable(result):
        result = await result
    return result


def _response_data(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _normalize_headers(headers: httpx.Headers) -> dict[str, str]:
    return {key.lower(): value for key, value in headers.items()}


__all__ = [
    "ApiClient",
    "ApiRequest",
    "ApiResponse",
    "is_retryable_status",
]
