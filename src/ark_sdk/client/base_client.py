"""
Base service clients using httpx.

A service client is bound to one base URL and carries headers, cookies and
an auth token across calls. Verb calls return ArkResponse for every HTTP
status; only network failures raise (ArkTransportError).
"""
import inspect
import logging
import time
from typing import Any, Dict, Optional, Union

import httpx

from ..errors import ArkTransportError
from ..masking import mask_sensitive
from .config import (
    ClientConfig,
    ResolvedConfig,
    USER_AGENT,
    default_serializer,
    normalize_base_url,
    resolve_config,
    validate_base_url,
)
from .request_builder import build_auth_header, build_body, build_headers, build_url
from .tracing import trace_request, trace_response
from .types import ArkResponse, HttpMethod, QueryParams

logger = logging.getLogger(__name__)


def _httpx_timeout(config: ResolvedConfig) -> httpx.Timeout:
    return httpx.Timeout(
        connect=config.timeout.connect,
        read=config.timeout.read,
        write=config.timeout.write,
        pool=config.timeout.connect,
    )


class _ServiceClientBase:
    """State and request shaping shared by the sync and async clients."""

    _client: Union[httpx.Client, httpx.AsyncClient]

    def __init__(self, config: ResolvedConfig, http_client: Union[httpx.Client, httpx.AsyncClient]):
        self._config = config
        self._client = http_client
        self._base_url = config.base_url
        self._headers: Dict[str, str] = dict(config.headers)
        self._token = ""
        self._token_type = config.token_type
        self._auth_header_name = config.auth_header_name
        self._refresh_callback = config.refresh_callback
        self._closed = False
        if config.token:
            self.update_token(config.token, config.token_type)
        if config.cookies:
            self.update_cookies(config.cookies)

    # -- base URL ---------------------------------------------------------

    @property
    def base_url(self) -> str:
        return self._base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        base_url = normalize_base_url(value)
        validate_base_url(base_url)
        logger.debug(f"{type(self).__name__}.base_url: {self._base_url} -> {base_url}")
        self._base_url = base_url

    # -- headers ----------------------------------------------------------

    @property
    def headers(self) -> Dict[str, str]:
        """Copy of the headers sent on every call."""
        return dict(self._headers)

    def set_header(self, name: str, value: str) -> None:
        self._headers[name] = value

    def set_headers(self, headers: Dict[str, str]) -> None:
        """Replace all headers."""
        self._headers = dict(headers)

    def update_headers(self, headers: Dict[str, str]) -> None:
        """Merge headers over the current ones."""
        self._headers.update(headers)

    # -- token ------------------------------------------------------------

    @property
    def token(self) -> str:
        return self._token

    @property
    def token_type(self) -> str:
        return self._token_type

    @property
    def auth_header_name(self) -> str:
        return self._auth_header_name

    def update_token(self, token: str, token_type: Optional[str] = None) -> None:
        """
        Install a new auth token.

        An empty token leaves the auth header untouched.
        """
        if token_type is not None:
            self._token_type = token_type
        self._token = token
        auth_header = build_auth_header(token, self._token_type, self._auth_header_name)
        if auth_header:
            self._headers.update(auth_header)
            logger.debug(
                f"{type(self).__name__}.update_token: token={mask_sensitive(token)}, "
                f"type={self._token_type}"
            )

    # -- cookies ----------------------------------------------------------

    def set_cookie(self, name: str, value: str) -> None:
        self._client.cookies.set(name, value)

    def set_cookies(self, cookies: Dict[str, str]) -> None:
        """Replace all cookies."""
        self._client.cookies.clear()
        for name, value in cookies.items():
            self._client.cookies.set(name, value)

    def update_cookies(self, cookies: Dict[str, str]) -> None:
        """Add or overwrite the given cookies, keeping the rest."""
        for name, value in cookies.items():
            self._client.cookies.set(name, value)

    def get_cookies(self) -> Dict[str, str]:
        return {cookie.name: cookie.value for cookie in self._client.cookies.jar}

    @property
    def cookies(self) -> Dict[str, str]:
        """Copy of the cookies sent on every call."""
        return self.get_cookies()

    # -- refresh ----------------------------------------------------------

    @property
    def refresh_callback(self):
        return self._refresh_callback

    @refresh_callback.setter
    def refresh_callback(self, callback) -> None:
        self._refresh_callback = callback

    # -- request shaping --------------------------------------------------

    def _prepare(
        self,
        method: HttpMethod,
        route: str,
        json: Optional[Any],
        params: Optional[QueryParams],
        headers: Optional[Dict[str, str]],
        timeout: Optional[float],
    ) -> Dict[str, Any]:
        if self._closed:
            raise RuntimeError("Client has been closed")

        url = build_url(self._base_url, route, params)
        request_headers = build_headers({"User-Agent": USER_AGENT, **self._headers}, headers)
        request_body = build_body(json, default_serializer)

        logger.info(f"Running request to {url}")
        if self._config.trace:
            trace_request(method, url, request_headers, json)

        kwargs: Dict[str, Any] = {
            "method": method,
            "url": url,
            "headers": request_headers,
            "content": request_body,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout
        return kwargs

    def _to_response(self, url: str, response: httpx.Response, started: float) -> ArkResponse:
        elapsed_ms = (time.monotonic() - started) * 1000
        logger.debug(
            f"Request to {url} took {elapsed_ms:.0f}ms and returned {response.status_code}"
        )

        response_headers = dict(response.headers)
        text = response.text
        if text:
            try:
                data = default_serializer.deserialize(text)
            except ValueError:
                data = text
        else:
            data = None

        status_text = response.reason_phrase or ""
        if self._config.trace:
            trace_response(url, response.status_code, status_text, response_headers, data)

        return ArkResponse(
            status=response.status_code,
            status_text=status_text,
            headers=response_headers,
            data=data,
            text=text,
            ok=200 <= response.status_code < 300,
            url=url,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self._base_url!r})"


class SyncServiceClient(_ServiceClientBase):
    """Synchronous service client."""

    _client: httpx.Client

    def __init__(
        self,
        config: ClientConfig,
        httpx_client: Optional[httpx.Client] = None,
    ):
        resolved = resolve_config(config)
        if httpx_client is None:
            httpx_client = httpx.Client(
                timeout=_httpx_timeout(resolved),
                verify=resolved.verify_ssl,
            )
        super().__init__(resolved, httpx_client)

    def request(
        self,
        method: HttpMethod = "GET",
        route: str = "",
        json: Optional[Any] = None,
        params: Optional[QueryParams] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> ArkResponse:
        """
        Make an HTTP request relative to the base URL.

        Raises:
            ArkTransportError: On network failure
        """
        kwargs = self._prepare(method, route, json, params, headers, timeout)
        started = time.monotonic()
        try:
            response = self._client.request(**kwargs)
        except httpx.RequestError as e:
            logger.error(f"SyncServiceClient.request: {method} {kwargs['url']} failed: {e}")
            raise ArkTransportError(method, kwargs["url"], e) from e
        return self._to_response(kwargs["url"], response, started)

    def get(self, route: str = "", **kwargs: Any) -> ArkResponse:
        """GET request."""
        return self.request("GET", route, **kwargs)

    def post(self, route: str = "", **kwargs: Any) -> ArkResponse:
        """POST request."""
        return self.request("POST", route, **kwargs)

    def put(self, route: str = "", **kwargs: Any) -> ArkResponse:
        """PUT request."""
        return self.request("PUT", route, **kwargs)

    def patch(self, route: str = "", **kwargs: Any) -> ArkResponse:
        """PATCH request."""
        return self.request("PATCH", route, **kwargs)

    def delete(self, route: str = "", **kwargs: Any) -> ArkResponse:
        """DELETE request."""
        return self.request("DELETE", route, **kwargs)

    def options(self, route: str = "", **kwargs: Any) -> ArkResponse:
        """OPTIONS request."""
        return self.request("OPTIONS", route, **kwargs)

    def refresh_connection(self) -> bool:
        """
        Run the bound refresh callback once.

        Returns:
            False when no callback is bound, True after a successful refresh.
            Callback errors propagate.
        """
        if self._refresh_callback is None:
            logger.debug("SyncServiceClient.refresh_connection: no refresh callback bound")
            return False
        logger.info(f"SyncServiceClient.refresh_connection: refreshing {self._base_url}")
        self._refresh_callback(self)
        return True

    def close(self) -> None:
        """Close the client."""
        self._closed = True
        self._client.close()

    def __enter__(self) -> "SyncServiceClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class AsyncServiceClient(_ServiceClientBase):
    """Asynchronous service client."""

    _client: httpx.AsyncClient

    def __init__(
        self,
        config: ClientConfig,
        httpx_client: Optional[httpx.AsyncClient] = None,
    ):
        resolved = resolve_config(config)
        if httpx_client is None:
            httpx_client = httpx.AsyncClient(
                timeout=_httpx_timeout(resolved),
                verify=resolved.verify_ssl,
            )
        super().__init__(resolved, httpx_client)

    async def request(
        self,
        method: HttpMethod = "GET",
        route: str = "",
        json: Optional[Any] = None,
        params: Optional[QueryParams] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> ArkResponse:
        """
        Make an HTTP request relative to the base URL.

        Raises:
            ArkTransportError: On network failure
        """
        kwargs = self._prepare(method, route, json, params, headers, timeout)
        started = time.monotonic()
        try:
            response = await self._client.request(**kwargs)
        except httpx.RequestError as e:
            logger.error(f"AsyncServiceClient.request: {method} {kwargs['url']} failed: {e}")
            raise ArkTransportError(method, kwargs["url"], e) from e
        return self._to_response(kwargs["url"], response, started)

    async def get(self, route: str = "", **kwargs: Any) -> ArkResponse:
        """GET request."""
        return await self.request("GET", route, **kwargs)

    async def post(self, route: str = "", **kwargs: Any) -> ArkResponse:
        """POST request."""
        return await self.request("POST", route, **kwargs)

    async def put(self, route: str = "", **kwargs: Any) -> ArkResponse:
        """PUT request."""
        return await self.request("PUT", route, **kwargs)

    async def patch(self, route: str = "", **kwargs: Any) -> ArkResponse:
        """PATCH request."""
        return await self.request("PATCH", route, **kwargs)

    async def delete(self, route: str = "", **kwargs: Any) -> ArkResponse:
        """DELETE request."""
        return await self.request("DELETE", route, **kwargs)

    async def options(self, route: str = "", **kwargs: Any) -> ArkResponse:
        """OPTIONS request."""
        return await self.request("OPTIONS", route, **kwargs)

    async def refresh_connection(self) -> bool:
        """
        Run the bound refresh callback once; the callback may be sync or async.

        Returns:
            False when no callback is bound, True after a successful refresh.
            Callback errors propagate.
        """
        if self._refresh_callback is None:
            logger.debug("AsyncServiceClient.refresh_connection: no refresh callback bound")
            return False
        logger.info(f"AsyncServiceClient.refresh_connection: refreshing {self._base_url}")
        result = self._refresh_callback(self)
        if inspect.isawaitable(result):
            await result
        return True

    async def close(self) -> None:
        """Close the client."""
        self._closed = True
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncServiceClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
