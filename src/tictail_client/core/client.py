"""HTTP client for the Tictail REST API."""

import json
import time
from typing import Optional, Dict, Any, Mapping

import httpx
from httpx import Response

from .config import Config, EXPIRY_NEVER
from .encoding import append_query, build_authorize_url, build_query
from .exceptions import (
    ConfigurationError,
    OutdatedCredentialsError,
    RequestError,
    RequestTimeoutError,
    TransportError,
)
from .logging import get_logger, mask_token
from .token import TokenState

logger = get_logger('client')

_NO_BODY = object()


class TicTailClient:
    """Client for the Tictail OAuth2 API.

    Exchanges authorization codes for access tokens, keeps the token and the
    store it belongs to, and performs authenticated calls. One instance owns
    one token; instances are not safe to share between threads.

    Example:
        >>> client = TicTailClient('my-id', 'my-secret')
        >>> url = client.get_authorize_url('code', 'https://app.example/cb')
        >>> client.authenticate(code_from_redirect)
        >>> client.call('GET', '/v1/me')
    """

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        token: Optional[str] = None,
        config: Optional[Config] = None,
    ):
        """Initialize the client.

        Args:
            client_id: OAuth client id issued by the platform
            client_secret: OAuth client secret issued by the platform
            token: Previously obtained access token, if any
            config: Endpoints and transport settings (defaults if not provided)
        """
        self._client_id = client_id
        self._client_secret = client_secret
        self.config = config or Config()
        self._token = TokenState()
        self._store_data: Optional[Dict[str, Any]] = None
        self._store_id: Optional[str] = None
        self._sync_client: Optional[httpx.Client] = None

        if token:
            self._token.access_token = token
            self._token.expires_at = self._default_expiry()

    @classmethod
    def from_config(cls, config: Config) -> 'TicTailClient':
        """Build a client from the credentials held in ``config``."""
        return cls(config.client_id, config.client_secret, config.access_token, config=config)

    @property
    def client_id(self) -> Optional[str]:
        return self._client_id

    @property
    def token_state(self) -> TokenState:
        return self._token

    @property
    def sync_client(self) -> httpx.Client:
        """Get or create the HTTP client.

        Returns:
            Configured synchronous HTTP client
        """
        if self._sync_client is None:
            if not self.config.verify_ssl:
                logger.warning("TLS certificate verification is disabled")
            self._sync_client = httpx.Client(
                headers=self.config.get_headers(),
                timeout=self.config.get_timeout(),
                follow_redirects=True,
                max_redirects=self.config.max_redirects,
                verify=self.config.verify_ssl,
            )
        return self._sync_client

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the HTTP client."""
        if self._sync_client:
            self._sync_client.close()
            self._sync_client = None

    # OAuth

    def authenticate(self, code: str) -> str:
        """Exchange ``code`` for an access token unless a usable one is cached.

        A new exchange happens when no token is cached, when the cached
        token came from a different code, or when it has expired.

        Args:
            code: Authorization code from the platform's redirect

        Returns:
            The access token

        Raises:
            ConfigurationError: If the client id or secret is missing
            TransportError: If the token endpoint cannot be reached
            ApiError: If the platform rejects the exchange
        """
        if self._token.is_valid_for(code):
            logger.trace("Reusing cached access token")
            return self._token.access_token

        if not self._client_id:
            raise ConfigurationError("Missing client_id", {'field': 'client_id'})
        if not self._client_secret:
            raise ConfigurationError("Missing client_secret", {'field': 'client_secret'})

        self._refresh_access_token(code)
        return self._token.access_token

    def _refresh_access_token(self, code: str):
        """Run the authorization-code exchange and store the result."""
        payload = {
            'client_id': self._client_id,
            'client_secret': self._client_secret,
            'code': code,
            'grant_type': 'authorization_code',
        }
        url = f"{self.config.auth_url}token"
        logger.debug(f"Exchanging authorization code at {url}")

        data = self._request('POST', url, payload)

        if not isinstance(data, dict) or not data.get('access_token'):
            raise RequestError("Token response did not contain an access token", 200, json.dumps(data))

        expires_in = data.get('expires_in')
        if expires_in is None:
            expires_at = None
        else:
            try:
                expires_at = time.time() + float(expires_in)
            except (TypeError, ValueError):
                raise RequestError(f"Invalid expires_in in token response: {expires_in!r}", 200)

        store = data.get('store')
        self._token.access_token = data['access_token']
        self._token.expires_at = expires_at
        self._token.code = code
        self._store_data = store if isinstance(store, dict) else None
        self._store_id = self._store_data.get('id') if self._store_data else None

        logger.info(f"Obtained access token for store {self._store_id}")

    def get_authorize_url(self, response_type: str, redirect_url: str) -> str:
        """Return the URL that sends the user to the platform's consent page.

        Args:
            response_type: OAuth response type, normally 'code'
            redirect_url: Where the platform redirects back with the code

        Returns:
            Authorization URL
        """
        return build_authorize_url(self.config.auth_url, response_type, self._client_id, redirect_url)

    def get_access_token(self) -> Optional[str]:
        return self._token.access_token

    def set_access_token(self, token: Optional[str], expires_at: Optional[float] = None):
        """Replace the cached access token.

        Args:
            token: Access token
            expires_at: POSIX timestamp of expiry; when omitted the
                configured ``missing_expiry`` policy decides
        """
        self._token.access_token = token
        self._token.expires_at = expires_at if expires_at is not None else self._default_expiry()

    def get_store_data(self) -> Optional[Dict[str, Any]]:
        """Store record returned by the last successful exchange."""
        if self._store_data is None:
            return None
        return dict(self._store_data)

    def get_store_id(self) -> Optional[str]:
        return self._store_id

    def _default_expiry(self) -> Optional[float]:
        if self.config.missing_expiry == EXPIRY_NEVER:
            return None
        return time.time()

    # API calls

    def call(self, method: str, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Call an API resource.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, ...)
            path: Resource path, e.g. '/v1/me'
            params: Query parameters for GET, form body otherwise

        Returns:
            Decoded JSON response

        Raises:
            OutdatedCredentialsError: If no token is set or the platform
                rejects it without an error body
            RequestError: If the platform rejects the request
            TransportError: If the request cannot be completed
        """
        if not self._token.access_token:
            raise OutdatedCredentialsError()

        headers = {'Authorization': f'Bearer {self._token.access_token}'}
        return self._request(method, f"{self.config.api_url}{path}", params, headers)

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.call('GET', path, params)

    def post(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.call('POST', path, params)

    def put(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.call('PUT', path, params)

    def delete(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.call('DELETE', path, params)

    def me(self) -> Dict[str, Any]:
        """Fetch the store the current token belongs to."""
        return self.get('/v1/me')

    # Transport

    def _request(
        self,
        method: str,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Send a request and decode the response.

        GET parameters go into the query string; for other methods they are
        sent as a form-encoded body.
        """
        method = method.upper()
        request_headers = dict(headers or {})
        content = None

        if method == 'GET':
            url = append_query(url, params)
        elif params:
            content = build_query(params)
            request_headers['Content-Type'] = 'application/x-www-form-urlencoded'

        logger.trace(
            f"{method} {url} (token: {mask_token(self._token.access_token) if headers else 'n/a'})"
        )

        operation = f"{method} {url}"
        deadline = time.monotonic() + self.config.request_timeout

        try:
            with self.sync_client.stream(method, url, content=content, headers=request_headers) as streamed:
                body = bytearray()
                self._check_deadline(deadline, operation)
                for chunk in streamed.iter_raw():
                    body.extend(chunk)
                    self._check_deadline(deadline, operation)
                # raw bytes plus the original headers, so content decoding happens once
                response = Response(
                    streamed.status_code,
                    headers=streamed.headers,
                    content=bytes(body),
                    request=streamed.request,
                )
        except httpx.ConnectTimeout as e:
            raise RequestTimeoutError(operation, self.config.connect_timeout, code=type(e).__name__)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(operation, self.config.request_timeout, code=type(e).__name__)
        except httpx.TooManyRedirects as e:
            raise TransportError(
                f"Too many redirects (limit {self.config.max_redirects})",
                code=type(e).__name__,
                reason=str(e),
            )
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP request failed: {e}", code=type(e).__name__, reason=str(e))

        logger.trace(f"Response: HTTP {response.status_code}")
        return self._handle_response(response)

    def _check_deadline(self, deadline: float, operation: str):
        """Enforce the total time budget of one request, body included."""
        if time.monotonic() > deadline:
            logger.warning(f"{operation} exceeded {self.config.request_timeout}s")
            raise RequestTimeoutError(operation, self.config.request_timeout, code='DeadlineExceeded')

    def _handle_response(self, response: Response) -> Any:
        """Decode a response, raising for anything other than HTTP 200.

        Args:
            response: HTTP response object

        Raises:
            RequestError: If the body carries an 'error' or 'message' field,
                or a 200 body is not valid JSON
            OutdatedCredentialsError: Any other non-200 response
        """
        text = response.text
        data = _NO_BODY
        if text.strip():
            try:
                data = response.json()
            except ValueError:
                data = _NO_BODY

        if response.status_code != 200:
            message = None
            if isinstance(data, dict):
                if data.get('error') is not None:
                    message = data['error']
                elif data.get('message') is not None:
                    message = data['message']

            if message is None:
                logger.warning(f"HTTP {response.status_code} without error body, token is outdated")
                raise OutdatedCredentialsError(status_code=response.status_code, response_text=text or None)

            if not isinstance(message, str):
                message = json.dumps(message)
            logger.warning(f"Request rejected with HTTP {response.status_code}: {message}")
            raise RequestError(message, status_code=response.status_code, response_text=text)

        if data is _NO_BODY:
            if text.strip():
                raise RequestError("Invalid JSON response", status_code=200, response_text=text)
            return {}
        return data
