"""
OneSpan Sign Client

Thin wrapper around the OneSpan Sign account administration API.
Handles access token retrieval and caching, request building, and
conversion of failed calls into ApiError values.

Operations never raise for API failures. They return an ApiResult
whose ``error`` says which stage failed:

    - "unable to create the API request" (bad URL, or no access token)
    - "unable to send the API request" (network failure)
    - "invalid response from the API" (non-200 status with a JSON body)
    - "unable to parse the error response" (non-200 status, body not JSON)
    - "unable to unmarshal the API response" (200 status, undecodable body)
    - "unable to marshal the request body"
"""

import json
import logging
import threading
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import urlsplit, urlunsplit

import requests

from .exceptions import ApiError, TokenError
from .types import (
    AccessToken,
    DataManagementPolicy,
    ExpiryTimeConfiguration,
    SigningLogo,
    SigningTheme,
    json_number,
    number_literal,
    signing_logos_from_list,
    signing_themes_from_dict,
    signing_themes_to_dict,
)

logger = logging.getLogger(__name__)

API_VERSION = '11.47'
ACCESS_TOKEN_PATH = '/apitoken/clientApp/accessToken'

SIGNING_LOGOS_PATH = '/api/account/admin/signingLogos'
SIGNING_THEMES_PATH = '/api/account/signingThemes'
DATA_MANAGEMENT_POLICY_PATH = '/api/dataRetentionSettings/dataManagementPolicy'
EXPIRY_TIME_CONFIGURATION_PATH = '/api/dataRetentionSettings/expiryTimeConfiguration'

# Request timeout
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class ApiClientConfig:
    """Connection settings for an ApiClient."""
    base_url: str
    client_id: str
    client_secret: str = field(repr=False)
    user_agent: str
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class ApiResult:
    """
    Outcome of a client operation.

    Exactly one of ``data`` (may be None for calls without a payload)
    or ``error`` is meaningful, depending on ``success``.
    """
    data: Any = None
    error: Optional[ApiError] = None

    @property
    def success(self) -> bool:
        return self.error is None


def decode_json(content: Union[bytes, str]) -> Any:
    """Decode a JSON body without routing numbers through float."""
    return json.loads(content, parse_float=Decimal)


class _NumberText(str):
    """A JSON number kept as its source text."""


def indent_json(value: Any, level: int = 0) -> str:
    """
    Render decoded JSON indented with tabs.

    Numbers decoded as _NumberText are written back verbatim.
    """
    if isinstance(value, _NumberText):
        return str(value)
    inner = "\t" * (level + 1)
    if isinstance(value, dict):
        if not value:
            return "{}"
        items = [f"{inner}{json.dumps(key, ensure_ascii=False)}: {indent_json(item, level + 1)}"
                 for key, item in value.items()]
        return "{\n" + ",\n".join(items) + "\n" + "\t" * level + "}"
    if isinstance(value, list):
        if not value:
            return "[]"
        items = [f"{inner}{indent_json(item, level + 1)}" for item in value]
        return "[\n" + ",\n".join(items) + "\n" + "\t" * level + "]"
    return json.dumps(value, ensure_ascii=False)


def get_api_error(response: requests.Response) -> ApiError:
    """
    Build an ApiError from a non-success response.

    The detail is the JSON error body, pretty-printed with tabs.
    """
    try:
        body = response.content
    except requests.exceptions.RequestException as e:
        return ApiError('unable to read the error response', str(e), response)

    try:
        parsed = json.loads(body, parse_float=_NumberText, parse_int=_NumberText)
    except ValueError as e:
        return ApiError(
            'unable to parse the error response',
            f"{e} (HTTP {response.status_code})",
            response
        )

    return ApiError(
        'invalid response from the API',
        indent_json(parsed),
        response
    )


class ApiClient:
    """
    Client for the OneSpan Sign account administration API.

    Provides methods for:
        - Account signing logos (get, update)
        - Account signing themes (get, create, update, delete)
        - Data management policy (get, update)
        - Expiry time configuration (get, update)

    The access token is fetched on first use and reused until its expiry
    time is reached. The check-then-fetch sequence runs under a lock so
    concurrent callers trigger at most one token request.
    """

    def __init__(
        self,
        config: ApiClientConfig,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time
    ):
        self._config = config
        self._session = session or requests.Session()
        self._clock = clock
        self._token: Optional[AccessToken] = None
        self._token_lock = threading.Lock()

        parts = urlsplit(config.base_url)
        self._scheme = parts.scheme
        self._netloc = parts.netloc

    @property
    def client_id(self) -> str:
        return self._config.client_id

    def _url(self, path: str) -> str:
        return urlunsplit((self._scheme, self._netloc, path, '', ''))

    # =========================================================================
    # Authentication
    # =========================================================================

    def _get_auth_token(self) -> str:
        """
        Return a usable access token, fetching a new one when needed.

        A token is usable only while now < expiry. A token expiring
        exactly now is replaced.

        Raises:
            TokenError: if a new token cannot be obtained
        """
        with self._token_lock:
            token = self._token
            if token is not None and self._clock() < token.expires_at:
                return token.value

            self._token = None
            self._token = self._fetch_access_token()
            return self._token.value

    def _fetch_access_token(self) -> AccessToken:
        payload = {
            'clientId': self._config.client_id,
            'secret': self._config.client_secret,
            'type': 'OWNER',
        }
        headers = {
            'Accept': 'application/json',
            'Content-Type': 'application/json',
            'User-Agent': self._config.user_agent,
        }

        try:
            response = self._session.post(
                self._url(ACCESS_TOKEN_PATH),
                data=json.dumps(payload),
                headers=headers,
                timeout=self._config.timeout
            )
        except requests.exceptions.RequestException as e:
            raise TokenError(f"unable to request an access token: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"OneSpan Sign access token request failed with HTTP {response.status_code}")
            raise TokenError(f"access token request failed with HTTP {response.status_code}")

        try:
            body = decode_json(response.content)
        except ValueError as e:
            raise TokenError(f"unable to decode the access token response: {e}") from e

        if not isinstance(body, dict):
            raise TokenError("unable to decode the access token response: expected a JSON object")

        access_token = body.get('accessToken')
        if not access_token or not isinstance(access_token, str):
            raise TokenError("unable to retrieve an access token for OneSpan's API")

        try:
            expires_at = number_literal(json_number(body.get('expiresAt')))
        except ValueError as e:
            raise TokenError(f"invalid access token expiry: {e}") from e

        logger.info(f"Retrieved a OneSpan Sign access token for client {self._config.client_id} "
                    f"(expires at {expires_at})")
        return AccessToken(value=access_token, expires_at=expires_at)

    # =========================================================================
    # Requests
    # =========================================================================

    def make_api_request(self, method: str, path: str, body: Optional[Union[str, bytes]] = None) -> ApiResult:
        """
        Make an authenticated request to the OneSpan Sign API.

        Args:
            method: HTTP method
            path: Path of the API resource (not a full URL)
            body: Encoded JSON request body, if any

        Returns:
            ApiResult with the raw ``requests.Response`` as data
        """
        try:
            token = self._get_auth_token()
        except TokenError as e:
            return ApiResult(error=ApiError('unable to create the API request', str(e)))

        headers = {
            'Accept': f"application/json; esl-api-version={API_VERSION}",
            'Content-Type': 'application/json',
            'User-Agent': self._config.user_agent,
            'Authorization': f"Bearer {token}",
        }

        try:
            request = requests.Request(method, self._url(path), headers=headers, data=body)
            prepared = self._session.prepare_request(request)
        except (ValueError, requests.exceptions.RequestException) as e:
            return ApiResult(error=ApiError('unable to create the API request', str(e)))

        try:
            response = self._session.send(prepared, timeout=self._config.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"OneSpan Sign {method} {path} failed: {e}")
            return ApiResult(error=ApiError('unable to send the API request', str(e)))

        logger.debug(f"OneSpan Sign {method} {path} -> HTTP {response.status_code}")
        return ApiResult(data=response)

    def _get(self, path: str, decoder: Callable[[Any], Any]) -> ApiResult:
        result = self.make_api_request('GET', path)
        if not result.success:
            return result

        response = result.data
        if response.status_code != 200:
            logger.error(f"OneSpan Sign GET {path} returned HTTP {response.status_code}")
            return ApiResult(error=get_api_error(response))

        try:
            data = decoder(decode_json(response.content))
        except (ValueError, TypeError, AttributeError) as e:
            return ApiResult(error=ApiError('unable to unmarshal the API response', str(e), response))

        return ApiResult(data=data)

    def _send(self, method: str, path: str, build_payload: Optional[Callable[[], Any]] = None) -> ApiResult:
        body = None
        if build_payload is not None:
            try:
                body = json.dumps(build_payload())
            except (ValueError, TypeError) as e:
                return ApiResult(error=ApiError('unable to marshal the request body', str(e)))

        result = self.make_api_request(method, path, body)
        if not result.success:
            return result

        response = result.data
        if response.status_code != 200:
            logger.error(f"OneSpan Sign {method} {path} returned HTTP {response.status_code}")
            return ApiResult(error=get_api_error(response))

        return ApiResult()

    # =========================================================================
    # Account signing logos
    # =========================================================================

    def get_account_signing_logos(self) -> ApiResult:
        """
        Retrieve the account's customized Signing Ceremony logos.

        Returns:
            ApiResult with a list of SigningLogo
        """
        return self._get(SIGNING_LOGOS_PATH, signing_logos_from_list)

    def update_account_signing_logos(self, logos: Optional[List[SigningLogo]]) -> ApiResult:
        """
        Add, update or delete the account's customized logos.

        The list replaces the current logos. An empty list is sent as
        ``[]`` and removes them all.
        """
        return self._send('POST', SIGNING_LOGOS_PATH, lambda: [logo.to_dict() for logo in logos or []])

    # =========================================================================
    # Account signing themes
    # =========================================================================

    def get_account_signing_themes(self) -> ApiResult:
        """
        Retrieve the account's customized signing themes.

        Returns:
            ApiResult with a dict of theme name to SigningTheme
        """
        return self._get(SIGNING_THEMES_PATH, signing_themes_from_dict)

    def create_account_signing_themes(self, themes: Dict[str, SigningTheme]) -> ApiResult:
        return self._send('POST', SIGNING_THEMES_PATH, lambda: signing_themes_to_dict(themes))

    def update_account_signing_themes(self, themes: Dict[str, SigningTheme]) -> ApiResult:
        return self._send('PUT', SIGNING_THEMES_PATH, lambda: signing_themes_to_dict(themes))

    def delete_account_signing_themes(self) -> ApiResult:
        return self._send('DELETE', SIGNING_THEMES_PATH)

    # =========================================================================
    # Data retention settings
    # =========================================================================

    def get_data_management_policy(self) -> ApiResult:
        """Returns: ApiResult with a DataManagementPolicy"""
        return self._get(DATA_MANAGEMENT_POLICY_PATH, DataManagementPolicy.from_dict)

    def update_data_management_policy(self, policy: DataManagementPolicy) -> ApiResult:
        return self._send('PUT', DATA_MANAGEMENT_POLICY_PATH, policy.to_dict)

    def get_expiry_time_configuration(self) -> ApiResult:
        """Returns: ApiResult with an ExpiryTimeConfiguration"""
        return self._get(EXPIRY_TIME_CONFIGURATION_PATH, ExpiryTimeConfiguration.from_dict)

    def update_expiry_time_configuration(self, config: ExpiryTimeConfiguration) -> ApiResult:
        return self._send('PUT', EXPIRY_TIME_CONFIGURATION_PATH, config.to_dict)
