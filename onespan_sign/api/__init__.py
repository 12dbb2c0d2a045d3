"""
OneSpan Sign API

Client for the OneSpan Sign account administration API, and the
polling helper used to wait for settings to converge after an update.

Usage:
    from onespan_sign.api import ApiClient, ApiClientConfig

    client = ApiClient(ApiClientConfig(
        base_url='https://sandbox.esignlive.com',
        client_id=client_id,
        client_secret=client_secret,
        user_agent='onespan-sign-admin/0.1.0',
    ))
    result = client.get_expiry_time_configuration()
    if result.success:
        config = result.data
    else:
        error = result.error
"""

from .types import (
    AccessToken,
    SigningLogo,
    SigningTheme,
    TransactionRetention,
    DataManagementPolicy,
    ExpiryTimeConfiguration,
    json_number,
    number_literal,
)

from .exceptions import (
    OneSpanError,
    ConfigurationError,
    TokenError,
    ApiError,
    StateChangeTimeoutError,
    StateChangeCancelledError,
    UnexpectedStateError,
)

from .client import API_VERSION, ApiClient, ApiClientConfig, ApiResult, get_api_error
from .state_change import (
    PollState,
    RefreshResult,
    StateChangeConf,
    WaitResult,
    is_transient_fault,
)

__all__ = [
    # Types
    'AccessToken',
    'SigningLogo',
    'SigningTheme',
    'TransactionRetention',
    'DataManagementPolicy',
    'ExpiryTimeConfiguration',
    'json_number',
    'number_literal',

    # Exceptions
    'OneSpanError',
    'ConfigurationError',
    'TokenError',
    'ApiError',
    'StateChangeTimeoutError',
    'StateChangeCancelledError',
    'UnexpectedStateError',

    # Client
    'API_VERSION',
    'ApiClient',
    'ApiClientConfig',
    'ApiResult',
    'get_api_error',

    # Polling
    'PollState',
    'RefreshResult',
    'StateChangeConf',
    'WaitResult',
    'is_transient_fault',
]
