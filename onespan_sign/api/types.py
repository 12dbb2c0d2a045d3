"""
OneSpan Sign Type Definitions

Dataclasses mirroring the JSON documents of the account administration
endpoints. Snapshots have no identity beyond their field values and are
compared by structural equality.

Numeric fields are kept as their exact decimal text. The API sometimes
sends integers as JSON strings, and comparisons during convergence
checks are done on the text, so values never pass through a float.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Union

# JSON number grammar (RFC 8259, section 6)
_NUMBER_RE = re.compile(r'^-?(0|[1-9][0-9]*)(\.[0-9]+)?([eE][+-]?[0-9]+)?$')
_INTEGER_RE = re.compile(r'^-?(0|[1-9][0-9]*)$')

JsonNumberInput = Union[str, int, Decimal]


def json_number(value: JsonNumberInput) -> str:
    """
    Normalize a decoded JSON number to its exact text.

    Accepts ints, Decimals (from ``parse_float=Decimal``) and strings
    holding a JSON number. Floats and booleans are rejected since they
    cannot be trusted to round-trip.

    Raises:
        ValueError: if the value is not a JSON number
    """
    if isinstance(value, bool):
        raise ValueError(f"expected a JSON number, got boolean {value!r}")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, str):
        text = value.strip()
        if not _NUMBER_RE.match(text):
            raise ValueError(f"expected a JSON number, got {value!r}")
        return text
    raise ValueError(f"expected a JSON number, got {type(value).__name__} {value!r}")


def number_literal(text: str) -> int:
    """
    Convert stored number text to the value written into a request body.

    Only integers are sent to the API; the int encodes back to the same
    text.

    Raises:
        ValueError: if the text is not an integer
    """
    if not isinstance(text, str) or not _INTEGER_RE.match(text):
        raise ValueError(f"expected an integer, got {text!r}")
    return int(text)


def _number_field(data: Dict[str, Any], key: str, default: str = '0') -> str:
    """Read a number field, treating a missing key as the default."""
    if key not in data or data[key] is None:
        return default
    return json_number(data[key])


@dataclass(frozen=True)
class SigningLogo:
    """A customized Signing Ceremony logo for one language."""
    language: str
    image: str  # Data URI

    def to_dict(self) -> Dict[str, str]:
        return {'language': self.language, 'image': self.image}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SigningLogo':
        return cls(
            language=data.get('language', ''),
            image=data.get('image', '')
        )


@dataclass(frozen=True)
class SigningTheme:
    """
    Colors of a customized signing theme.

    All values are hex color codes (e.g., "#1A2B3C").
    """
    primary: str
    success: str
    warning: str
    error: str
    info: str
    signature_button: str
    optional_signature_button: str

    def to_dict(self) -> Dict[str, str]:
        return {
            'primary': self.primary,
            'success': self.success,
            'warning': self.warning,
            'error': self.error,
            'info': self.info,
            'signatureButton': self.signature_button,
            'optionalSignatureButton': self.optional_signature_button,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SigningTheme':
        return cls(
            primary=data.get('primary', ''),
            success=data.get('success', ''),
            warning=data.get('warning', ''),
            error=data.get('error', ''),
            info=data.get('info', ''),
            signature_button=data.get('signatureButton', ''),
            optional_signature_button=data.get('optionalSignatureButton', '')
        )


def signing_themes_from_dict(data: Any) -> Dict[str, SigningTheme]:
    """Build the theme-name to theme mapping returned by the API."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"expected an object of signing themes, got {type(data).__name__}")
    return {name: SigningTheme.from_dict(theme) for name, theme in data.items()}


def signing_themes_to_dict(themes: Dict[str, SigningTheme]) -> Dict[str, Dict[str, str]]:
    return {name: theme.to_dict() for name, theme in themes.items()}


def signing_logos_from_list(data: Any) -> List[SigningLogo]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"expected a list of signing logos, got {type(data).__name__}")
    return [SigningLogo.from_dict(item) for item in data]


@dataclass(frozen=True)
class TransactionRetention:
    """
    Transaction retention settings of the data management policy.

    Attributes:
        draft: Days to keep drafts for
        sent: Days to keep sent transactions for
        completed: Days to keep completed transactions for
        archived: Days to keep archived transactions for
        declined: Days to keep declined transactions for
        opted_out: Days to keep opted-out transactions for
        expired: Days to keep expired transactions for
        lifetime_total: Days to keep transactions, counted from creation
        lifetime_until_completion: Days to keep incomplete transactions,
            counted from creation
        include_sent: Count sent transactions as incomplete
    """
    draft: str
    sent: str
    completed: str
    archived: str
    declined: str
    opted_out: str
    expired: str
    lifetime_total: str = '120'
    lifetime_until_completion: str = '120'
    include_sent: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'draft': number_literal(self.draft),
            'sent': number_literal(self.sent),
            'completed': number_literal(self.completed),
            'archived': number_literal(self.archived),
            'declined': number_literal(self.declined),
            'optedOut': number_literal(self.opted_out),
            'expired': number_literal(self.expired),
            'lifetimeTotal': number_literal(self.lifetime_total),
            'lifetimeUntilCompletion': number_literal(self.lifetime_until_completion),
            'includeSent': bool(self.include_sent),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TransactionRetention':
        return cls(
            draft=_number_field(data, 'draft'),
            sent=_number_field(data, 'sent'),
            completed=_number_field(data, 'completed'),
            archived=_number_field(data, 'archived'),
            declined=_number_field(data, 'declined'),
            opted_out=_number_field(data, 'optedOut'),
            expired=_number_field(data, 'expired'),
            lifetime_total=_number_field(data, 'lifetimeTotal'),
            lifetime_until_completion=_number_field(data, 'lifetimeUntilCompletion'),
            include_sent=bool(data.get('includeSent', False))
        )


@dataclass(frozen=True)
class DataManagementPolicy:
    """The account's data management policy."""
    transaction_retention: TransactionRetention

    def to_dict(self) -> Dict[str, Any]:
        return {'transactionRetention': self.transaction_retention.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DataManagementPolicy':
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"expected a data management policy object, got {type(data).__name__}")
        return cls(
            transaction_retention=TransactionRetention.from_dict(data.get('transactionRetention') or {})
        )


@dataclass(frozen=True)
class ExpiryTimeConfiguration:
    """
    Transaction expiry settings, in days. 0 means no limit.

    Attributes:
        default: Default expiry time (``remainingDays``)
        maximum: Maximum allowed expiry time (``maximumRemainingDays``)
    """
    default: str
    maximum: str

    def to_dict(self) -> Dict[str, int]:
        return {
            'remainingDays': number_literal(self.default),
            'maximumRemainingDays': number_literal(self.maximum),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExpiryTimeConfiguration':
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"expected an expiry time configuration object, got {type(data).__name__}")
        return cls(
            default=_number_field(data, 'remainingDays'),
            maximum=_number_field(data, 'maximumRemainingDays')
        )


@dataclass(frozen=True)
class AccessToken:
    """A bearer token and its absolute expiry (epoch seconds)."""
    value: str = field(repr=False)
    expires_at: int
