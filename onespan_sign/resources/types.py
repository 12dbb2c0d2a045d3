"""
Resource Layer Type Definitions

Resource state and the diagnostics returned by resource operations.
Resource operations report problems as diagnostics instead of raising,
so one failing resource does not abort a whole run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from ..api.exceptions import ApiError


class Severity(Enum):
    """Severity of a diagnostic."""
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single problem or notice reported by a resource operation."""
    severity: Severity
    summary: str
    detail: str = ''

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


class Diagnostics(list):
    """List of Diagnostic with a few helpers."""

    def has_error(self) -> bool:
        return any(d.is_error for d in self)

    def add_error(self, summary: str, detail: str = '') -> 'Diagnostics':
        self.append(Diagnostic(Severity.ERROR, summary, detail))
        return self

    def add_warning(self, summary: str, detail: str = '') -> 'Diagnostics':
        self.append(Diagnostic(Severity.WARNING, summary, detail))
        return self

    def add_exception(self, error: Exception) -> 'Diagnostics':
        """Add an error diagnostic for an ApiError or any other exception."""
        if isinstance(error, ApiError):
            return self.add_error(error.summary, error.detail)
        return self.add_error(str(error))


@dataclass
class ResourceData:
    """
    State of one declared resource.

    Attributes:
        id: Resource ID; empty when the resource does not exist remotely
        attributes: Attribute values keyed by snake_case attribute name
    """
    id: str = ''
    attributes: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self.attributes.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    @property
    def exists(self) -> bool:
        return bool(self.id)
