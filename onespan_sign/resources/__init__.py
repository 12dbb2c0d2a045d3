"""
Declarative Resources

Create, read, update and delete operations for the account settings
managed through OneSpan Sign. Every operation takes the API client and
a ResourceData, updates the ResourceData in place, and returns
Diagnostics instead of raising.

Usage:
    from onespan_sign.resources import ResourceLoader, configure, run_operation

    client, diags = configure()
    for (resource_type, name), data in ResourceLoader.load('onespan.yml').items():
        diags.extend(run_operation(client, resource_type, 'create', data))
"""

from .types import (
    Severity,
    Diagnostic,
    Diagnostics,
    ResourceData,
)

from .validators import validate_image_data, decode_data_uri, DataUriError
from .provider import RESOURCES, configure, get_resource, run_operation
from .loader import ResourceLoader

__all__ = [
    # Types
    'Severity',
    'Diagnostic',
    'Diagnostics',
    'ResourceData',

    # Validators
    'validate_image_data',
    'decode_data_uri',
    'DataUriError',

    # Provider
    'RESOURCES',
    'configure',
    'get_resource',
    'run_operation',
    'ResourceLoader',
]
