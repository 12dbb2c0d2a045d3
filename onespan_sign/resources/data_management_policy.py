"""
Data management policy resource.

This resource is a singleton: it only supports retrieval and
replacement. Create replaces the current policy and delete leaves the
remote policy untouched.

Attributes:
    transaction_retention: one record with draft, sent, completed,
        archived, declined, opted_out, expired (days),
        lifetime_total and lifetime_until_completion (days, default 120),
        and include_sent (default False)
"""

import logging
from typing import Any, Dict, Optional

from ..api import ApiClient, DataManagementPolicy, TransactionRetention, json_number
from .types import Diagnostics, ResourceData

logger = logging.getLogger(__name__)

RESOURCE_TYPE = 'onespansign_data_management_policy'

DEFAULT_LIFETIME_DAYS = 120

SINGLETON_CREATE_SUMMARY = "updating (replacing) resource instead of creating"
SINGLETON_DELETE_SUMMARY = "no deletion will take place"
SINGLETON_DETAIL = "This resource is a singleton. It only supports retrieval or replacement operations."


def _first_block(value: Any) -> Optional[Dict[str, Any]]:
    """Nested blocks may be declared as a mapping or a one-item list."""
    if isinstance(value, list):
        return value[0] if value else None
    return value or None


def build_transaction_retention(block: Dict[str, Any]) -> TransactionRetention:
    """
    Build a TransactionRetention from resource attributes.

    Raises:
        KeyError: if a required day count is missing
        ValueError: if a day count is not an integer or include_sent is not a boolean
    """
    def days(key: str, default: Optional[int] = None) -> str:
        value = block.get(key, default) if default is not None else block[key]
        if isinstance(value, float) or not isinstance(value, (int, str)):
            raise ValueError(f"'{key}' must be an integer, got {value!r}")
        return json_number(value)

    def flag(key: str) -> bool:
        value = block.get(key, False)
        if not isinstance(value, bool):
            raise ValueError(f"'{key}' must be a boolean, got {value!r}")
        return value

    return TransactionRetention(
        draft=days('draft'),
        sent=days('sent'),
        completed=days('completed'),
        archived=days('archived'),
        declined=days('declined'),
        opted_out=days('opted_out'),
        expired=days('expired'),
        lifetime_total=days('lifetime_total', DEFAULT_LIFETIME_DAYS),
        lifetime_until_completion=days('lifetime_until_completion', DEFAULT_LIFETIME_DAYS),
        include_sent=flag('include_sent')
    )


def flatten_transaction_retention(retention: TransactionRetention) -> Dict[str, Any]:
    """
    Convert a TransactionRetention to resource attributes.

    Raises:
        ValueError: if a day count is not an integer
    """
    return {
        'draft': int(retention.draft),
        'sent': int(retention.sent),
        'completed': int(retention.completed),
        'archived': int(retention.archived),
        'declined': int(retention.declined),
        'opted_out': int(retention.opted_out),
        'expired': int(retention.expired),
        'lifetime_total': int(retention.lifetime_total),
        'lifetime_until_completion': int(retention.lifetime_until_completion),
        'include_sent': retention.include_sent,
    }


def create(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    diags = Diagnostics()
    diags.add_warning(SINGLETON_CREATE_SUMMARY, SINGLETON_DETAIL)

    diags.extend(update(client, data, cancel_event))

    if not diags.has_error():
        data.id = client.client_id
    return diags


def read(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    diags = Diagnostics()

    result = client.get_data_management_policy()
    if not result.success:
        return diags.add_exception(result.error)

    try:
        retention = flatten_transaction_retention(result.data.transaction_retention)
    except ValueError as e:
        return diags.add_error(str(e))

    data.set('transaction_retention', [retention])
    return diags


def update(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    diags = Diagnostics()

    block = _first_block(data.get('transaction_retention'))
    if block is not None:
        try:
            policy = DataManagementPolicy(transaction_retention=build_transaction_retention(block))
        except KeyError as e:
            return diags.add_error("invalid transaction retention configuration", f"missing attribute: {e}")
        except ValueError as e:
            return diags.add_error("invalid transaction retention configuration", str(e))

        result = client.update_data_management_policy(policy)
        if not result.success:
            error = result.error
            # Some seemingly valid payloads get rejected with undocumented
            # validation errors; report the payload to help debugging.
            if error.status_code is not None and 400 <= error.status_code < 500:
                diags.add_error(
                    error.summary,
                    f"4xx error occurred while updating the data management policy: {policy}"
                )
            return diags.add_exception(error)

        logger.debug("updated the account's data management policy resource")

    diags.extend(read(client, data))
    return diags


def delete(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    return Diagnostics().add_warning(SINGLETON_DELETE_SUMMARY, SINGLETON_DETAIL)
