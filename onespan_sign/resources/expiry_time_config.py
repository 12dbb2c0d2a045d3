"""
Expiry time configuration resource.

This resource is a singleton: it only supports retrieval and
replacement.

Attributes:
    default: Default expiry time for transactions in days, 0 for no limit
    maximum: Maximum allowed expiry time in days, 0 for no limit
"""

import logging

from ..api import ApiClient, ExpiryTimeConfiguration, RefreshResult, StateChangeConf, json_number
from ..api.state_change import STATE_COMPLETE, STATE_WAITING
from .data_management_policy import SINGLETON_CREATE_SUMMARY, SINGLETON_DELETE_SUMMARY, SINGLETON_DETAIL
from .types import Diagnostics, ResourceData

logger = logging.getLogger(__name__)

RESOURCE_TYPE = 'onespansign_expiry_time_config'

# Convergence wait settings
WAIT_DELAY = 10
WAIT_TIMEOUT = 3 * 60
WAIT_POLL_INTERVAL = 0.3
WAIT_CONFIRMATIONS = 5


def validate_fields(data: ResourceData) -> Diagnostics:
    diags = Diagnostics()

    default = data.get('default')
    maximum = data.get('maximum')

    for key, value in (('default', default), ('maximum', maximum)):
        if isinstance(value, bool) or not isinstance(value, int):
            diags.add_error("validation error", f"the `{key}` value must be an integer, got {value!r}")
        elif value < 0:
            diags.add_error("validation error", f"the `{key}` value cannot be negative")

    if not diags and default > maximum:
        diags.add_error("validation error", "the `default` value cannot be larger than the `maximum` value")

    return diags


def expiry_time_config_state_change_conf(client: ApiClient, expected: ExpiryTimeConfiguration) -> StateChangeConf:
    """Build the convergence wait for an expiry time configuration change."""
    def refresh() -> RefreshResult:
        result = client.get_expiry_time_configuration()
        if not result.success:
            return RefreshResult(None, STATE_WAITING, result.error)

        current = result.data
        if current.default != expected.default or current.maximum != expected.maximum:
            return RefreshResult(current, STATE_WAITING)

        return RefreshResult(current, STATE_COMPLETE)

    return StateChangeConf(
        refresh=refresh,
        pending=[STATE_WAITING],
        target=[STATE_COMPLETE],
        timeout=WAIT_TIMEOUT,
        delay=WAIT_DELAY,
        min_timeout=WAIT_POLL_INTERVAL,
        continuous_target_occurence=WAIT_CONFIRMATIONS
    )


def create(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    diags = validate_fields(data)
    if diags:
        return diags

    diags.add_warning(SINGLETON_CREATE_SUMMARY, SINGLETON_DETAIL)
    diags.extend(update(client, data, cancel_event))

    if not diags.has_error():
        data.id = client.client_id
    return diags


def read(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    diags = Diagnostics()

    result = client.get_expiry_time_configuration()
    if not result.success:
        return diags.add_exception(result.error)

    try:
        data.set('default', int(result.data.default))
        data.set('maximum', int(result.data.maximum))
    except ValueError as e:
        return diags.add_error(str(e))

    return diags


def update(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    diags = validate_fields(data)
    if diags:
        return diags

    expected = ExpiryTimeConfiguration(
        default=json_number(data.get('default')),
        maximum=json_number(data.get('maximum'))
    )

    result = client.update_expiry_time_configuration(expected)
    if not result.success:
        return diags.add_exception(result.error)

    logger.debug("waiting for the account's expiry time configuration resource to be updated...")
    outcome = expiry_time_config_state_change_conf(client, expected).wait_for_state(cancel_event)
    if not outcome.success:
        return diags.add_exception(outcome.error)

    logger.debug("updated the account's expiry time configuration resource")

    diags.extend(read(client, data))
    return diags


def delete(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    return Diagnostics().add_warning(SINGLETON_DELETE_SUMMARY, SINGLETON_DETAIL)
