"""
Account signing themes resource.

This resource is a singleton: only one instance should exist per
account. The API accepts several themes but only the first one is used
by the Signing Ceremony, so reads keep the first theme only.

Attributes:
    theme: list with one {'name', 'primary', 'success', 'warning',
        'error', 'info', 'signature_button', 'optional_signature_button'}

Theme changes are applied asynchronously. Create, update and delete
wait until reads return the expected themes before returning.
"""

import logging
from typing import Any, Dict

from ..api import ApiClient, RefreshResult, SigningTheme, StateChangeConf
from ..api.state_change import STATE_COMPLETE, STATE_WAITING
from .types import Diagnostics, ResourceData

logger = logging.getLogger(__name__)

RESOURCE_TYPE = 'onespansign_account_signing_themes'

# Convergence wait settings
WAIT_DELAY = 30
WAIT_TIMEOUT = 5 * 60
WAIT_POLL_INTERVAL = 0.3
WAIT_CONFIRMATIONS = 8


def build_signing_themes(data: ResourceData) -> Dict[str, SigningTheme]:
    themes = {}
    for item in data.get('theme') or []:
        themes[item['name']] = SigningTheme(
            primary=item['primary'],
            success=item['success'],
            warning=item['warning'],
            error=item['error'],
            info=item['info'],
            signature_button=item['signature_button'],
            optional_signature_button=item['optional_signature_button']
        )
    return themes


def flatten_signing_theme(name: str, theme: SigningTheme) -> Dict[str, Any]:
    return {
        'name': name,
        'primary': theme.primary,
        'success': theme.success,
        'warning': theme.warning,
        'error': theme.error,
        'info': theme.info,
        'signature_button': theme.signature_button,
        'optional_signature_button': theme.optional_signature_button,
    }


def signing_theme_state_change_conf(client: ApiClient, expected: Dict[str, SigningTheme]) -> StateChangeConf:
    """
    Build the convergence wait for a signing themes change.

    Transient HTTP 500s from the read endpoint keep the wait going.
    """
    def refresh() -> RefreshResult:
        result = client.get_account_signing_themes()
        if not result.success:
            return RefreshResult(None, STATE_WAITING, result.error)

        if result.data != expected:
            return RefreshResult(result.data, STATE_WAITING)

        return RefreshResult(result.data, STATE_COMPLETE)

    return StateChangeConf(
        refresh=refresh,
        pending=[STATE_WAITING],
        target=[STATE_COMPLETE],
        timeout=WAIT_TIMEOUT,
        delay=WAIT_DELAY,
        min_timeout=WAIT_POLL_INTERVAL,
        continuous_target_occurence=WAIT_CONFIRMATIONS,
        tolerate_transient_faults=True
    )


def _build(data: ResourceData, diags: Diagnostics):
    try:
        return build_signing_themes(data)
    except (KeyError, TypeError) as e:
        diags.add_error("invalid signing theme configuration", f"missing or invalid attribute: {e}")
        return None


def _wait(client: ApiClient, expected: Dict[str, SigningTheme], diags: Diagnostics, cancel_event) -> bool:
    outcome = signing_theme_state_change_conf(client, expected).wait_for_state(cancel_event)
    if not outcome.success:
        diags.add_exception(outcome.error)
        return False
    return True


def create(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    diags = Diagnostics()

    themes = _build(data, diags)
    if themes is None:
        return diags

    result = client.create_account_signing_themes(themes)
    if not result.success:
        return diags.add_exception(result.error)

    logger.debug("waiting for the signing theme resource to be created...")
    if not _wait(client, themes, diags, cancel_event):
        return diags

    logger.debug("created the account's signing theme resource")
    data.id = client.client_id

    diags.extend(read(client, data))
    return diags


def read(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    diags = Diagnostics()

    result = client.get_account_signing_themes()
    if not result.success:
        return diags.add_exception(result.error)

    themes = result.data
    if not themes:
        data.id = ''
        return diags

    # Only the first theme is used for the signing ceremony
    name, theme = next(iter(themes.items()))
    data.set('theme', [flatten_signing_theme(name, theme)])
    return diags


def update(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    diags = Diagnostics()

    themes = _build(data, diags)
    if themes is None:
        return diags

    result = client.update_account_signing_themes(themes)
    if not result.success:
        return diags.add_exception(result.error)

    logger.debug("waiting for the signing theme resource to be updated...")
    if not _wait(client, themes, diags, cancel_event):
        return diags

    logger.debug("updated the account's signing theme resource")

    diags.extend(read(client, data))
    return diags


def delete(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    diags = Diagnostics()

    result = client.delete_account_signing_themes()
    if not result.success:
        return diags.add_exception(result.error)

    logger.debug("waiting for the signing theme resource to be deleted...")
    if not _wait(client, {}, diags, cancel_event):
        return diags

    logger.debug("deleted the account's signing theme resource")
    data.id = ''
    return diags
