"""
Provider wiring.

Builds the API client from configuration and maps resource type names
to the modules implementing their operations.
"""

import logging
import re
from types import ModuleType
from typing import Dict, Optional, Tuple

from ..api import ApiClient, ApiClientConfig
from ..config import Config
from . import account_signing_logos, account_signing_themes, data_management_policy, expiry_time_config
from .types import Diagnostics, ResourceData

logger = logging.getLogger(__name__)

ENV_URL_RE = re.compile(r'^https://(www.)?[a-zA-Z0-9.-]{2,256}.[a-z]{2,4}$')

RESOURCES: Dict[str, ModuleType] = {
    account_signing_logos.RESOURCE_TYPE: account_signing_logos,
    account_signing_themes.RESOURCE_TYPE: account_signing_themes,
    data_management_policy.RESOURCE_TYPE: data_management_policy,
    expiry_time_config.RESOURCE_TYPE: expiry_time_config,
}

OPERATIONS = ('create', 'read', 'update', 'delete')


def configure(settings=Config) -> Tuple[Optional[ApiClient], Diagnostics]:
    """
    Create the API client from settings.

    Args:
        settings: Object with ENV_URL, CLIENT_ID, CLIENT_SECRET,
            USER_AGENT and REQUEST_TIMEOUT attributes

    Returns:
        Tuple of (client or None, diagnostics)
    """
    diags = Diagnostics()

    env_url = getattr(settings, 'ENV_URL', '') or ''
    if not ENV_URL_RE.match(env_url):
        diags.add_error(
            "invalid environment URL",
            "Please provide a valid environment URL in the format of <scheme>://<host>"
        )
    if not getattr(settings, 'CLIENT_ID', ''):
        diags.add_error("missing client ID", "Set CLIENT_ID to the client ID of the OneSpan Sign Client App.")
    if not getattr(settings, 'CLIENT_SECRET', ''):
        diags.add_error("missing client secret", "Set CLIENT_SECRET to the client secret of the OneSpan Sign Client App.")

    if diags.has_error():
        return None, diags

    client = ApiClient(ApiClientConfig(
        base_url=env_url,
        client_id=settings.CLIENT_ID,
        client_secret=settings.CLIENT_SECRET,
        user_agent=settings.USER_AGENT,
        timeout=settings.REQUEST_TIMEOUT
    ))
    logger.info(f"Configured OneSpan Sign client for {env_url}")
    return client, diags


def get_resource(resource_type: str) -> Optional[ModuleType]:
    return RESOURCES.get(resource_type)


def run_operation(
    client: ApiClient,
    resource_type: str,
    operation: str,
    data: ResourceData,
    cancel_event=None
) -> Diagnostics:
    """Run one resource operation (create, read, update or delete)."""
    resource = get_resource(resource_type)
    if resource is None:
        return Diagnostics().add_error(f"unknown resource type: {resource_type}")
    if operation not in OPERATIONS:
        return Diagnostics().add_error(f"unknown operation: {operation}")

    logger.debug(f"Running {operation} on {resource_type}")
    return getattr(resource, operation)(client, data, cancel_event)
