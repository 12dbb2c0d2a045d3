"""
Account signing logos resource.

Customized logos shown during the Signing Ceremony, one per language.

Attributes:
    logo: list of {'language': str, 'image': Data URI}
"""

import logging
from typing import Any, Dict, List

from ..api import ApiClient, SigningLogo
from .types import Diagnostics, ResourceData
from .validators import validate_image_data

logger = logging.getLogger(__name__)

RESOURCE_TYPE = 'onespansign_account_signing_logos'


def build_signing_logos(data: ResourceData) -> List[SigningLogo]:
    return [
        SigningLogo(language=item.get('language', ''), image=item.get('image', ''))
        for item in data.get('logo') or []
    ]


def flatten_signing_logo(logo: SigningLogo) -> Dict[str, Any]:
    return {'language': logo.language, 'image': logo.image}


def _validate(logos: List[SigningLogo]) -> Diagnostics:
    diags = Diagnostics()
    for logo in logos:
        diags.extend(validate_image_data(logo.image))
    return diags


def _update(client: ApiClient, data: ResourceData) -> Diagnostics:
    try:
        logos = build_signing_logos(data)
    except AttributeError as e:
        return Diagnostics().add_error("invalid logo configuration", str(e))

    diags = _validate(logos)
    if diags.has_error():
        return diags

    result = client.update_account_signing_logos(logos)
    if not result.success:
        return diags.add_exception(result.error)

    return diags


def create(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    diags = _update(client, data)
    if diags.has_error():
        return diags

    data.id = client.client_id
    logger.debug("created the account signing logos resource")

    diags.extend(read(client, data))
    return diags


def read(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    diags = Diagnostics()

    result = client.get_account_signing_logos()
    if not result.success:
        return diags.add_exception(result.error)

    logos = result.data
    if not logos:
        data.id = ''
        return diags

    data.set('logo', [flatten_signing_logo(logo) for logo in logos])
    return diags


def update(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    diags = _update(client, data)
    if diags.has_error():
        return diags

    logger.debug("updated the account signing logos resource")

    diags.extend(read(client, data))
    return diags


def delete(client: ApiClient, data: ResourceData, cancel_event=None) -> Diagnostics:
    """Remove all customized logos from the account."""
    diags = Diagnostics()

    result = client.update_account_signing_logos([])
    if not result.success:
        return diags.add_exception(result.error)

    logger.debug("deleted the account signing logos resource")
    data.id = ''
    return diags
