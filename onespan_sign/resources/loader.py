"""
Resource Loader

Loads declared resources from a YAML file:

    resources:
      onespansign_expiry_time_config:
        main:
          default: 30
          maximum: 60

All blocks are validated up front and every problem is reported in a
single ConfigurationError.
"""

import logging
from pathlib import Path
from typing import Dict, Tuple, Union

import yaml

from ..api.exceptions import ConfigurationError
from .provider import RESOURCES
from .types import ResourceData

logger = logging.getLogger(__name__)

ResourceKey = Tuple[str, str]


class ResourceLoader:
    """
    Loader for declarative resource files.

    Usage:
        declared = ResourceLoader.load('onespan.yml')
        data = declared[('onespansign_expiry_time_config', 'main')]
    """

    @classmethod
    def load(cls, path: Union[str, Path]) -> Dict[ResourceKey, ResourceData]:
        path = Path(path)
        try:
            text = path.read_text(encoding='utf-8')
        except OSError as e:
            raise ConfigurationError(f"Unable to read {path}: {e}") from e

        resources = cls.loads(text, source=path.name)
        logger.info(f"Loaded {len(resources)} resource(s) from {path}")
        return resources

    @classmethod
    def loads(cls, text: str, source: str = '<string>') -> Dict[ResourceKey, ResourceData]:
        """
        Parse resource declarations from YAML text.

        Raises:
            ConfigurationError: listing every invalid block
        """
        try:
            document = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"{source}: invalid YAML - {e}") from e

        if not isinstance(document, dict):
            raise ConfigurationError(f"{source}: top level must be a mapping")

        declared = document.get('resources') or {}
        if not isinstance(declared, dict):
            raise ConfigurationError(f"{source}: 'resources' must be a mapping")

        errors = []
        resources: Dict[ResourceKey, ResourceData] = {}

        for resource_type, blocks in declared.items():
            if resource_type not in RESOURCES:
                errors.append(f"Unknown resource type '{resource_type}'")
                continue
            if not isinstance(blocks, dict):
                errors.append(f"'{resource_type}' must map resource names to attribute blocks")
                continue

            for name, attributes in blocks.items():
                if attributes is None:
                    attributes = {}
                if not isinstance(attributes, dict):
                    errors.append(f"{resource_type}.{name}: attributes must be a mapping")
                    continue
                resources[(resource_type, str(name))] = ResourceData(attributes=dict(attributes))
                logger.debug(f"Declared resource: {resource_type}.{name}")

        if errors:
            error_msg = f"Resource configuration errors in {source}:\n" + "\n".join(f"  - {e}" for e in errors)
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

        return resources
