"""
Resource Loader Tests

Validates that resource files load into ResourceData and that every
invalid block is reported.
"""

import pytest

from onespan_sign.api import ConfigurationError
from onespan_sign.resources import ResourceLoader

RESOURCES_YAML = """
resources:
  onespansign_expiry_time_config:
    main:
      default: 30
      maximum: 60
  onespansign_data_management_policy:
    main:
      transaction_retention:
        - draft: 0
          sent: 10
          completed: 30
          archived: 60
          declined: 5
          opted_out: 5
          expired: 15
  onespansign_account_signing_themes:
    main:
"""


class TestResourceLoader:
    """Test loading resource declarations."""

    def test_load_file(self, tmp_path):
        path = tmp_path / 'onespan.yml'
        path.write_text(RESOURCES_YAML, encoding='utf-8')

        declared = ResourceLoader.load(path)

        assert set(declared) == {
            ('onespansign_expiry_time_config', 'main'),
            ('onespansign_data_management_policy', 'main'),
            ('onespansign_account_signing_themes', 'main'),
        }
        expiry = declared[('onespansign_expiry_time_config', 'main')]
        assert expiry.attributes == {'default': 30, 'maximum': 60}
        assert expiry.id == ''

        policy = declared[('onespansign_data_management_policy', 'main')]
        assert policy.get('transaction_retention')[0]['opted_out'] == 5

    def test_empty_attribute_block(self):
        declared = ResourceLoader.loads(RESOURCES_YAML)

        assert declared[('onespansign_account_signing_themes', 'main')].attributes == {}

    def test_empty_document(self):
        assert ResourceLoader.loads('') == {}
        assert ResourceLoader.loads('resources:\n') == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match='Unable to read'):
            ResourceLoader.load(tmp_path / 'missing.yml')

    def test_invalid_yaml(self):
        with pytest.raises(ConfigurationError, match='invalid YAML'):
            ResourceLoader.loads('resources: [unclosed')

    def test_top_level_must_be_mapping(self):
        with pytest.raises(ConfigurationError, match='top level must be a mapping'):
            ResourceLoader.loads('- resources')

    def test_resources_must_be_mapping(self):
        with pytest.raises(ConfigurationError, match="'resources' must be a mapping"):
            ResourceLoader.loads('resources:\n  - onespansign_expiry_time_config')

    def test_all_errors_reported(self):
        """Every invalid block appears in a single error."""
        text = """
resources:
  onespansign_signing_colors:
    main: {}
  onespansign_expiry_time_config:
    main: 30
  onespansign_account_signing_logos: []
"""
        with pytest.raises(ConfigurationError) as exc_info:
            ResourceLoader.loads(text, source='bad.yml')

        message = str(exc_info.value)
        assert 'bad.yml' in message
        assert "Unknown resource type 'onespansign_signing_colors'" in message
        assert 'onespansign_expiry_time_config.main: attributes must be a mapping' in message
        assert "'onespansign_account_signing_logos' must map resource names" in message
