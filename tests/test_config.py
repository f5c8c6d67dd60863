"""Tests for configuration loading and endpoint list parsing."""

import json

import pytest

from regcheck.core import ConfigManager, filter_endpoints, read_lines
from regcheck.core.config import merge_settings
from regcheck.core.errors import ConfigError, InputError


class TestConfigManager:

    def test_defaults(self, monkeypatch):
        monkeypatch.setattr('regcheck.core.config.os.cpu_count', lambda: 4)
        config = ConfigManager()

        assert config.get('probe', 'timeout') == 10.0
        assert config.get('probe', 'workers') == 8
        assert config.get('probe', 'verify_tls') is False
        assert config.get('probe', 'path') == '/v2/'
        assert config.sources['list_file'] == 'docker.txt'
        assert config.daemon['config_path'] == '/etc/docker/daemon.json'

    def test_unknown_cpu_count_falls_back(self, monkeypatch):
        monkeypatch.setattr('regcheck.core.config.os.cpu_count', lambda: None)
        assert ConfigManager().probe['workers'] == 2

    def test_json_file_is_deep_merged(self, tmp_path):
        config_file = tmp_path / 'config.json'
        config_file.write_text(json.dumps({'probe': {'timeout': 3}, 'sources': {'list_file': 'x.txt'}}))

        config = ConfigManager(str(config_file))

        assert config.probe['timeout'] == 3.0
        assert config.probe['path'] == '/v2/'
        assert config.sources['list_file'] == 'x.txt'
        assert config.sources['timeout'] == 30

    def test_overrides_win_and_none_is_ignored(self, tmp_path):
        config_file = tmp_path / 'config.json'
        config_file.write_text(json.dumps({'probe': {'timeout': 3, 'workers': 5}}))

        config = ConfigManager(str(config_file), overrides={
            'probe': {'timeout': 1.5, 'workers': None},
            'daemon': {'config_path': None}
        })

        assert config.probe['timeout'] == 1.5
        assert config.probe['workers'] == 5
        assert config.daemon['config_path'] == '/etc/docker/daemon.json'

    def test_defaults_are_not_mutated(self):
        ConfigManager(overrides={'probe': {'timeout': 1.0, 'workers': 1}})
        assert ConfigManager.DEFAULTS['probe']['timeout'] == 10.0
        assert ConfigManager.DEFAULTS['probe']['workers'] is None

    @pytest.mark.parametrize('probe', [
        {'timeout': 0}, {'timeout': -1}, {'timeout': 'soon'},
        {'workers': 0}, {'workers': 2.5}, {'workers': True},
    ])
    def test_invalid_values(self, probe):
        with pytest.raises(ConfigError):
            ConfigManager(overrides={'probe': probe})

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigManager(str(tmp_path / 'nope.json'))

    def test_invalid_json(self, tmp_path):
        config_file = tmp_path / 'config.json'
        config_file.write_text('{not json')
        with pytest.raises(ConfigError):
            ConfigManager(str(config_file))

    def test_get_with_default(self):
        assert ConfigManager().get('probe', 'missing', default='x') == 'x'

    def test_get_dotted_path(self):
        config = ConfigManager(overrides={'probe': {'timeout': 4}})

        assert config.get('probe.timeout') == 4.0
        assert config.get('daemon', 'config_path.nested', default='x') == 'x'

    def test_section_replaced_by_scalar(self, tmp_path):
        config_file = tmp_path / 'config.json'
        config_file.write_text(json.dumps({'probe': 5}))

        with pytest.raises(ConfigError, match="Section 'probe'"):
            ConfigManager(str(config_file))

    def test_utf16_file_with_bom(self, tmp_path):
        config_file = tmp_path / 'config.json'
        config_file.write_text(json.dumps({'sources': {'timeout': 5}}), encoding='utf-16')

        assert ConfigManager(str(config_file)).sources['timeout'] == 5

    def test_non_object_file(self, tmp_path):
        config_file = tmp_path / 'config.json'
        config_file.write_text('[1, 2]')

        with pytest.raises(ConfigError, match='JSON object'):
            ConfigManager(str(config_file))

    def test_merge_does_not_share_nested_values(self):
        base = {'probe': {'timeout': 1.0, 'extra': {'a': 1}}}

        merged = merge_settings(base, {'probe': {'timeout': None, 'extra': {'b': 2}}}, skip_none=True)
        merged['probe']['extra']['c'] = 3

        assert merged['probe'] == {'timeout': 1.0, 'extra': {'a': 1, 'b': 2, 'c': 3}}
        assert base == {'probe': {'timeout': 1.0, 'extra': {'a': 1}}}


class TestEndpointParsing:

    def test_filter_endpoints(self):
        lines = ['mirror-a.example', '# comment', '', 'mirror-b.example']
        assert filter_endpoints(lines) == ['mirror-a.example', 'mirror-b.example']

    def test_keeps_duplicates(self):
        assert filter_endpoints(['a', ' a ', 'b']) == ['a', 'a', 'b']

    def test_read_lines(self, tmp_path):
        path = tmp_path / 'docker.txt'
        path.write_text('# mirrors\nhub.example\n\nreg.example\n', encoding='utf-8')

        assert read_lines(path) == ['# mirrors', 'hub.example', '', 'reg.example']

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(InputError):
            read_lines(tmp_path / 'docker.txt')
