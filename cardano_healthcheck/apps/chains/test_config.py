"""
Tests for the node configuration and genesis readers.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from cardano_healthcheck.apps.chains.config import load_prometheus_url, load_time_settings, parse_time_settings
from cardano_healthcheck.exceptions import ConfigError


def write_json(path, data):
    path.write_text(json.dumps(data))
    return path


class TestLoadTimeSettings:

    def test_shelley_genesis(self, tmp_path, shelley_genesis):
        settings = load_time_settings(write_json(tmp_path / 'genesis.json', shelley_genesis))
        assert settings.genesis_time == datetime(2017, 9, 23, 21, 44, 51, tzinfo=timezone.utc)
        assert settings.slots_per_epoch == 432000
        assert settings.slot_duration == timedelta(seconds=1)

    def test_shelley_fractional_slot_length(self, shelley_genesis):
        shelley_genesis['slotLength'] = 0.2
        assert parse_time_settings(shelley_genesis).slot_duration == timedelta(milliseconds=200)

    def test_shelley_offset_timestamp(self, shelley_genesis):
        shelley_genesis['systemStart'] = '2022-06-01T02:00:00+02:00'
        settings = parse_time_settings(shelley_genesis)
        assert settings.genesis_time == datetime(2022, 6, 1, 0, 0, tzinfo=timezone.utc)

    def test_byron_genesis(self, tmp_path, byron_genesis):
        settings = load_time_settings(write_json(tmp_path / 'byron.json', byron_genesis))
        assert settings.genesis_time == datetime(2017, 9, 23, 21, 44, 51, tzinfo=timezone.utc)
        assert settings.slots_per_epoch == 21600
        assert settings.slot_duration == timedelta(seconds=20)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_time_settings(tmp_path / 'missing.json')
        assert exc_info.value.path == str(tmp_path / 'missing.json')

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'genesis.json'
        path.write_text('{"systemStart": ')
        with pytest.raises(ConfigError, match='cannot be parsed'):
            load_time_settings(path)

    def test_not_an_object(self, tmp_path):
        with pytest.raises(ConfigError):
            load_time_settings(write_json(tmp_path / 'genesis.json', [1, 2, 3]))

    def test_missing_field(self, tmp_path, shelley_genesis):
        del shelley_genesis['epochLength']
        with pytest.raises(ConfigError, match='epochLength'):
            load_time_settings(write_json(tmp_path / 'genesis.json', shelley_genesis))

    def test_unknown_genesis_format(self, tmp_path):
        with pytest.raises(ConfigError, match='systemStart'):
            load_time_settings(write_json(tmp_path / 'genesis.json', {'networkId': 'Mainnet'}))

    @pytest.mark.parametrize('field, value', [
        ('epochLength', 0),
        ('epochLength', -5),
        ('epochLength', '432000'),
        ('epochLength', True),
        ('slotLength', 0),
        ('slotLength', 'fast'),
        ('slotLength', 0.0000001),
        ('systemStart', 'yesterday'),
        ('systemStart', 1506203091),
    ])
    def test_invalid_values(self, tmp_path, shelley_genesis, field, value):
        shelley_genesis[field] = value
        with pytest.raises(ConfigError):
            load_time_settings(write_json(tmp_path / 'genesis.json', shelley_genesis))


class TestLoadPrometheusUrl:

    def test_json_config(self, node_files):
        assert load_prometheus_url(node_files.config_file) == 'http://127.0.0.1:12798/metrics'

    def test_yaml_config(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text('Protocol: Cardano\nhasPrometheus:\n  - "0.0.0.0"\n  - 12798\n')
        assert load_prometheus_url(path) == 'http://0.0.0.0:12798/metrics'

    def test_missing_prometheus(self, tmp_path):
        path = write_json(tmp_path / 'config.json', {'Protocol': 'Cardano'})
        with pytest.raises(ConfigError, match='hasPrometheus'):
            load_prometheus_url(path)

    def test_malformed_prometheus(self, tmp_path):
        path = write_json(tmp_path / 'config.json', {'hasPrometheus': ['127.0.0.1']})
        with pytest.raises(ConfigError, match='hasPrometheus'):
            load_prometheus_url(path)

    def test_unparseable_config(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text('hasPrometheus: [127.0.0.1, 12798\n')
        with pytest.raises(ConfigError, match='cannot be parsed'):
            load_prometheus_url(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match='cannot be read'):
            load_prometheus_url(tmp_path / 'missing.yaml')


@pytest.mark.parametrize('system_start, microsecond', [
    ('2017-09-23T21:44:51.5Z', 500000),
    ('2017-09-23T21:44:51.25Z', 250000),
    ('2017-09-23T21:44:51.123456789Z', 123456),
    ('2017-09-23T21:44:51.000001+00:00', 1),
])
def test_fractional_system_start(shelley_genesis, system_start, microsecond):
    shelley_genesis['systemStart'] = system_start
    settings = parse_time_settings(shelley_genesis)
    assert settings.genesis_time == datetime(2017, 9, 23, 21, 44, 51, microsecond, tzinfo=timezone.utc)
