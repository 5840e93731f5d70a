"""Unit tests for macromem/config.py."""

import json
from pathlib import Path

import pytest

from macromem.config import Config, EXAMPLE_CONFIG, load_config
from macromem.errors import ConfigurationError

ENV_VARS = [
    'MEMORY_STORAGE_UNIT',
    'MEMORY_SELF_UNIT',
    'MEMORY_HOST_MODULE',
    'MEMORY_AUTO_IMPORT_MODE',
    'MEMORY_AUTO_IMPORT_LIST',
    'MEMORY_HOST_DB',
    'MEMORY_LOG_LEVEL',
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = Config()
    assert config.storage_unit_name == 'Memory_Storage'
    assert config.self_unit_name == 'Memory_Functions'
    assert config.auto_import_mode == 'never'
    assert config.auto_import_custom_list == []


def test_from_env(monkeypatch):
    monkeypatch.setenv('MEMORY_STORAGE_UNIT', 'Blob')
    monkeypatch.setenv('MEMORY_AUTO_IMPORT_MODE', 'activeOnly')
    monkeypatch.setenv('MEMORY_AUTO_IMPORT_LIST', 'A, B,,C ')
    monkeypatch.setenv('MEMORY_HOST_DB', '/tmp/host.db')

    config = Config.from_env()

    assert config.storage_unit_name == 'Blob'
    assert config.auto_import_mode == 'activeOnly'
    assert config.auto_import_custom_list == ['A', 'B', 'C']
    assert config.host_db == Path('/tmp/host.db')


def test_from_file_uses_camel_case_keys(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text(json.dumps({
        'storageUnitName': 'Blob',
        'autoImportMode': 'customList',
        'autoImportCustomList': ['Panel'],
    }))

    config = Config.from_file(path)

    assert config.storage_unit_name == 'Blob'
    assert config.auto_import_mode == 'customList'
    assert config.auto_import_custom_list == ['Panel']
    assert config.self_unit_name == 'Memory_Functions'


def test_from_missing_file_gives_defaults(tmp_path):
    assert Config.from_file(tmp_path / 'absent.json') == Config()


def test_invalid_file_raises(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text('{not json')
    with pytest.raises(ConfigurationError):
        Config.from_file(path)


def test_unknown_mode_is_kept_for_later_validation(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text(json.dumps({'autoImportMode': 'bogus'}))
    assert Config.from_file(path).auto_import_mode == 'bogus'


def test_save_round_trip(tmp_path):
    path = tmp_path / 'config.json'
    config = Config(auto_import_mode='always', auto_import_custom_list=['X'])
    config.save(path)
    assert Config.from_file(path) == config


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / 'config.json'
    path.write_text(json.dumps({'storageUnitName': 'FromFile', 'autoImportMode': 'always'}))
    monkeypatch.setenv('MEMORY_AUTO_IMPORT_MODE', 'activeOnly')

    config = load_config(path)

    assert config.storage_unit_name == 'FromFile'
    assert config.auto_import_mode == 'activeOnly'


def test_example_config_parses(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text(EXAMPLE_CONFIG)
    assert Config.from_file(path).auto_import_mode == 'customActiveList'


def test_string_custom_list_raises(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text(json.dumps({'autoImportCustomList': 'Room_Scheduler'}))
    with pytest.raises(ConfigurationError):
        Config.from_file(path)


def test_non_object_file_raises(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text('["Room_Scheduler"]')
    with pytest.raises(ConfigurationError):
        Config.from_file(path)
