"""Unit tests for macromem/cli.py, driven through click's CliRunner."""

import pytest
from click.testing import CliRunner

from macromem.cli import cli, parse_value


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def db(tmp_path):
    return str(tmp_path / 'host.db')


def invoke(runner, db, *args):
    return runner.invoke(cli, ['--db', db, *args], obj={})


def test_parse_value():
    assert parse_value('40') == 40
    assert parse_value('{"a": [1]}') == {'a': [1]}
    assert parse_value('plain text') == 'plain text'


def test_start_creates_store(runner, db):
    result = invoke(runner, db, 'start')
    assert result.exit_code == 0, result.output
    assert 'created' in result.output

    again = invoke(runner, db, 'start')
    assert again.exit_code == 0
    assert 'created' not in again.output


def test_set_get_rm_in_scope(runner, db):
    invoke(runner, db, 'start')

    assert invoke(runner, db, 'set', 'volume', '40', '--scope', 'Panel').exit_code == 0

    got = invoke(runner, db, 'get', 'volume', '--scope', 'Panel')
    assert got.exit_code == 0
    assert "40" in got.output

    assert invoke(runner, db, 'rm', 'volume', '--scope', 'Panel').exit_code == 0
    missing = invoke(runner, db, 'get', 'volume', '--scope', 'Panel')
    assert missing.exit_code == 1
    assert 'not found' in missing.output


def test_global_dump(runner, db):
    invoke(runner, db, 'start')
    invoke(runner, db, 'set', 'Shared', '"yes"', '--global')

    dumped = invoke(runner, db, 'dump', '--global')
    assert dumped.exit_code == 0
    assert '"Shared": "yes"' in dumped.output
    assert '"ExampleKey": "Example Value"' in dumped.output


def test_save_and_propagate(runner, db, tmp_path):
    script = tmp_path / 'panel.py'
    script.write_text('print("panel")\n')

    assert invoke(runner, db, 'save', 'Panel', str(script)).exit_code == 0

    listed = invoke(runner, db, 'units')
    assert listed.exit_code == 0
    assert 'Panel' in listed.output

    runner_env = {'MEMORY_AUTO_IMPORT_MODE': 'always'}
    started = runner.invoke(cli, ['--db', db, 'start'], obj={}, env=runner_env)
    assert started.exit_code == 0, started.output
    assert 'Panel' in started.output


def test_store_missing_reports_error(runner, db):
    result = invoke(runner, db, 'get', 'anything')
    assert result.exit_code == 1
    assert 'not found' in result.output
