"""Unit tests for macromem/host/database.py: the SQLite-backed host."""

import asyncio

import pytest

from macromem.config import Config
from macromem.errors import HostError, NotFoundError
from macromem.host import SQLiteHost, open_host
from macromem.runtime import MemoryRuntime


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / 'host' / 'units.db'


def test_save_then_get(db_path):
    async def scenario():
        async with SQLiteHost(db_path) as host:
            await host.save('Panel', 'print(1)')
            return await host.get('Panel', with_content=True)

    units = asyncio.run(scenario())
    assert len(units) == 1
    assert units[0].name == 'Panel'
    assert units[0].content == 'print(1)'
    assert units[0].active is True


def test_content_omitted_unless_requested(db_path):
    async def scenario():
        async with SQLiteHost(db_path) as host:
            await host.save('Panel', 'print(1)')
            return await host.get('Panel')

    assert asyncio.run(scenario())[0].content is None


def test_missing_unit_raises_not_found(db_path):
    async def scenario():
        async with SQLiteHost(db_path) as host:
            await host.get('Nope')

    with pytest.raises(NotFoundError):
        asyncio.run(scenario())


def test_list_all_units(db_path):
    async def scenario():
        async with SQLiteHost(db_path) as host:
            await host.save('B', 'b')
            await host.save('A', 'a')
            return await host.get(with_content=True)

    units = asyncio.run(scenario())
    assert [(u.name, u.content) for u in units] == [('A', 'a'), ('B', 'b')]


def test_overwrite_keeps_active_flag(db_path):
    async def scenario():
        async with SQLiteHost(db_path) as host:
            await host.save('Panel', 'v1')
            await host.set_active('Panel', False)
            await host.save('Panel', 'v2')
            return await host.get('Panel', with_content=True)

    unit = asyncio.run(scenario())[0]
    assert unit.content == 'v2'
    assert unit.active is False


def test_set_active_on_missing_unit(db_path):
    async def scenario():
        async with SQLiteHost(db_path) as host:
            await host.set_active('Nope', True)

    with pytest.raises(NotFoundError):
        asyncio.run(scenario())


def test_unconnected_host_raises(db_path):
    with pytest.raises(HostError):
        asyncio.run(SQLiteHost(db_path).get())


def test_data_survives_reconnect(db_path):
    async def first():
        host = await open_host(db_path)
        try:
            engine = await MemoryRuntime(host).start()
            await engine.write('k', 'v', scope='Panel')
        finally:
            await host.close()

    async def second():
        async with SQLiteHost(db_path) as host:
            return await MemoryRuntime(host).engine.read('k', scope='Panel')

    asyncio.run(first())
    assert asyncio.run(second()) == 'v'


def test_driver_failure_surfaces_as_host_error(db_path):
    async def scenario():
        async with SQLiteHost(db_path) as host:
            await host._connection.execute("DROP TABLE content_units")
            await host.get()

    with pytest.raises(HostError, match='get failed'):
        asyncio.run(scenario())


def test_driver_failure_while_listing_does_not_abort_propagation(db_path):
    async def scenario():
        async with SQLiteHost(db_path) as host:
            await host.save('Panel', 'print(1)\n')
            await host._connection.execute("DROP TABLE content_units")
            return await MemoryRuntime(host, Config(auto_import_mode='always')).propagate()

    assert asyncio.run(scenario()) is None
