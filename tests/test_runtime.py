"""Unit tests for macromem/runtime.py: startup sequence."""

import asyncio

from macromem.bootstrap import BootstrapTemplate
from macromem.config import Config
from macromem.errors import HostError
from macromem.host import InMemoryHost
from macromem.runtime import MemoryRuntime, start_memory
from macromem.store import INFO_KEY, decode

STORAGE = 'Memory_Storage'


def test_first_run_creates_store_once():
    host = InMemoryHost()
    runtime = MemoryRuntime(host)

    created = asyncio.run(runtime.ensure_store())

    assert created is True
    saves = host.saves_for(STORAGE)
    assert len(saves) == 1
    assert INFO_KEY in decode(saves[0])


def test_existing_store_is_not_recreated():
    host = InMemoryHost()
    host.add(STORAGE, 'var memory = {"ScriptA": {"k": "v"}}')

    created = asyncio.run(MemoryRuntime(host).ensure_store())

    assert created is False
    assert host.saves == []


def test_start_on_empty_host_returns_working_engine():
    host = InMemoryHost()

    async def scenario():
        mem = await start_memory(host, locator='file:///macros/Room_Scheduler.js')
        await mem.write('k', 'v')
        return mem

    mem = asyncio.run(scenario())

    assert mem.local_script == 'Room_Scheduler'
    assert decode(host.content_of(STORAGE))['Room_Scheduler'] == {'k': 'v'}
    assert len([name for name, _ in host.saves if name == STORAGE]) == 2


def test_identity_falls_back_to_legacy_then_self_name():
    host = InMemoryHost()
    assert MemoryRuntime(host, legacy_name='Legacy').local_script == 'Legacy'
    assert MemoryRuntime(host).local_script == 'Memory_Functions'


def test_start_runs_propagation_with_configured_policy():
    host = InMemoryHost()
    host.add('Panel', 'print("hello")\n')
    host.add('Memory_Functions', '')
    config = Config(auto_import_mode='always')

    runtime = MemoryRuntime(host, config)
    asyncio.run(runtime.start())

    assert runtime.last_propagation.patched == ['Panel']
    assert host.content_of('Panel') == BootstrapTemplate().block + 'print("hello")\n'
    # The freshly created store blob is never patched
    assert host.content_of(STORAGE).startswith('var memory = {')


def test_bad_policy_does_not_abort_startup():
    host = InMemoryHost()
    host.add('Panel', 'print("hello")\n')

    runtime = MemoryRuntime(host, Config(auto_import_mode='bogus'))
    engine = asyncio.run(runtime.start())

    assert engine is runtime.engine
    assert host.content_of('Panel') == 'print("hello")\n'


class ListingFailsHost(InMemoryHost):
    async def get(self, name=None, with_content=False):
        if name is None:
            raise HostError("listing unavailable")
        return await super().get(name, with_content)


def test_listing_failure_does_not_abort_startup():
    host = ListingFailsHost()
    runtime = MemoryRuntime(host, Config(auto_import_mode='always'))

    engine = asyncio.run(runtime.start())

    assert runtime.last_propagation is None
    assert asyncio.run(engine.read_global('ExampleKey')) == 'Example Value'
