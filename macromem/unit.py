"""
System Unit

The module a host deploys under the system unit name (``Memory_Functions``
by default). Consuming units reach the store through the canonical block::

    from Memory_Functions import mem, resolve_identity

``mem`` exists from import time so that block never fails, but it only talks
to a host after ``install()`` has bound one. Each consuming unit runs in its
own interpreter context on the host and sets ``mem.local_script`` for itself.
"""

import logging
from typing import List, Optional

from .config import Config
from .errors import HostError
from .host import ContentHost, ContentUnit
from .runtime import MemoryRuntime
from .store import MemoryEngine, resolve_identity

logger = logging.getLogger(__name__)

__all__ = ['mem', 'resolve_identity', 'install']


class UnboundHost(ContentHost):
    """Placeholder host used until install() runs."""

    async def get(self, name: Optional[str] = None,
                  with_content: bool = False) -> List[ContentUnit]:
        raise HostError("System unit is not installed on a host")

    async def save(self, name: str, text: str):
        raise HostError("System unit is not installed on a host")


_defaults = Config()

mem = MemoryEngine(UnboundHost(), _defaults.storage_unit_name, _defaults.self_unit_name)


async def install(host: ContentHost, config: Config = None,
                  locator: Optional[str] = None) -> MemoryEngine:
    """
    Bind ``mem`` to a host, then ensure the store and propagate once.

    Returns:
        The module-level ``mem`` engine
    """
    runtime = MemoryRuntime(host, config, locator=locator)

    mem.host = host
    mem.storage_name = runtime.config.storage_unit_name
    mem.local_script = runtime.local_script

    await runtime.start()
    logger.info(f"System unit installed as {runtime.config.self_unit_name}")
    return mem
