"""
Memory Runtime - Startup Controller

Orchestrates startup of the store for one consuming unit:
1. Ensure the store blob exists (create the documented skeleton if absent)
2. Run one bootstrap propagation pass
3. Hand out the key-value engine
"""

import asyncio
import logging
from typing import Optional

from .bootstrap import BootstrapTemplate, PropagationResult, propagate
from .config import Config
from .errors import HostError, NotFoundError
from .host import ContentHost
from .store import MemoryEngine, encode, initial_document, resolve_identity

logger = logging.getLogger(__name__)


class MemoryRuntime:
    """
    Startup glue between a content host and the key-value engine.

    The caller identity is resolved once here and kept on the engine for
    the lifetime of the runtime.
    """

    def __init__(self, host: ContentHost, config: Config = None,
                 locator: Optional[str] = None,
                 legacy_name: Optional[str] = None):
        """
        Args:
            host: Content-unit API
            config: Store configuration (uses defaults if not provided)
            locator: The consuming unit's module/resource locator
            legacy_name: Name from the legacy naming hook
        """
        self.host = host
        self.config = config or Config()

        self.template = BootstrapTemplate(
            host_module=self.config.host_module,
            self_unit_name=self.config.self_unit_name,
        )

        identity = resolve_identity(
            locator, legacy_name, fallback=self.config.self_unit_name
        )
        self.engine = MemoryEngine(host, self.config.storage_unit_name, identity)

        self.last_propagation: Optional[PropagationResult] = None

    @property
    def local_script(self) -> str:
        return self.engine.local_script

    async def ensure_store(self) -> bool:
        """
        Create the store blob if the host does not have it.

        Returns:
            True if the blob was created by this call
        """
        name = self.config.storage_unit_name
        try:
            await self.host.get(name)
            return False
        except NotFoundError:
            logger.warning(f"No storage unit found, creating \"{name}\" ...")

        await self.host.save(name, encode(initial_document()))
        await self.engine.print_global()
        return True

    async def propagate(self) -> Optional[PropagationResult]:
        """
        Run one propagation pass with the configured policy.

        A host failure while listing units is logged and does not stop
        startup; per-unit save failures are already isolated by propagate().
        """
        try:
            self.last_propagation = await propagate(
                self.host,
                self.config.auto_import_mode,
                storage_name=self.config.storage_unit_name,
                custom_list=self.config.auto_import_custom_list,
                template=self.template,
            )
        except HostError as e:
            logger.error(f"Bootstrap propagation aborted: {e}")
            self.last_propagation = None
        return self.last_propagation

    async def start(self) -> MemoryEngine:
        """Ensure the store, propagate once, and return the engine."""
        logger.info(f"Starting memory store for {self.local_script}...")

        await self.ensure_store()
        await self.propagate()

        logger.info(f"Memory store ready: {self.config.storage_unit_name}")
        return self.engine


async def start_memory(host: ContentHost, config: Config = None,
                       locator: Optional[str] = None,
                       legacy_name: Optional[str] = None) -> MemoryEngine:
    """
    Start the store (convenience function).

    Usage::

        mem = await start_memory(host, locator=__file__)
        await mem.write('volume', 40)
    """
    runtime = MemoryRuntime(host, config, locator=locator, legacy_name=legacy_name)
    return await runtime.start()


if __name__ == "__main__":
    from .host import InMemoryHost

    logging.basicConfig(level=logging.INFO)
    asyncio.run(start_memory(InMemoryHost()))
