"""
Bootstrap Propagation

Design Decision: Fan-out Strategy
=================================

Options Considered:
1. Save units one by one
   - Simple, but startup waits on the slowest unit in turn
2. Fire-and-forget saves
   - Fast, but the pass reports done before any save has landed
3. Concurrent saves, wait for all of them to settle
   - Startup continues only once every unit is written
   - One failed save does not stop the others

Decision: asyncio.gather(..., return_exceptions=True)
- Every selected unit is saved concurrently
- The pass resolves after the last save settles
- Failures are logged per unit and collected in the result; nothing retries

The system's own unit and the store blob are never touched, whatever the
policy says: patching either would make the system import itself or corrupt
the store.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Union

from .markers import BootstrapTemplate
from ..errors import ConfigurationError
from ..host import ContentHost, ContentUnit

logger = logging.getLogger(__name__)


class ImportPolicy(Enum):
    """Which units get the bootstrap block."""
    ALWAYS = 'always'
    NEVER = 'never'
    ACTIVE_ONLY = 'activeOnly'
    CUSTOM_LIST = 'customList'
    CUSTOM_ACTIVE_LIST = 'customActiveList'

    @classmethod
    def parse(cls, value: Union['ImportPolicy', str, bool]) -> 'ImportPolicy':
        """
        Parse a configured mode.

        Accepts the enum values plus the older spellings
        true / false / custom / customActive.

        Raises:
            ConfigurationError: Unrecognised value
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.ALWAYS if value else cls.NEVER

        key = str(value).strip()
        for policy in cls:
            if policy.value == key:
                return policy
        if key in _ALIASES:
            return _ALIASES[key]

        raise ConfigurationError(f"Unknown auto-import mode: {value!r}")

    def selects(self, unit: ContentUnit, custom_list: Iterable[str]) -> bool:
        """Whether this policy patches ``unit``."""
        if self is ImportPolicy.ALWAYS:
            return True
        if self is ImportPolicy.ACTIVE_ONLY:
            return unit.active
        if self is ImportPolicy.CUSTOM_LIST:
            return unit.name in custom_list
        if self is ImportPolicy.CUSTOM_ACTIVE_LIST:
            return unit.active and unit.name in custom_list
        return False


_ALIASES = {
    'true': ImportPolicy.ALWAYS,
    'false': ImportPolicy.NEVER,
    'custom': ImportPolicy.CUSTOM_LIST,
    'customActive': ImportPolicy.CUSTOM_ACTIVE_LIST,
}


@dataclass
class PropagationResult:
    """Outcome of one propagation pass."""
    policy: ImportPolicy
    patched: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)  # selected by nothing, or already wired

    def to_dict(self) -> dict:
        return {
            'policy': self.policy.value,
            'patched': list(self.patched),
            'failed': list(self.failed),
            'skipped': list(self.skipped),
        }


def resolve_policy(mode: Union[ImportPolicy, str, bool]) -> ImportPolicy:
    """Parse ``mode``, logging and falling back to NEVER when it is unknown."""
    try:
        return ImportPolicy.parse(mode)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}; defaulting to '{ImportPolicy.NEVER.value}'")
        return ImportPolicy.NEVER


async def propagate(host: ContentHost,
                    mode: Union[ImportPolicy, str, bool],
                    storage_name: str,
                    custom_list: Optional[Iterable[str]] = None,
                    template: Optional[BootstrapTemplate] = None) -> PropagationResult:
    """
    Inject the bootstrap block into every unit the policy selects.

    Args:
        host: Content-unit API
        mode: Inclusion policy, or its configured string form
        storage_name: Store blob unit, never patched
        custom_list: Allow-list for the custom-list policies
        template: Marker probes and block; its self_unit_name is never patched

    Returns:
        PropagationResult once every save has settled
    """
    template = template or BootstrapTemplate()
    policy = resolve_policy(mode)
    allowed = list(custom_list or [])
    protected = {template.self_unit_name, storage_name}

    result = PropagationResult(policy=policy)
    units = await host.get(with_content=True)

    selected: List[ContentUnit] = []
    for unit in units:
        if unit.name in protected:
            continue

        content = unit.content or ''
        if not template.needs_patch(content) or not policy.selects(unit, allowed):
            result.skipped.append(unit.name)
            continue

        selected.append(unit)

    if not selected:
        logger.debug(f"Propagation ({policy.value}): nothing to patch")
        return result

    outcomes = await asyncio.gather(
        *(_patch_unit(host, template, unit) for unit in selected),
        return_exceptions=True,
    )

    for unit, outcome in zip(selected, outcomes):
        if isinstance(outcome, BaseException):
            logger.error(f"Failed to add mem-import to {unit.name}: {outcome}")
            result.failed.append(unit.name)
        else:
            result.patched.append(unit.name)

    logger.info(
        f"Propagation ({policy.value}): {len(result.patched)} patched, "
        f"{len(result.failed)} failed"
    )
    return result


async def _patch_unit(host: ContentHost, template: BootstrapTemplate, unit: ContentUnit):
    new_content = template.patch(unit.content or '')
    await host.save(unit.name, new_content)
    logger.info(f"Added mem-import to {unit.name}")
