"""
Caller identity resolution.

A consuming unit's default scope is its own name, taken from the first
source that yields one:

1. module/resource locator (a path or URL; last segment, script suffix removed)
2. legacy naming hook
3. fixed fallback

A locator whose last segment is empty after stripping falls through to the
next source.
"""

import re
from typing import Optional

DEFAULT_IDENTITY = 'Memory_Functions'

_SEGMENT_SPLIT = re.compile(r'[/\\]')
_SCRIPT_SUFFIX = re.compile(r'\.(?:py|js)$', re.IGNORECASE)


def name_from_locator(locator: str) -> str:
    """Last path segment of ``locator`` without its script suffix."""
    segment = _SEGMENT_SPLIT.split(locator)[-1]
    return _SCRIPT_SUFFIX.sub('', segment)


def resolve_identity(locator: Optional[str] = None,
                     legacy_name: Optional[str] = None,
                     fallback: str = DEFAULT_IDENTITY) -> str:
    """Pick the caller identity from the first source that yields a name."""
    if locator:
        name = name_from_locator(locator)
        if name:
            return name

    if legacy_name:
        return legacy_name

    return fallback
