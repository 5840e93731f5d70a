"""
Bootstrap Markers

A consuming unit is wired to the store when its text carries three things:

1. the host capability import      ``import xapi``
2. the store import                ``from Memory_Functions import mem, ...``
3. the identity assignment         ``mem.local_script = ...``

Each is checked by its own probe. Patching replaces the longest run of those
statements at the top of the unit (any subset, in that order, possibly none)
with the canonical block and keeps the rest of the text verbatim.

The top of the unit starts after its header: a shebang, an encoding cookie,
the module docstring and any ``from __future__`` imports. Those have to stay
first for the unit to compile, so the block goes in after them.
"""

import io
import re
import tokenize
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_HOST_MODULE = 'xapi'
DEFAULT_SELF_UNIT = 'Memory_Functions'

BLOCK_TEMPLATE = (
    'import {host_module}\n'
    'from {self_unit} import mem, resolve_identity\n'
    '\n'
    'mem.local_script = resolve_identity(globals().get("__file__"), fallback="Unknown")\n'
    '\n'
)

_PREAMBLE = re.compile(
    r'(?:#![^\n]*(?:\n|\Z))?'
    r'(?:[ \t\f]*#[^\n]*coding[:=][^\n]*(?:\n|\Z))?'
)
_DOCSTRING = re.compile(r'(?:\s*#[^\n]*(?:\n|\Z))*\s*(?P<stmt>[rRuU]?["\'])')
_FUTURE_IMPORT = re.compile(
    r'(?:\s*#[^\n]*(?:\n|\Z))*\s*(?P<stmt>from[ \t]+__future__[ \t]+import\b)'
)
_BLANK_LINES = re.compile(r'(?:\r?\n)*')


def _statement_end(text: str, pos: int) -> Optional[int]:
    """
    Offset just past the logical line that starts at ``pos``.

    Bracketed continuations, backslash continuations and multi-line strings
    all belong to the statement. Returns None when the text cannot be
    tokenized up to the end of that statement.
    """
    source = text[pos:]
    lines = io.StringIO(source).readlines()
    try:
        for token in tokenize.generate_tokens(io.StringIO(source).readline):
            if token.type in (tokenize.NEWLINE, tokenize.ENDMARKER):
                row, col = token.end
                offset = sum(len(line) for line in lines[:row - 1]) + col
                return pos + min(offset, len(source))
    except (tokenize.TokenError, SyntaxError):
        return None
    return None


@dataclass
class BootstrapTemplate:
    """Marker probes and canonical block for one host module / system unit pair."""
    host_module: str = DEFAULT_HOST_MODULE
    self_unit_name: str = DEFAULT_SELF_UNIT

    _host_probe: re.Pattern = field(init=False, repr=False)
    _store_probe: re.Pattern = field(init=False, repr=False)
    _identity_probe: re.Pattern = field(init=False, repr=False)
    _markers: tuple = field(init=False, repr=False)

    def __post_init__(self):
        module = re.escape(self.host_module)
        unit = re.escape(self.self_unit_name)

        host_line = rf'import[ \t]+{module}\b[ \t]*;?[ \t]*(?:#[^\r\n]*)?(?=\r?\n|\Z)'
        store_line = rf'from[ \t]+{unit}[ \t]+import[ \t]+[^\n]*\bmem\b[^\n]*'
        identity_line = r'mem\.local_script[ \t]*=(?!=)[^\n]*'

        self._host_probe = re.compile(rf'^[ \t]*import[ \t]+{module}\b', re.MULTILINE)
        self._store_probe = re.compile(rf'^[ \t]*{store_line}', re.MULTILINE)
        self._identity_probe = re.compile(r'\b' + identity_line)

        # Statement openers for the leading marker run, in block order
        self._markers = (
            re.compile(rf'\s*(?P<stmt>{host_line})'),
            re.compile(rf'\s*(?P<stmt>from[ \t]+{unit}[ \t]+import\b)'),
            re.compile(r'\s*(?P<stmt>mem\.local_script[ \t]*=(?!=))'),
        )

    @property
    def block(self) -> str:
        """The canonical bootstrap block."""
        return BLOCK_TEMPLATE.format(
            host_module=self.host_module,
            self_unit=self.self_unit_name,
        )

    # === Probes ===

    def has_host_import(self, text: str) -> bool:
        return self._host_probe.search(text) is not None

    def has_store_import(self, text: str) -> bool:
        return self._store_probe.search(text) is not None

    def has_identity(self, text: str) -> bool:
        return self._identity_probe.search(text) is not None

    def needs_patch(self, text: str) -> bool:
        """True when any of the three markers is missing."""
        return not (
            self.has_host_import(text)
            and self.has_store_import(text)
            and self.has_identity(text)
        )

    # === Rewrite ===

    def patch(self, text: str) -> str:
        """Swap the leading marker run for the canonical block, after the header."""
        start = self._header_end(text)
        end = self._marker_run_end(text, start)

        head = text[:start]
        if head and not head.endswith('\n'):
            head += '\n'
        return head + self.block + text[end:]

    def _header_end(self, text: str) -> int:
        pos = _PREAMBLE.match(text).end()

        match = _DOCSTRING.match(text, pos)
        if match:
            end = _statement_end(text, match.start('stmt'))
            if end is not None:
                pos = end

        while True:
            match = _FUTURE_IMPORT.match(text, pos)
            if match is None:
                return pos
            end = _statement_end(text, match.start('stmt'))
            if end is None:
                return pos
            pos = end

    def _marker_run_end(self, text: str, pos: int) -> int:
        for index, marker in enumerate(self._markers):
            match = marker.match(text, pos)
            if match is None:
                continue
            end = _statement_end(text, match.start('stmt'))
            if end is None:
                break
            # The store import only counts when it brings in ``mem``
            if index == 1 and not re.search(r'\bmem\b', text[match.end():end]):
                continue
            pos = _BLANK_LINES.match(text, end).end()
        return pos
