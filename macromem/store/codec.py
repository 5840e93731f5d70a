"""
Store Blob Codec

Design Decision: Blob Format
============================

The host only stores text that is meant to look like a script, so the store
blob has to be valid script boilerplate and a faithful serialization at the
same time.

Options Considered:
1. Bare JSON - Simplest, but not a plausible script for the host
2. Declaration + JSON literal - Reads as a variable assignment on the host
3. Custom key=value lines - No nesting

Decision: ``var memory = <JSON object>``
- The declaration is fixed and written back on every save
- Decoding skips everything before the first ``{`` and strips a trailing
  ``;`` so the one wrapping convention is tolerated
- Anything else fails fast with StoreCorruptError; there is no repair
"""

import json
from typing import Any, Dict

from ..errors import StoreCorruptError

# Declaration boilerplate written in front of the JSON literal
DECLARATION = 'var memory = '

# Reserved top-level key holding the documentation record
INFO_KEY = './_$Info'

GUIDE_URL = (
    'https://github.com/Bobby-McGonigle/Cisco-RoomDevice-Macro-Projects-Examples'
    '/tree/master/Macro%20Memory%20Storage'
)


def initial_document() -> Dict[str, Any]:
    """Skeleton document written when the store blob is first created."""
    return {
        INFO_KEY: {
            'Warning': (
                'Do NOT modify this document, as other Scripts/Macros may '
                'rely on this information'
            ),
            'AvailableFunctions': {
                'local': [
                    "mem.read('key')",
                    "mem.write('key', 'value')",
                    "mem.remove('key')",
                    "mem.print()",
                ],
                'global': [
                    "mem.read_global('key')",
                    "mem.write_global('key', 'value')",
                    "mem.remove_global('key')",
                    "mem.print_global()",
                ],
                'scoped': [
                    "mem.for_scope('name').read('key')",
                ],
            },
            'Guide': GUIDE_URL,
        },
        'ExampleKey': 'Example Value',
    }


def decode(text: str) -> Dict[str, Any]:
    """
    Parse store blob text into a document.

    Raises:
        StoreCorruptError: No object literal found, invalid JSON, or the
            literal is not an object.
    """
    start = text.find('{')
    if start < 0:
        raise StoreCorruptError("Store blob has no object literal")

    literal = text[start:].rstrip().rstrip(';').rstrip()

    try:
        document = json.loads(literal)
    except json.JSONDecodeError as e:
        raise StoreCorruptError(f"Store blob is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise StoreCorruptError("Store blob literal is not an object")

    return document


def encode(document: Dict[str, Any]) -> str:
    """Serialize a document back into store blob text."""
    return DECLARATION + json.dumps(document, indent=4, ensure_ascii=False)
