"""
Bootstrap Module - Store Access Propagation

Detects which content units lack store access and injects it.
"""

from .markers import BootstrapTemplate, DEFAULT_HOST_MODULE, DEFAULT_SELF_UNIT
from .propagation import ImportPolicy, PropagationResult, propagate, resolve_policy

__all__ = [
    'BootstrapTemplate',
    'DEFAULT_HOST_MODULE',
    'DEFAULT_SELF_UNIT',
    'ImportPolicy',
    'PropagationResult',
    'propagate',
    'resolve_policy',
]
