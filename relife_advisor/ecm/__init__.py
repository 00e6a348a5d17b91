"""
ECM Module - user modifications on archetype payloads.

Key features:
- Structural copies only: cached archetype defaults are never touched
- Role-based envelope changes (walls, roof, windows)
- Simulator setpoint conventions (fixed setback offsets)
- Validation that reports every violated bound at once
"""

from .constraints import (
    MODIFICATION_CONSTRAINTS,
    ModificationError,
    ModificationValidation,
    validate_modifications,
)
from .transformer import (
    COOLING_SETBACK_OFFSET,
    HEATING_SETBACK_OFFSET,
    ModifiedPayload,
    PayloadTransformer,
)

__all__ = [
    'MODIFICATION_CONSTRAINTS', 'ModificationError', 'ModificationValidation', 'validate_modifications',
    'COOLING_SETBACK_OFFSET', 'HEATING_SETBACK_OFFSET', 'ModifiedPayload', 'PayloadTransformer',
]
