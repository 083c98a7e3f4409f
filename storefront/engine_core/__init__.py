"""
Engine Core - Action-driven state management with asynchronous effects.

The engine is the runtime that:
1. Holds one feature state
2. Serializes actions onto a single mutation lane
3. Applies actions via the feature reducer
4. Runs the effects the reducer describes
5. Posts effect results back as new actions
"""

from .action import Action, ActionPayload, ActionResult
from .effect import Effect, EffectKind
from .reducer import Reducer
from .effect_engine import EffectEngine, EngineStatus

__all__ = [
    "Action",
    "ActionPayload",
    "ActionResult",
    "Effect",
    "EffectKind",
    "Reducer",
    "EffectEngine",
    "EngineStatus",
]
