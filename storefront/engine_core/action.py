"""
Action System - Actions, payloads, and results.

Actions represent:
1. User intents (typing, tapping, adding to cart)
2. Effect results (network replies, cache reads, timers)
3. Environment events (connectivity changes)

All state changes flow through actions. Each feature declares its own
closed set of action types; this module only holds the shared shapes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .effect import Effect


@dataclass(frozen=True)
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    This is a generic container; interpretation happens in the reducer.
    """
    # Text input (search, username, password)
    text: str | None = None

    # Catalog / cart
    product_id: int | None = None
    category: str | None = None
    products: tuple[Any, ...] | None = None  # tuple[Product, ...]

    # Connectivity
    is_connected: bool | None = None

    # Effect results
    result: Any | None = None  # Ok | Err, or the GatewayError of a failure
    generation: int | None = None  # Which request produced this result


@dataclass(frozen=True)
class Action:
    """
    A complete action to be applied to a feature state.

    Actions are:
    - Immutable once constructed
    - Recorded in the engine history
    - Applied one at a time by the reducer
    """
    action_type: Enum
    payload: ActionPayload = field(default_factory=ActionPayload)

    @property
    def name(self) -> str:
        return self.action_type.value


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action was handled
    - New state (unchanged state on failure)
    - Effects to run (never executed by the reducer itself)
    - Human-readable changes for logging
    """
    success: bool
    new_state: Any | None = None
    effects: list[Effect] = field(default_factory=list)
    error: str | None = None
    error_code: str | None = None
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        effects: list[Effect] | None = None,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            effects=effects or [],
            state_changes=changes or [],
        )
