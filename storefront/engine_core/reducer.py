"""
Reducer - Applies actions to feature state.

The reducer is the single point of state mutation.
All state changes must go through apply().

Design principles:
- Pure function: (state, action) -> (new_state, effects)
- Never performs I/O; effects are returned, not run
- Returns ActionResult with success/failure
- Handler exceptions become failures, the state stays untouched
"""

from __future__ import annotations
from typing import Any, Callable, Generic, TypeVar

import structlog

from .action import Action, ActionResult

logger = structlog.get_logger(__name__)

S = TypeVar("S")
Handler = Callable[[Any, Action], ActionResult]


class Reducer(Generic[S]):
    """
    Base reducer: dispatches each action to a handler by action type.

    Subclasses hold their injected gateways and implement _handlers().
    """

    def apply(self, state: S, action: Action) -> ActionResult:
        """
        Apply an action to the state.

        Returns ActionResult with the new state and effects, or an error.
        """
        handler = self._get_handler(action)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        try:
            return handler(state, action)
        except Exception as e:
            logger.exception(
                "reducer_handler_failed",
                reducer=type(self).__name__,
                action=action.name,
            )
            return ActionResult.failure(str(e), error_code="HANDLER_ERROR")

    def _get_handler(self, action: Action) -> Handler | None:
        """Get the handler function for an action type."""
        return self._handlers().get(action.action_type)

    def _handlers(self) -> dict[Any, Handler]:
        raise NotImplementedError
