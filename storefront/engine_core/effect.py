"""
Effects - Descriptions of asynchronous work returned by reducers.

A reducer never performs I/O. It returns Effect values; the EffectEngine
runs them and posts whatever they produce back onto the mutation lane.

Kinds:
- SEND: dispatch a follow-up action right away
- RUN: a coroutine that may call send() any number of times
- DELAY: wait, then dispatch an action
- STREAM: a long-lived subscription; each value becomes an action
- FIRE_AND_FORGET: a coroutine whose outcome is only logged
- CANCEL: stop the running effect registered under an identity
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from .action import Action

Send = Callable[["Action"], None]
Operation = Callable[[Send], Awaitable[None]]


class EffectKind(Enum):
    """Kinds of effect the engine knows how to run."""
    SEND = "send"
    RUN = "run"
    DELAY = "delay"
    STREAM = "stream"
    FIRE_AND_FORGET = "fire_and_forget"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Effect:
    """
    One unit of asynchronous work.

    effect_id gives the effect a stable identity. Launching an effect
    whose id is already running cancels the older one first.
    """
    kind: EffectKind
    description: str = ""
    effect_id: str | None = None

    action: Action | None = None  # SEND, DELAY
    operation: Operation | None = None  # RUN, FIRE_AND_FORGET
    seconds: float = 0.0  # DELAY
    source: Callable[[], AsyncIterator[Any]] | None = None  # STREAM
    to_action: Callable[[Any], Action] | None = None  # STREAM

    @property
    def long_lived(self) -> bool:
        return self.kind == EffectKind.STREAM

    @classmethod
    def send(cls, action: Action) -> Effect:
        """Factory for an immediate follow-up action."""
        return cls(
            kind=EffectKind.SEND,
            action=action,
            description=f"send {action.name}",
        )

    @classmethod
    def run(
        cls,
        operation: Operation,
        description: str = "",
        effect_id: str | None = None,
    ) -> Effect:
        """Factory for a coroutine effect."""
        return cls(
            kind=EffectKind.RUN,
            operation=operation,
            description=description,
            effect_id=effect_id,
        )

    @classmethod
    def delay(cls, seconds: float, action: Action, effect_id: str | None = None) -> Effect:
        """Factory for a timer that dispatches an action when it fires."""
        return cls(
            kind=EffectKind.DELAY,
            seconds=seconds,
            action=action,
            effect_id=effect_id,
            description=f"{action.name} after {seconds}s",
        )

    @classmethod
    def stream(
        cls,
        source: Callable[[], AsyncIterator[Any]],
        to_action: Callable[[Any], Action],
        effect_id: str,
        description: str = "",
    ) -> Effect:
        """Factory for a long-lived subscription. Streams always have an identity."""
        return cls(
            kind=EffectKind.STREAM,
            source=source,
            to_action=to_action,
            effect_id=effect_id,
            description=description,
        )

    @classmethod
    def fire_and_forget(cls, operation: Operation, description: str = "") -> Effect:
        """Factory for best-effort work whose failure is logged and dropped."""
        return cls(
            kind=EffectKind.FIRE_AND_FORGET,
            operation=operation,
            description=description,
        )

    @classmethod
    def cancel(cls, effect_id: str) -> Effect:
        """Factory for cancelling a running effect by identity."""
        return cls(
            kind=EffectKind.CANCEL,
            effect_id=effect_id,
            description=f"cancel {effect_id}",
        )
