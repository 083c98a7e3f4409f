"""
Effect Engine - Serialized state mutation with concurrent effects.

The engine is the runtime that:
1. Owns the authoritative state of one feature
2. Queues every action on a single mutation lane
3. Applies actions one at a time via the reducer
4. Launches the effects the reducer returns
5. Feeds effect output back onto the same lane

Only the lane task touches the state. Effects run as independent asyncio
tasks and communicate exclusively through send().
"""

from __future__ import annotations
import asyncio
from collections import deque
from enum import Enum
from functools import partial
from typing import Generic, TypeVar

import structlog

from .action import Action
from .effect import Effect, EffectKind
from .reducer import Reducer

logger = structlog.get_logger(__name__)

S = TypeVar("S")

DEFAULT_HISTORY_SIZE = 256


class EngineStatus(Enum):
    """Lifecycle of an engine."""
    CREATED = "created"  # Constructed, lane not started
    RUNNING = "running"  # Lane consuming actions
    STOPPED = "stopped"  # Shut down, effects cancelled


class EffectEngine(Generic[S]):
    """
    State container for one feature.

    Usage:
        engine = EffectEngine(StoreReducer(api, cache, connectivity), StoreState())
        engine.send(StoreAction.on_appear())
        await engine.settle()
        engine.state.products

        await engine.shutdown()  # cancels every outstanding effect

    The engine must be used from inside a running event loop; send()
    starts the lane on first use.
    """

    def __init__(
        self,
        reducer: Reducer[S],
        initial_state: S,
        name: str = "engine",
        history_size: int = DEFAULT_HISTORY_SIZE,
    ):
        self.reducer = reducer
        self.name = name
        self.status = EngineStatus.CREATED
        # Most recent applied actions, oldest dropped first
        self.history: deque[Action] = deque(maxlen=history_size)

        self._state = initial_state
        self._queue: asyncio.Queue[Action] | None = None
        self._lane: asyncio.Task | None = None

        # Running effect tasks
        self._tasks: set[asyncio.Task] = set()
        self._long_lived: set[asyncio.Task] = set()
        self._registry: dict[str, asyncio.Task] = {}

    @property
    def state(self) -> S:
        """Current state. Read-only outside the lane."""
        return self._state

    @property
    def active_effect_ids(self) -> list[str]:
        """Identities of registered effects that are still running."""
        return [eid for eid, task in self._registry.items() if not task.done()]

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self):
        """Create the queue and the lane task."""
        if self.status == EngineStatus.RUNNING:
            return
        if self.status == EngineStatus.STOPPED:
            raise RuntimeError(f"Engine {self.name} has been shut down")

        self._queue = asyncio.Queue()
        self._lane = asyncio.get_running_loop().create_task(
            self._run_lane(), name=f"{self.name}-lane"
        )
        self.status = EngineStatus.RUNNING

    async def shutdown(self):
        """
        Cancel every outstanding effect and stop the lane.

        Actions still queued are dropped. The engine cannot be restarted.
        """
        if self.status == EngineStatus.STOPPED:
            return
        self.status = EngineStatus.STOPPED

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if self._lane:
            self._lane.cancel()
            tasks.append(self._lane)

        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._long_lived.clear()
        self._registry.clear()
        logger.debug("engine_stopped", engine=self.name, cancelled=len(tasks))

    # =========================================================================
    # Dispatch
    # =========================================================================

    def send(self, action: Action):
        """Queue an action on the mutation lane."""
        if self.status == EngineStatus.STOPPED:
            logger.debug("action_dropped", engine=self.name, action=action.name)
            return
        if self.status == EngineStatus.CREATED:
            self.start()
        self._queue.put_nowait(action)

    async def dispatch(self, action: Action) -> S:
        """Queue an action and wait until the lane has applied it."""
        self.send(action)
        await self.drain()
        return self._state

    async def drain(self):
        """Wait until every queued action has been reduced."""
        if self._queue is not None and self.status == EngineStatus.RUNNING:
            await self._queue.join()

    async def settle(self, timeout: float | None = None):
        """
        Wait until the lane is idle and no one-shot effect is running.

        Long-lived stream effects are not waited for.
        """
        if timeout is None:
            await self._settle()
        else:
            await asyncio.wait_for(self._settle(), timeout)

    async def _settle(self):
        while self.status == EngineStatus.RUNNING:
            await self.drain()
            pending = [
                t for t in self._tasks
                if not t.done() and t not in self._long_lived
            ]
            if not pending:
                if self._queue.empty():
                    return
                continue
            await asyncio.wait(pending)

    def cancel(self, effect_id: str) -> bool:
        """
        Cancel the running effect registered under effect_id.

        Returns True if a running effect was cancelled.
        """
        task = self._registry.pop(effect_id, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug("effect_cancel_requested", engine=self.name, effect_id=effect_id)
        return True

    # =========================================================================
    # Lane
    # =========================================================================

    async def _run_lane(self):
        while True:
            action = await self._queue.get()
            try:
                self._reduce(action)
            except Exception:
                # The lane outlives any single action
                logger.exception("action_crashed", engine=self.name, action=action.name)
            finally:
                self._queue.task_done()

    def _reduce(self, action: Action):
        result = self.reducer.apply(self._state, action)
        if not result.success:
            logger.warning(
                "action_failed",
                engine=self.name,
                action=action.name,
                error=result.error,
                error_code=result.error_code,
            )
            return

        self._state = result.new_state
        self.history.append(action)
        for change in result.state_changes:
            logger.debug("state_changed", engine=self.name, action=action.name, change=change)

        for effect in result.effects:
            try:
                self._launch(effect)
            except Exception:
                logger.exception("effect_launch_failed", engine=self.name, action=action.name)

    # =========================================================================
    # Effects
    # =========================================================================

    def _launch(self, effect: Effect):
        if effect.kind == EffectKind.SEND:
            self._queue.put_nowait(effect.action)
            return
        if effect.kind == EffectKind.CANCEL:
            self.cancel(effect.effect_id)
            return

        if effect.effect_id:
            self.cancel(effect.effect_id)

        task = asyncio.get_running_loop().create_task(
            self._execute(effect),
            name=f"{self.name}:{effect.effect_id or effect.kind.value}",
        )
        self._tasks.add(task)
        if effect.long_lived:
            self._long_lived.add(task)
        if effect.effect_id:
            self._registry[effect.effect_id] = task
        task.add_done_callback(partial(self._forget, effect.effect_id))

    def _forget(self, effect_id: str | None, task: asyncio.Task):
        self._tasks.discard(task)
        self._long_lived.discard(task)
        if effect_id and self._registry.get(effect_id) is task:
            del self._registry[effect_id]

    async def _execute(self, effect: Effect):
        try:
            if effect.kind in (EffectKind.RUN, EffectKind.FIRE_AND_FORGET):
                await effect.operation(self.send)
            elif effect.kind == EffectKind.DELAY:
                await asyncio.sleep(effect.seconds)
                self.send(effect.action)
            elif effect.kind == EffectKind.STREAM:
                async for value in effect.source():
                    self.send(effect.to_action(value))
        except asyncio.CancelledError:
            logger.debug("effect_cancelled", engine=self.name, effect=effect.description)
            raise
        except Exception:
            logger.exception(
                "effect_failed",
                engine=self.name,
                effect=effect.description,
                kind=effect.kind.value,
            )
