"""Per-entity fade state for the Fade Volume integration."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from .const import FADE_CANCEL_TIMEOUT_S
from .fade_change import FadeChange

_LOGGER = logging.getLogger(__name__)


@dataclass
class EntityFadeState:
    """Transient state for a single media player's fade.

    Only one fade may own a media player at a time. A new fade takes
    ownership immediately, signals and cancels the previous owner, and then
    waits for it to exit before writing anything.

    Attributes:
        active_task: The asyncio.Task that owns the player. Cancelled when a
            new fade starts or the entity is cleaned up.
        cancel_event: Signals the owning fade loop to stop before its next
            step. A cancelled fade skips its final write.
        fade: The plan of the running fade, if any.
        current_step: Index of the last step written by the running fade.
    """

    active_task: asyncio.Task | None = None
    cancel_event: asyncio.Event | None = None
    fade: FadeChange | None = None
    current_step: int = 0

    @property
    def is_fading(self) -> bool:
        """True when a fade is actively running."""
        return self.active_task is not None

    def start_fade(self, task: asyncio.Task | None) -> asyncio.Task | None:
        """Make *task* the owner of this player and return the fade it replaces.

        Runs without yielding to the event loop, so when several fades start
        together each one supersedes the one installed before it and only
        the last keeps running. The replaced fade is signalled and cancelled.
        """
        prior_task = self.active_task
        self.signal_cancel()
        if prior_task is task:
            prior_task = None
        elif prior_task is not None and not prior_task.done():
            prior_task.cancel()

        self.active_task = task
        self.cancel_event = asyncio.Event()
        self.fade = None
        self.current_step = 0
        return prior_task

    def finish_fade(self, task: asyncio.Task | None) -> None:
        """Clean up after a fade completes (success, cancel, or error).

        Only the owning task clears the state. A superseded fade that exits
        late leaves its successor untouched.
        """
        if self.active_task is not task:
            return
        self.active_task = None
        self.cancel_event = None
        self.fade = None

    def signal_cancel(self) -> None:
        """Signal the active fade to stop early."""
        if self.cancel_event is not None:
            self.cancel_event.set()

    async def wait_for_exit(self, task: asyncio.Task | None) -> None:
        """Wait for a superseded fade to finish, bounded by the cancel timeout."""
        if task is None or task.done():
            return

        await asyncio.wait([task], timeout=FADE_CANCEL_TIMEOUT_S)

        if not task.done():
            _LOGGER.warning("Previous fade did not stop within %ss", FADE_CANCEL_TIMEOUT_S)

    async def cleanup(self) -> None:
        """Full teardown: cancel the task, signal the event, clear all state."""
        if self.cancel_event is not None:
            self.cancel_event.set()
            self.cancel_event = None

        if self.active_task is not None:
            task = self.active_task
            self.active_task = None
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        self.fade = None
        self.current_step = 0
