"""FadeCoordinator for the Fade Volume integration.

Owns the per-player fade registry and runs the fade loop: read the current
volume, plan the steps, write one setpoint per tick until the step budget is
used up or the player has converged on the target, then write the exact
target once.
"""

from __future__ import annotations

import asyncio
import logging

from homeassistant.components.media_player import ATTR_MEDIA_VOLUME_LEVEL
from homeassistant.components.media_player.const import DOMAIN as MEDIA_PLAYER_DOMAIN
from homeassistant.const import (
    ATTR_ENTITY_ID,
    SERVICE_VOLUME_SET,
    STATE_UNAVAILABLE,
)
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.service import remove_entity_service_fields
from homeassistant.helpers.target import (
    TargetSelection,
    async_extract_referenced_entity_ids,
)

from .const import (
    DEFAULT_CURVE,
    DEFAULT_DURATION,
    DEFAULT_VOLUME,
    VOLUME_TOLERANCE,
)
from .entity_fade_state import EntityFadeState
from .exceptions import DeviceUnavailable
from .fade_change import FadeChange, FadeOutcome
from .fade_params import FadeParams

_LOGGER = logging.getLogger(__name__)


# =============================================================================
# FadeCoordinator
# =============================================================================


class FadeCoordinator:
    """Coordinate all volume fades for the Fade Volume integration.

    Stored as ``hass.data[DOMAIN]``. Owns the per-player fade state and
    enforces a single fade per media player.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        default_volume: float = DEFAULT_VOLUME,
        default_duration: float = DEFAULT_DURATION,
        default_curve: str = DEFAULT_CURVE,
    ) -> None:
        self.hass = hass
        self.default_volume = default_volume
        self.default_duration = default_duration
        self.default_curve = default_curve
        self._entities: dict[str, EntityFadeState] = {}

    # --------------------------------------------------------------------- #
    # Entity helpers
    # --------------------------------------------------------------------- #

    def get_entity(self, entity_id: str) -> EntityFadeState | None:
        """Return the EntityFadeState for *entity_id*, or ``None``."""
        return self._entities.get(entity_id)

    def get_or_create_entity(self, entity_id: str) -> EntityFadeState:
        """Return (or create) the EntityFadeState for *entity_id*."""
        if entity_id not in self._entities:
            self._entities[entity_id] = EntityFadeState()
        return self._entities[entity_id]

    # --------------------------------------------------------------------- #
    # Service handler: fade_volume
    # --------------------------------------------------------------------- #

    async def handle_fade_volume(self, call: ServiceCall) -> None:
        """Handle the fade_volume service call."""
        # Target fields (entity_id, device_id, area_id, ...) are resolved
        # separately via TargetSelection
        service_data = remove_entity_service_fields(call)
        fade_params = FadeParams.from_service_data(
            service_data,
            default_volume=self.default_volume,
            default_duration=self.default_duration,
            default_curve=self.default_curve,
        )

        target_selection = TargetSelection(call.data)
        selected = async_extract_referenced_entity_ids(self.hass, target_selection)
        all_entity_ids = selected.referenced | selected.indirectly_referenced

        entity_ids = self._expand_player_groups(list(all_entity_ids))
        if not entity_ids:
            _LOGGER.debug("No media player entities found in target")
            return

        tasks = [
            asyncio.create_task(self.async_fade_volume(entity_id, fade_params))
            for entity_id in entity_ids
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        for result in results:
            if isinstance(result, Exception):
                raise result

    # --------------------------------------------------------------------- #
    # Fade execution
    # --------------------------------------------------------------------- #

    async def async_fade_volume(
        self,
        entity_id: str,
        fade_params: FadeParams,
    ) -> FadeOutcome:
        """Fade a single media player to the requested volume.

        This is the entry point for fading a single player. It handles:
        - Taking ownership of the player, which cancels any existing fade
        - Waiting for the cancelled fade to exit
        - Delegating to _execute_fade for the actual work
        - Releasing ownership when done (success, cancel, or error)

        Raises:
            DeviceUnavailable: If the player cannot be read or written.
        """
        entity = self.get_or_create_entity(entity_id)
        task = asyncio.current_task()

        # Ownership changes before the first await
        prior_task = entity.start_fade(task)
        assert entity.cancel_event is not None  # set by start_fade
        cancel_event = entity.cancel_event

        try:
            await entity.wait_for_exit(prior_task)
            return await self._execute_fade(entity_id, fade_params, entity, cancel_event)
        except asyncio.CancelledError:
            # Superseded by a newer fade or unloaded
            _LOGGER.debug("%s: Fade cancelled", entity_id)
            return FadeOutcome.CANCELLED
        finally:
            entity.finish_fade(task)

    async def _execute_fade(
        self,
        entity_id: str,
        fade_params: FadeParams,
        entity: EntityFadeState,
        cancel_event: asyncio.Event,
    ) -> FadeOutcome:
        """Run the fade loop and the final exact write.

        Before every step the loop checks, in order, for cancellation, an
        exhausted step budget and convergence of the live volume on the
        target. Each written step is followed by one tick of sleep; the
        sleep is added to the service call latency, so a fade never runs
        shorter than its nominal duration.
        """
        start_volume = self._read_volume(entity_id)
        fade = FadeChange.plan(fade_params, start_volume)
        entity.fade = fade

        _LOGGER.info(
            "%s: Fading in %s steps (volume=%s->%s, curve=%s, duration=%ss)",
            entity_id,
            fade.total_steps,
            fade.start_volume,
            fade.target_volume,
            fade.curve,
            fade_params.duration_s,
        )

        index = 1
        while True:
            if cancel_event.is_set():
                _LOGGER.debug("%s: Fade superseded at step %s", entity_id, index)
                return FadeOutcome.CANCELLED

            if fade.is_exhausted(index):
                outcome = FadeOutcome.EXHAUSTED
                break

            if self._has_converged(entity_id, fade.target_volume):
                outcome = FadeOutcome.CONVERGED
                break

            step = fade.step_at(index)
            await self._apply_volume(entity_id, step.volume)
            entity.current_step = index

            await _sleep_one_tick(fade.tick_interval_s)
            index += 1

        await self._apply_volume(entity_id, fade.target_volume)

        _LOGGER.info(
            "%s: Fade complete at volume %s (%s after %s steps)",
            entity_id,
            fade.target_volume,
            outcome,
            index - 1,
        )
        return outcome

    def _read_volume(self, entity_id: str) -> float:
        """Read the current volume level of a media player.

        A player without a volume level (e.g. one that is off) reads as 0.0.
        A missing or unavailable entity is never read as 0.0; it raises
        before any step is planned.

        Raises:
            DeviceUnavailable: If the entity is missing or unavailable.
        """
        state = self.hass.states.get(entity_id)
        if state is None or state.state == STATE_UNAVAILABLE:
            raise DeviceUnavailable(f"{entity_id} is not available")

        volume = state.attributes.get(ATTR_MEDIA_VOLUME_LEVEL)
        if volume is None:
            return 0.0
        return float(volume)

    def _has_converged(self, entity_id: str, target_volume: float) -> bool:
        """Check whether the live volume is within tolerance of the target."""
        return abs(self._read_volume(entity_id) - target_volume) <= VOLUME_TOLERANCE

    async def _apply_volume(self, entity_id: str, volume: float) -> None:
        """Write a volume setpoint to a media player.

        Raises:
            DeviceUnavailable: If the service call fails. The step is not retried.
        """
        _LOGGER.debug("%s: volume_level=%s", entity_id, volume)
        try:
            await self.hass.services.async_call(
                MEDIA_PLAYER_DOMAIN,
                SERVICE_VOLUME_SET,
                {ATTR_ENTITY_ID: entity_id, ATTR_MEDIA_VOLUME_LEVEL: volume},
                blocking=True,
            )
        except HomeAssistantError as err:
            _LOGGER.warning("%s: Failed to set volume to %s: %s", entity_id, volume, err)
            raise DeviceUnavailable(f"Failed to set volume on {entity_id}: {err}") from err

    # --------------------------------------------------------------------- #
    # Media player group expansion
    # --------------------------------------------------------------------- #

    def _expand_player_groups(self, entity_ids: list[str]) -> list[str]:
        """Expand media player groups to individual players.

        Media player groups have an entity_id attribute containing member
        players. Expands iteratively (not recursively) and deduplicates.
        Players without a state are kept so that the fade reports them as
        unavailable.

        Example:
            Input: ["media_player.downstairs", "media_player.bedroom"]
            If media_player.downstairs contains [media_player.kitchen, media_player.lounge]
            Output: ["media_player.bedroom", "media_player.kitchen", "media_player.lounge"]
        """
        pending = list(entity_ids)
        seen: set[str] = set()
        result: set[str] = set()
        player_prefix = f"{MEDIA_PLAYER_DOMAIN}."

        while pending:
            entity_id = pending.pop()
            if entity_id in seen:
                continue
            seen.add(entity_id)

            if not entity_id.startswith(player_prefix):
                continue

            state = self.hass.states.get(entity_id)
            if state is not None and ATTR_ENTITY_ID in state.attributes:
                group_members = state.attributes[ATTR_ENTITY_ID]
                if isinstance(group_members, str):
                    group_members = [group_members]
                pending.extend(group_members)
            else:
                result.add(entity_id)

        return sorted(result)

    # --------------------------------------------------------------------- #
    # Cleanup
    # --------------------------------------------------------------------- #

    async def cleanup_entity(self, entity_id: str) -> None:
        """Cancel any fade and drop tracking state for a removed entity."""
        _LOGGER.debug("%s: Cleaning up data for removed entity", entity_id)

        entity = self._entities.pop(entity_id, None)
        if entity is not None:
            await entity.cleanup()

    async def shutdown(self) -> None:
        """Shut down all active fades and clean up state."""
        for entity in self._entities.values():
            entity.signal_cancel()
        tasks = []
        for entity in self._entities.values():
            if entity.active_task is not None:
                entity.active_task.cancel()
                tasks.append(entity.active_task)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._entities.clear()


# =============================================================================
# Module-level utility functions (stateless)
# =============================================================================


async def _sleep_one_tick(interval_s: float) -> None:
    """Sleep for one tick of the fade loop.

    The sleep starts after the step's service call has returned and is not
    shortened to make up for its latency or for event loop delays.
    """
    await asyncio.sleep(interval_s)
