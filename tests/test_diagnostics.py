"""Tests for Fade Volume diagnostics."""

from __future__ import annotations

import asyncio

from homeassistant.core import HomeAssistant, ServiceCall
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.fade_volume.const import DOMAIN
from custom_components.fade_volume.coordinator import FadeCoordinator
from custom_components.fade_volume.diagnostics import async_get_config_entry_diagnostics
from custom_components.fade_volume.easing import FadeCurve
from custom_components.fade_volume.fade_params import FadeParams


async def test_diagnostics_without_fades(
    hass: HomeAssistant,
    init_integration: MockConfigEntry,
) -> None:
    """Test diagnostics with no running fades."""
    result = await async_get_config_entry_diagnostics(hass, init_integration)

    assert result["config_entry"]["domain"] == DOMAIN
    assert result["active_fades"] == []


async def test_diagnostics_without_coordinator(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,
) -> None:
    """Test diagnostics before the integration is set up."""
    mock_config_entry.add_to_hass(hass)

    result = await async_get_config_entry_diagnostics(hass, mock_config_entry)

    assert result["active_fades"] == []


async def test_diagnostics_lists_running_fade(
    hass: HomeAssistant,
    init_integration: MockConfigEntry,
    mock_player: str,
    volume_calls: list[ServiceCall],
) -> None:
    """Test a running fade shows its plan and progress."""
    coordinator: FadeCoordinator = hass.data[DOMAIN]
    task = asyncio.create_task(
        coordinator.async_fade_volume(
            mock_player, FadeParams(volume=0.8, duration_s=5, curve=FadeCurve.BEZIER)
        )
    )
    async with asyncio.timeout(5):
        while not volume_calls:
            await asyncio.sleep(0.01)

    result = await async_get_config_entry_diagnostics(hass, init_integration)

    assert len(result["active_fades"]) == 1
    fade_info = result["active_fades"][0]
    assert fade_info["entity_id"] == mock_player
    assert fade_info["total_steps"] == 50
    assert fade_info["start_volume"] == 0.2
    assert fade_info["target_volume"] == 0.8
    assert fade_info["curve"] == "bezier"
    assert fade_info["current_step"] >= 1

    coordinator.get_entity(mock_player).signal_cancel()
    await task
