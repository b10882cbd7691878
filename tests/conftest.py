"""Fixtures for Fade Volume integration tests."""

from __future__ import annotations

from collections.abc import Generator
from unittest.mock import AsyncMock, patch

import pytest
from homeassistant.components.media_player import ATTR_MEDIA_VOLUME_LEVEL
from homeassistant.const import ATTR_ENTITY_ID, STATE_OFF, STATE_PLAYING
from homeassistant.core import HomeAssistant, ServiceCall
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.fade_volume.const import DOMAIN


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(
    enable_custom_integrations: None,
) -> Generator[None]:
    """Enable custom integrations for all tests."""
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Create a mock config entry for the Fade Volume integration."""
    return MockConfigEntry(
        domain=DOMAIN,
        title="Fade Volume",
        data={},
        options={},
        unique_id="fade_volume_unique",
    )


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,
) -> MockConfigEntry:
    """Set up the Fade Volume integration for testing."""
    mock_config_entry.add_to_hass(hass)

    await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()

    return mock_config_entry


@pytest.fixture
def mock_player(hass: HomeAssistant) -> str:
    """Create a mock media player entity playing at volume 0.2."""
    entity_id = "media_player.test_player"
    hass.states.async_set(
        entity_id,
        STATE_PLAYING,
        {ATTR_MEDIA_VOLUME_LEVEL: 0.2},
    )
    return entity_id


@pytest.fixture
def mock_player_off(hass: HomeAssistant) -> str:
    """Create a mock media player entity that is off (no volume level)."""
    entity_id = "media_player.test_player_off"
    hass.states.async_set(entity_id, STATE_OFF, {})
    return entity_id


@pytest.fixture
def mock_player_group(hass: HomeAssistant, mock_player: str, mock_player_off: str) -> str:
    """Create a mock media player group containing other players."""
    entity_id = "media_player.test_group"
    hass.states.async_set(
        entity_id,
        STATE_PLAYING,
        {
            ATTR_MEDIA_VOLUME_LEVEL: 0.2,
            ATTR_ENTITY_ID: [mock_player, mock_player_off],
        },
    )
    return entity_id


@pytest.fixture
def volume_calls(hass: HomeAssistant) -> list[ServiceCall]:
    """Capture media_player.volume_set calls and update player state accordingly."""
    calls: list[ServiceCall] = []

    async def mock_volume_set(call: ServiceCall) -> None:
        """Record the service call and update the player's volume."""
        calls.append(call)

        entity_id = call.data.get(ATTR_ENTITY_ID)
        if entity_id:
            entity_ids = entity_id if isinstance(entity_id, list) else [entity_id]
            for eid in entity_ids:
                current_state = hass.states.get(eid)
                if current_state:
                    current_attrs = dict(current_state.attributes)
                    current_attrs[ATTR_MEDIA_VOLUME_LEVEL] = call.data[ATTR_MEDIA_VOLUME_LEVEL]
                    hass.states.async_set(eid, current_state.state, current_attrs)

    hass.services.async_register("media_player", "volume_set", mock_volume_set)

    return calls


@pytest.fixture
def no_tick_delay() -> Generator[AsyncMock]:
    """Skip the per-tick sleep so fades finish immediately."""
    with patch(
        "custom_components.fade_volume.coordinator._sleep_one_tick",
        new_callable=AsyncMock,
    ) as mock_sleep:
        yield mock_sleep

