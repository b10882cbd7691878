"""The Fade Volume integration."""

from __future__ import annotations

import logging

import voluptuous as vol
from homeassistant.components.media_player.const import DOMAIN as MEDIA_PLAYER_DOMAIN
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import Event, HomeAssistant, ServiceCall
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers import entity_registry as er
from homeassistant.helpers.typing import ConfigType

from .const import (
    DEFAULT_CURVE,
    DEFAULT_DURATION,
    DEFAULT_LOG_LEVEL,
    DEFAULT_VOLUME,
    DOMAIN,
    LOG_LEVEL_DEBUG,
    LOG_LEVEL_INFO,
    LOG_LEVEL_WARNING,
    OPTION_DEFAULT_CURVE,
    OPTION_DEFAULT_DURATION,
    OPTION_DEFAULT_VOLUME,
    OPTION_LOG_LEVEL,
    SERVICE_FADE_VOLUME,
)
from .coordinator import FadeCoordinator

_LOGGER = logging.getLogger(__name__)


# =============================================================================
# Integration Setup
# =============================================================================


async def async_setup(hass: HomeAssistant, _config: ConfigType) -> bool:
    """Set up the Fade Volume component."""
    if not hass.config_entries.async_entries(DOMAIN):
        hass.async_create_task(
            hass.config_entries.flow.async_init(DOMAIN, context={"source": "import"})
        )
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Fade Volume from a config entry."""
    coordinator = FadeCoordinator(
        hass=hass,
        default_volume=entry.options.get(OPTION_DEFAULT_VOLUME, DEFAULT_VOLUME),
        default_duration=entry.options.get(OPTION_DEFAULT_DURATION, DEFAULT_DURATION),
        default_curve=entry.options.get(OPTION_DEFAULT_CURVE, DEFAULT_CURVE),
    )

    hass.data[DOMAIN] = coordinator

    async def handle_fade_volume(call: ServiceCall) -> None:
        """Service handler wrapper."""
        await coordinator.handle_fade_volume(call)

    # Field validation happens in FadeParams so every rejection is InvalidInput
    hass.services.async_register(
        DOMAIN,
        SERVICE_FADE_VOLUME,
        handle_fade_volume,
        schema=cv.make_entity_service_schema({}, extra=vol.ALLOW_EXTRA),
    )

    # Cancel fades for media players removed from the entity registry
    async def handle_entity_registry_updated(
        event: Event[er.EventEntityRegistryUpdatedData],
    ) -> None:
        """Handle entity registry updates."""
        entity_id = event.data["entity_id"]
        if event.data["action"] != "remove":
            return
        if not entity_id.startswith(f"{MEDIA_PLAYER_DOMAIN}."):
            return
        await coordinator.cleanup_entity(entity_id)

    entry.async_on_unload(
        hass.bus.async_listen(
            er.EVENT_ENTITY_REGISTRY_UPDATED,
            handle_entity_registry_updated,
        )
    )
    entry.async_on_unload(entry.add_update_listener(async_update_options))

    await _apply_stored_log_level(hass, entry)

    return True


async def _apply_stored_log_level(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Apply the stored log level setting."""
    log_level = entry.options.get(OPTION_LOG_LEVEL, DEFAULT_LOG_LEVEL)

    # Map our level names to Python logging level names
    level_map = {
        LOG_LEVEL_WARNING: "warning",
        LOG_LEVEL_INFO: "info",
        LOG_LEVEL_DEBUG: "debug",
    }
    python_level = level_map.get(log_level, "warning")

    # Logger service may not be available in tests
    if not hass.services.has_service("logger", "set_level"):
        _LOGGER.debug("Logger service not available, keeping default log level")
        return

    try:
        await hass.services.async_call(
            "logger",
            "set_level",
            {f"custom_components.{DOMAIN}": python_level},
        )
    except HomeAssistantError as err:
        _LOGGER.warning("Failed to apply log level %s: %s", python_level, err)


async def async_update_options(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle options update."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, _entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    coordinator: FadeCoordinator = hass.data[DOMAIN]
    await coordinator.shutdown()

    hass.services.async_remove(DOMAIN, SERVICE_FADE_VOLUME)
    hass.data.pop(DOMAIN, None)

    return True
