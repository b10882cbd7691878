"""Diagnostics support for the Fade Volume integration."""

from __future__ import annotations

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import DOMAIN
from .coordinator import FadeCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant,
    entry: ConfigEntry,
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: FadeCoordinator | None = hass.data.get(DOMAIN)

    result: dict[str, Any] = {
        "config_entry": entry.as_dict(),
        "active_fades": [],
    }

    if coordinator is None:
        return result

    active_fades = []
    for entity_id, entity in coordinator._entities.items():
        if not entity.is_fading:
            continue
        fade_info: dict[str, Any] = {
            "entity_id": entity_id,
            "current_step": entity.current_step,
        }
        if entity.fade is not None:
            fade_info.update(
                {
                    "total_steps": entity.fade.total_steps,
                    "start_volume": entity.fade.start_volume,
                    "target_volume": entity.fade.target_volume,
                    "curve": str(entity.fade.curve),
                }
            )
        active_fades.append(fade_info)
    result["active_fades"] = active_fades

    return result
