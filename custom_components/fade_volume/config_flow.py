"""Config flow for Fade Volume integration."""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.config_entries import ConfigEntry, ConfigFlow, ConfigFlowResult, OptionsFlow
from homeassistant.core import callback

from .const import (
    DEFAULT_CURVE,
    DEFAULT_DURATION,
    DEFAULT_LOG_LEVEL,
    DEFAULT_VOLUME,
    DOMAIN,
    LOG_LEVEL_DEBUG,
    LOG_LEVEL_INFO,
    LOG_LEVEL_WARNING,
    MAX_DURATION,
    MAX_VOLUME,
    MIN_DURATION,
    MIN_VOLUME,
    OPTION_DEFAULT_CURVE,
    OPTION_DEFAULT_DURATION,
    OPTION_DEFAULT_VOLUME,
    OPTION_LOG_LEVEL,
)
from .easing import CURVE_NAMES

TITLE = "Fade Volume"


class FadeVolumeConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Fade Volume."""

    VERSION = 1
    MINOR_VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        # Only allow a single instance
        if self._async_current_entries():
            return self.async_abort(reason="single_instance_allowed")

        # Create entry immediately without showing a form
        return self.async_create_entry(title=TITLE, data={})

    async def async_step_import(
        self, import_config: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle import from configuration.yaml or auto-setup."""
        if self._async_current_entries():
            return self.async_abort(reason="single_instance_allowed")

        return self.async_create_entry(title=TITLE, data={})

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: ConfigEntry) -> FadeVolumeOptionsFlow:
        """Get the options flow for this handler."""
        return FadeVolumeOptionsFlow()


class FadeVolumeOptionsFlow(OptionsFlow):
    """Handle options flow for Fade Volume."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Manage the options."""
        if user_input is not None:
            return self.async_create_entry(title="", data=user_input)

        options = self.config_entry.options

        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    vol.Optional(
                        OPTION_DEFAULT_VOLUME,
                        default=options.get(OPTION_DEFAULT_VOLUME, DEFAULT_VOLUME),
                    ): vol.All(vol.Coerce(float), vol.Range(min=MIN_VOLUME, max=MAX_VOLUME)),
                    vol.Optional(
                        OPTION_DEFAULT_DURATION,
                        default=options.get(OPTION_DEFAULT_DURATION, DEFAULT_DURATION),
                    ): vol.All(vol.Coerce(float), vol.Range(min=MIN_DURATION, max=MAX_DURATION)),
                    vol.Optional(
                        OPTION_DEFAULT_CURVE,
                        default=options.get(OPTION_DEFAULT_CURVE, DEFAULT_CURVE),
                    ): vol.In(CURVE_NAMES),
                    vol.Optional(
                        OPTION_LOG_LEVEL,
                        default=options.get(OPTION_LOG_LEVEL, DEFAULT_LOG_LEVEL),
                    ): vol.In([LOG_LEVEL_WARNING, LOG_LEVEL_INFO, LOG_LEVEL_DEBUG]),
                }
            ),
        )
