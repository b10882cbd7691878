"""Exceptions for the Fade Volume integration."""

from __future__ import annotations

from homeassistant.exceptions import HomeAssistantError, ServiceValidationError


class InvalidInput(ServiceValidationError):
    """Raised when fade parameters are out of range or unknown."""


class DeviceUnavailable(HomeAssistantError):
    """Raised when a media player cannot be read or written."""
