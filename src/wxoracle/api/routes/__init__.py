from __future__ import annotations

from .providers import mount_providers_api
from .weather import mount_weather_api

__all__ = ["mount_providers_api", "mount_weather_api"]
