from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, kw_only=True)
class ProviderAuthorization:
    """Allow-list entry for a data provider.

    Entries are only ever flipped, never deleted. A provider with no entry is
    treated exactly like one with `authorized=False`. `revision` is the registry
    revision at which the entry last changed.
    """

    provider_id: str
    authorized: bool
    revision: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "providerId": self.provider_id,
            "authorized": bool(self.authorized),
            "revision": int(self.revision),
        }


@dataclass(frozen=True, kw_only=True)
class WeatherRecord:
    """One immutable weather submission for a location.

    Notes:
    - Readings are stored as given. Humidity is expected in 0..100 but is not clamped.
    - `provider` is the identity that submitted the record.
    - `sequence` is the registry-wide write order and breaks ties at equal timestamps.
    """

    location: str
    timestamp: int
    temperature: int
    rainfall: int
    humidity: int
    wind_speed: int
    provider: str
    sequence: int

    @property
    def key(self) -> tuple[str, int]:
        return self.location, self.timestamp

    def readings(self) -> dict[str, int]:
        return {
            "temperature": int(self.temperature),
            "rainfall": int(self.rainfall),
            "humidity": int(self.humidity),
            "windSpeed": int(self.wind_speed),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": self.location,
            "timestamp": int(self.timestamp),
            **self.readings(),
            "provider": self.provider,
            "sequence": int(self.sequence),
        }
