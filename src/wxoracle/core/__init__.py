from __future__ import annotations

from .clock import MonotonicSequence, SequenceSource, WallClock
from .config import CollisionPolicy, RegistryConfig
from .errors import NotAuthorized, RegistryError, TimestampCollision
from .records import ProviderAuthorization, WeatherRecord
from .registry import InMemoryRegistry
from .timeline import LocationSeries

__all__ = [
    "SequenceSource",
    "MonotonicSequence",
    "WallClock",
    "CollisionPolicy",
    "RegistryConfig",
    "RegistryError",
    "NotAuthorized",
    "TimestampCollision",
    "ProviderAuthorization",
    "WeatherRecord",
    "InMemoryRegistry",
    "LocationSeries",
]
