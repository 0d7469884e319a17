from __future__ import annotations

from .contract import CallResult, WeatherOracleContract
from .core.clock import MonotonicSequence, SequenceSource, WallClock
from .core.config import CollisionPolicy, RegistryConfig
from .core.errors import NotAuthorized, RegistryError, TimestampCollision
from .core.records import ProviderAuthorization, WeatherRecord
from .core.registry import InMemoryRegistry
from .runtime.server import OracleServer, run
from .sdk.client import OracleClient

__all__ = [
    "run",
    "OracleServer",
    "OracleClient",
    "InMemoryRegistry",
    "RegistryConfig",
    "CollisionPolicy",
    "SequenceSource",
    "MonotonicSequence",
    "WallClock",
    "WeatherOracleContract",
    "CallResult",
    "WeatherRecord",
    "ProviderAuthorization",
    "RegistryError",
    "NotAuthorized",
    "TimestampCollision",
]
