from __future__ import annotations

import logging
import math
import threading

from ..clock import MonotonicSequence, SequenceSource
from ..config import CollisionPolicy, RegistryConfig
from ..errors import NotAuthorized, TimestampCollision
from ..records import ProviderAuthorization, WeatherRecord
from ..timeline import LocationSeries


logger = logging.getLogger(__name__)


class InMemoryRegistry:
    """Authorization-gated, append-only weather registry.

    Owns the provider allow-list and the weather records. Every public method
    runs under one re-entrant lock, so operations are applied in a single total
    order and an authorization check always sees the same state as the write
    that follows it.
    """

    def __init__(self, config: RegistryConfig, clock: SequenceSource | None = None) -> None:
        self._lock = threading.RLock()
        self._config = config
        self._clock: SequenceSource = clock if clock is not None else MonotonicSequence()
        self._providers: dict[str, ProviderAuthorization] = {}
        self._log: list[WeatherRecord] = []
        self._series: dict[str, LocationSeries[WeatherRecord]] = {}
        self._global_revision = 0

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def owner(self) -> str:
        return self._config.owner

    @staticmethod
    def _normalize_id(value: str, *, name: str) -> str:
        v = str(value).strip()
        if not v:
            raise ValueError(f"{name} cannot be empty")
        return v

    @staticmethod
    def _coerce_int(value: object, *, name: str) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer")
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"{name} must be an integer")
            return int(value)
        try:
            return int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError) as ex:
            raise ValueError(f"{name} must be an integer") from ex

    @classmethod
    def _lookup_key(cls, timestamp: object) -> int | None:
        """Integer key for an exact lookup, or None when no record could live there."""
        if isinstance(timestamp, float) and not timestamp.is_integer():
            return None
        return cls._coerce_int(timestamp, name="timestamp")

    @classmethod
    def _floor_key(cls, timestamp: object) -> int:
        if isinstance(timestamp, float):
            if not math.isfinite(timestamp):
                raise ValueError("timestamp must be finite")
            return math.floor(timestamp)
        return cls._coerce_int(timestamp, name="timestamp")

    def _bump_revision_locked(self) -> int:
        self._global_revision += 1
        return self._global_revision

    def _require_owner_locked(self, caller: str, action: str) -> None:
        caller = str(caller).strip()
        if caller != self._config.owner:
            logger.warning("Rejected %s by non-owner %r", action, caller)
            raise NotAuthorized(caller, action)

    def _set_authorization_locked(self, provider_id: str, authorized: bool) -> ProviderAuthorization:
        entry = ProviderAuthorization(
            provider_id=provider_id,
            authorized=authorized,
            revision=self._bump_revision_locked(),
        )
        self._providers[provider_id] = entry
        return entry

    # Authorization

    def authorize_provider(self, provider_id: str, *, caller: str) -> ProviderAuthorization:
        pid = self._normalize_id(provider_id, name="provider_id")
        with self._lock:
            self._require_owner_locked(caller, "authorize providers")
            entry = self._set_authorization_locked(pid, True)
        logger.info("Authorized provider %r", pid)
        return entry

    def revoke_provider(self, provider_id: str, *, caller: str) -> ProviderAuthorization:
        pid = self._normalize_id(provider_id, name="provider_id")
        with self._lock:
            self._require_owner_locked(caller, "revoke provider authorization")
            entry = self._set_authorization_locked(pid, False)
        logger.info("Revoked provider %r", pid)
        return entry

    def is_authorized(self, provider_id: str) -> bool:
        with self._lock:
            entry = self._providers.get(str(provider_id).strip())
            return bool(entry is not None and entry.authorized)

    def providers(self) -> list[ProviderAuthorization]:
        with self._lock:
            return [self._providers[k] for k in sorted(self._providers)]

    # Submission

    def submit(
        self,
        location: str,
        temperature: int,
        rainfall: int,
        humidity: int,
        wind_speed: int,
        *,
        caller: str,
        timestamp: int | None = None,
    ) -> WeatherRecord:
        loc = self._normalize_id(location, name="location")
        temperature_v = self._coerce_int(temperature, name="temperature")
        rainfall_v = self._coerce_int(rainfall, name="rainfall")
        humidity_v = self._coerce_int(humidity, name="humidity")
        wind_speed_v = self._coerce_int(wind_speed, name="wind_speed")
        ts_v = self._coerce_int(timestamp, name="timestamp") if timestamp is not None else None

        caller_v = str(caller).strip()

        with self._lock:
            if not self.is_authorized(caller_v):
                logger.warning("Rejected submission for %r from unauthorized caller %r", loc, caller_v)
                raise NotAuthorized(caller_v, "submit weather data")

            if ts_v is None:
                ts_v = int(self._clock.next_timestamp())

            series = self._series.get(loc)
            if (
                series is not None
                and self._config.collision_policy is CollisionPolicy.REJECT
                and series.contains(ts_v)
            ):
                logger.warning("Rejected colliding submission for %r at %d", loc, ts_v)
                raise TimestampCollision(loc, ts_v)

            record = WeatherRecord(
                location=loc,
                timestamp=ts_v,
                temperature=temperature_v,
                rainfall=rainfall_v,
                humidity=humidity_v,
                wind_speed=wind_speed_v,
                provider=caller_v,
                sequence=self._bump_revision_locked(),
            )
            self._log.append(record)
            if series is None:
                series = LocationSeries[WeatherRecord]()
                self._series[loc] = series
            replaced = series.set_sample(ts_v, record)

        if replaced:
            logger.info("Submission for %r at %d supersedes an earlier record", loc, ts_v)
        logger.info("Accepted weather data for %r at %d from %r", loc, ts_v, record.provider)
        return record

    # Queries

    def get(self, location: str, timestamp: int) -> WeatherRecord | None:
        key = self._lookup_key(timestamp)
        if key is None:
            return None
        with self._lock:
            series = self._series.get(str(location).strip())
            if series is None:
                return None
            return series.exact(key)

    def get_latest(self, location: str) -> WeatherRecord | None:
        with self._lock:
            series = self._series.get(str(location).strip())
            if series is None:
                return None
            return series.latest()

    def get_as_of(self, location: str, timestamp: int) -> WeatherRecord | None:
        key = self._floor_key(timestamp)
        with self._lock:
            series = self._series.get(str(location).strip())
            if series is None:
                return None
            return series.as_of(key)

    def history(self, location: str, *, start: int | None = None, end: int | None = None) -> list[WeatherRecord]:
        start_v = self._coerce_int(start, name="start") if start is not None else None
        end_v = self._coerce_int(end, name="end") if end is not None else None
        if start_v is not None and end_v is not None and end_v < start_v:
            raise ValueError("end must be >= start")
        with self._lock:
            series = self._series.get(str(location).strip())
            if series is None:
                return []
            return series.window(start=start_v, end=end_v)

    def submissions(self) -> list[WeatherRecord]:
        """Every accepted submission in write order, superseded ones included."""
        with self._lock:
            return list(self._log)

    def locations(self) -> list[str]:
        with self._lock:
            return sorted(self._series)

    def bounds(self, location: str) -> tuple[int, int] | None:
        with self._lock:
            series = self._series.get(str(location).strip())
            if series is None:
                return None
            return series.bounds()

    def global_revision(self) -> int:
        with self._lock:
            return self._global_revision

    def reset(self) -> None:
        with self._lock:
            self._providers.clear()
            self._log.clear()
            self._series.clear()
            self._bump_revision_locked()
