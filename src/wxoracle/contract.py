from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from .core.errors import NotAuthorized, RegistryError
from .core.records import WeatherRecord
from .core.registry import InMemoryRegistry


logger = logging.getLogger(__name__)

ERR_INVALID_ARGUMENT = "ERR_INVALID_ARGUMENT"
ERR_UNKNOWN_METHOD = "ERR_UNKNOWN_METHOD"

MUTATING_METHODS = frozenset(
    {
        "authorize-provider",
        "revoke-provider-authorization",
        "submit-weather-data",
    }
)


@dataclass(frozen=True)
class CallResult:
    """Tagged outcome of one contract call.

    Queries that find nothing are still successful: `value` is None.
    """

    success: bool
    value: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, value: Any = None) -> "CallResult":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str) -> "CallResult":
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "value": self.value, "error": self.error}


def _record_value(record: WeatherRecord | None) -> dict[str, int] | None:
    return record.readings() if record is not None else None


class WeatherOracleContract:
    """Contract call surface over an `InMemoryRegistry`.

    One method per operation. Mutations take the transaction sender as
    `sender`; reads ignore it. Failures come back as `CallResult.fail(code)`
    instead of raising.
    """

    def __init__(self, registry: InMemoryRegistry) -> None:
        self.registry = registry
        self._methods: dict[str, Callable[..., CallResult]] = {
            "authorize-provider": self.authorize_provider,
            "revoke-provider-authorization": self.revoke_provider_authorization,
            "submit-weather-data": self.submit_weather_data,
            "get-weather-data": self.get_weather_data,
            "is-authorized-provider": self.is_authorized_provider,
            "get-latest-weather-data": self.get_latest_weather_data,
        }

    @property
    def methods(self) -> list[str]:
        return list(self._methods)

    @staticmethod
    def _guard(fn: Callable[[], Any]) -> CallResult:
        try:
            return CallResult.ok(fn())
        except RegistryError as ex:
            return CallResult.fail(ex.code)
        except (TypeError, ValueError) as ex:
            logger.debug("Invalid contract call arguments: %s", ex)
            return CallResult.fail(ERR_INVALID_ARGUMENT)

    def authorize_provider(self, provider_id: str, *, sender: str) -> CallResult:
        def _authorize() -> None:
            self.registry.authorize_provider(provider_id, caller=sender)

        return self._guard(_authorize)

    def revoke_provider_authorization(self, provider_id: str, *, sender: str) -> CallResult:
        def _revoke() -> None:
            self.registry.revoke_provider(provider_id, caller=sender)

        return self._guard(_revoke)

    def submit_weather_data(
        self,
        location: str,
        temperature: int,
        rainfall: int,
        humidity: int,
        wind_speed: int,
        *,
        sender: str,
        timestamp: int | None = None,
    ) -> CallResult:
        def _submit() -> int:
            record = self.registry.submit(
                location,
                temperature,
                rainfall,
                humidity,
                wind_speed,
                caller=sender,
                timestamp=timestamp,
            )
            return record.timestamp

        return self._guard(_submit)

    def get_weather_data(self, location: str, timestamp: int, *, sender: str | None = None) -> CallResult:  # noqa: ARG002
        return self._guard(lambda: _record_value(self.registry.get(location, timestamp)))

    def is_authorized_provider(self, provider_id: str, *, sender: str | None = None) -> CallResult:  # noqa: ARG002
        return self._guard(lambda: self.registry.is_authorized(provider_id))

    def get_latest_weather_data(self, location: str, *, sender: str | None = None) -> CallResult:  # noqa: ARG002
        return self._guard(lambda: _record_value(self.registry.get_latest(location)))

    def call(self, method: str, args: list[Any] | tuple[Any, ...], sender: str | None) -> CallResult:
        """Dispatch a kebab-case method name with positional arguments.

        Mutating methods need a sender; without one they fail with ERR_NOT_AUTHORIZED.
        """
        name = str(method).strip()
        fn = self._methods.get(name)
        if fn is None:
            return CallResult.fail(ERR_UNKNOWN_METHOD)
        if sender is None and name in MUTATING_METHODS:
            return CallResult.fail(NotAuthorized.code)
        try:
            return fn(*args, sender=sender)
        except TypeError as ex:
            logger.debug("Bad arity for %s: %s", method, ex)
            return CallResult.fail(ERR_INVALID_ARGUMENT)
