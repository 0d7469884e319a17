from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Header, HTTPException, Query

from ...contract import CallResult
from ...core.errors import NotAuthorized, TimestampCollision
from ...core.registry import InMemoryRegistry
from ..parsing import parse_history_query, parse_int, parse_readings
from .providers import require_caller


def mount_weather_api(app: FastAPI, registry: InMemoryRegistry) -> None:
    """Mount weather submission and query endpoints.

    Missing records are not errors: lookups answer 200 with `value: null`.
    """

    @app.get("/api/weather")
    def list_locations() -> list[dict[str, Any]]:
        out: list[dict[str, Any]] = []
        for loc in registry.locations():
            bounds = registry.bounds(loc)
            out.append(
                {
                    "location": loc,
                    "first": bounds[0] if bounds else None,
                    "latest": bounds[1] if bounds else None,
                }
            )
        return out

    @app.post("/api/weather/{location:path}")
    def submit_weather_data(
        location: str,
        body: dict,
        x_caller: str | None = Header(default=None),
    ) -> dict[str, Any]:
        caller = require_caller(x_caller)
        try:
            temperature, rainfall, humidity, wind_speed = parse_readings(body)
            record = registry.submit(location, temperature, rainfall, humidity, wind_speed, caller=caller)
        except NotAuthorized as ex:
            raise HTTPException(status_code=403, detail=ex.code)
        except TimestampCollision as ex:
            raise HTTPException(status_code=409, detail=ex.code)
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        return CallResult.ok({"timestamp": record.timestamp, "sequence": record.sequence}).to_dict()

    @app.get("/api/weather/{location:path}/latest")
    def get_latest_weather_data(location: str) -> dict[str, Any]:
        record = registry.get_latest(location)
        return CallResult.ok(record.to_dict() if record is not None else None).to_dict()

    @app.get("/api/weather/{location:path}/at/{timestamp}")
    def get_weather_data(location: str, timestamp: str) -> dict[str, Any]:
        try:
            ts = parse_int(timestamp, field="timestamp")
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        record = registry.get(location, ts)
        return CallResult.ok(record.to_dict() if record is not None else None).to_dict()

    @app.get("/api/weather/{location:path}")
    def get_weather_history(
        location: str,
        as_of: str | None = Query(default=None, alias="asOf"),
        start: str | None = None,
        end: str | None = None,
    ) -> dict[str, Any]:
        try:
            as_of_v, start_v, end_v = parse_history_query(as_of, start, end)
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))

        if as_of_v is not None:
            record = registry.get_as_of(location, as_of_v)
            return CallResult.ok(record.to_dict() if record is not None else None).to_dict()

        records = registry.history(location, start=start_v, end=end_v)
        return CallResult.ok([r.to_dict() for r in records]).to_dict()
