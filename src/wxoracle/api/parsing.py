from __future__ import annotations

from typing import Any


def parse_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid {field}")
    if value is None:
        raise ValueError(f"Missing {field}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Invalid {field}")
        return int(value)
    try:
        return int(str(value).strip())
    except Exception as ex:
        raise ValueError(f"Invalid {field}") from ex


def parse_optional_int(value: Any, *, field: str) -> int | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_int(value, field=field)


def parse_identity(value: Any, *, field: str) -> str:
    if value is None:
        raise ValueError(f"Missing {field}")
    v = str(value).strip()
    if not v:
        raise ValueError(f"Invalid {field}")
    return v


def parse_readings(body: dict[str, Any]) -> tuple[int, int, int, int]:
    """Return (temperature, rainfall, humidity, wind_speed) from a submission body.

    Accepts `windSpeed`, `wind_speed` or `wind-speed` for the wind field.
    """
    wind = body.get("windSpeed")
    if wind is None:
        wind = body.get("wind_speed", body.get("wind-speed"))
    return (
        parse_int(body.get("temperature"), field="temperature"),
        parse_int(body.get("rainfall"), field="rainfall"),
        parse_int(body.get("humidity"), field="humidity"),
        parse_int(wind, field="windSpeed"),
    )


def parse_history_query(
    as_of: Any,
    start: Any,
    end: Any,
) -> tuple[int | None, int | None, int | None]:
    as_of_v = parse_optional_int(as_of, field="asOf")
    start_v = parse_optional_int(start, field="start")
    end_v = parse_optional_int(end, field="end")

    if as_of_v is not None and (start_v is not None or end_v is not None):
        raise ValueError("Provide either asOf or start/end, not both")
    if start_v is not None and end_v is not None and end_v < start_v:
        raise ValueError("end must be >= start")

    return as_of_v, start_v, end_v
