from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from ..core.errors import NotAuthorized


def _segment(value: str) -> str:
    # Locations and provider ids are opaque; escape everything, including "/".
    return quote(str(value), safe="")


class OracleClient:
    """HTTP client for a running wxoracle server.

    `caller` is sent as the `X-Caller` header on every request and stands in for
    the transaction sender.
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8000", *, caller: str | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.caller = caller

    def as_caller(self, caller: str) -> "OracleClient":
        return OracleClient(self.base_url, caller=caller)

    def _headers(self) -> dict[str, str]:
        if self.caller is None:
            return {}
        return {"X-Caller": self.caller}

    def _request(self, method: str, path: str, *, timeout_s: float, **kwargs: Any) -> Any:
        with httpx.Client(base_url=self.base_url, timeout=timeout_s, headers=self._headers()) as client:
            res = client.request(method, path, **kwargs)
        if res.status_code == 403:
            raise NotAuthorized(str(self.caller), f"{method} {path}")
        if res.status_code >= 400:
            raise RuntimeError(f"{method} {path} failed: {res.status_code} {res.text}")
        return res.json()

    @staticmethod
    def _value(data: dict[str, Any]) -> Any:
        if not data.get("success"):
            raise RuntimeError(f"Call failed: {data.get('error')}")
        return data.get("value")

    def health(self, *, timeout_s: float = 10.0) -> bool:
        return bool(self._request("GET", "/healthz", timeout_s=timeout_s).get("ok"))

    def global_revision(self, *, timeout_s: float = 10.0) -> int:
        return int(self._request("GET", "/api/events", timeout_s=timeout_s)["globalRevision"])

    def authorize_provider(self, provider_id: str, *, timeout_s: float = 10.0) -> None:
        self._request("POST", f"/api/providers/{_segment(provider_id)}/authorize", timeout_s=timeout_s)

    def revoke_provider(self, provider_id: str, *, timeout_s: float = 10.0) -> None:
        self._request("POST", f"/api/providers/{_segment(provider_id)}/revoke", timeout_s=timeout_s)

    def is_authorized(self, provider_id: str, *, timeout_s: float = 10.0) -> bool:
        data = self._request("GET", f"/api/providers/{_segment(provider_id)}", timeout_s=timeout_s)
        return bool(data.get("authorized"))

    def providers(self, *, timeout_s: float = 10.0) -> list[dict[str, Any]]:
        return list(self._request("GET", "/api/providers", timeout_s=timeout_s))

    def submit(
        self,
        location: str,
        temperature: int,
        rainfall: int,
        humidity: int,
        wind_speed: int,
        *,
        timeout_s: float = 10.0,
    ) -> int:
        """Submit a reading and return the timestamp the server assigned."""
        body = {
            "temperature": int(temperature),
            "rainfall": int(rainfall),
            "humidity": int(humidity),
            "windSpeed": int(wind_speed),
        }
        data = self._request("POST", f"/api/weather/{_segment(location)}", timeout_s=timeout_s, json=body)
        return int(self._value(data)["timestamp"])

    def get(self, location: str, timestamp: int, *, timeout_s: float = 10.0) -> dict[str, Any] | None:
        data = self._request("GET", f"/api/weather/{_segment(location)}/at/{int(timestamp)}", timeout_s=timeout_s)
        return self._value(data)

    def get_latest(self, location: str, *, timeout_s: float = 10.0) -> dict[str, Any] | None:
        data = self._request("GET", f"/api/weather/{_segment(location)}/latest", timeout_s=timeout_s)
        return self._value(data)

    def get_as_of(self, location: str, timestamp: int, *, timeout_s: float = 10.0) -> dict[str, Any] | None:
        data = self._request(
            "GET", f"/api/weather/{_segment(location)}", timeout_s=timeout_s, params={"asOf": str(int(timestamp))}
        )
        return self._value(data)

    def history(
        self,
        location: str,
        *,
        start: int | None = None,
        end: int | None = None,
        timeout_s: float = 10.0,
    ) -> list[dict[str, Any]]:
        params: dict[str, str] = {}
        if start is not None:
            params["start"] = str(int(start))
        if end is not None:
            params["end"] = str(int(end))
        data = self._request("GET", f"/api/weather/{_segment(location)}", timeout_s=timeout_s, params=params)
        return list(self._value(data))

    def locations(self, *, timeout_s: float = 10.0) -> list[str]:
        return [str(item["location"]) for item in self._request("GET", "/api/weather", timeout_s=timeout_s)]

    def call(self, method: str, args: list[Any], *, timeout_s: float = 10.0) -> dict[str, Any]:
        """Invoke a contract method by its kebab-case name; returns the raw result dict."""
        return dict(self._request("POST", f"/api/call/{_segment(method)}", timeout_s=timeout_s, json={"args": list(args)}))
