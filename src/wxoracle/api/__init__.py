from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Header, HTTPException

from ..contract import MUTATING_METHODS, WeatherOracleContract
from ..core.config import RegistryConfig
from ..core.registry import InMemoryRegistry
from .routes import mount_providers_api, mount_weather_api
from .routes.providers import require_caller


def create_api_app(registry: InMemoryRegistry | None = None) -> FastAPI:
    """Build the HTTP app around `registry`.

    Without an explicit registry, one is built from `RegistryConfig.from_env()`.
    """

    if registry is None:
        registry = InMemoryRegistry(RegistryConfig.from_env())

    app = FastAPI(title="wxoracle", version="0.1.0")
    app.state.registry = registry
    contract = WeatherOracleContract(registry)

    mount_providers_api(app, registry)
    mount_weather_api(app, registry)

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/api/events")
    def events() -> dict[str, int]:
        # Minimal polling endpoint.
        return {"globalRevision": registry.global_revision()}

    @app.post("/api/call/{method}")
    def call_method(method: str, body: dict, x_caller: str | None = Header(default=None)) -> dict[str, Any]:
        args = body.get("args", [])
        if not isinstance(args, list):
            raise HTTPException(status_code=400, detail="args must be a list")
        # Reads are public; only mutating methods need a sender.
        sender: str | None = None
        if method in MUTATING_METHODS:
            sender = require_caller(x_caller)
        elif x_caller is not None and x_caller.strip():
            sender = x_caller.strip()
        return contract.call(method, args, sender).to_dict()

    return app
