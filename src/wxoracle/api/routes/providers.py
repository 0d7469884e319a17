from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Header, HTTPException

from ...contract import CallResult
from ...core.errors import NotAuthorized
from ...core.registry import InMemoryRegistry
from ..parsing import parse_identity


def require_caller(x_caller: str | None) -> str:
    if x_caller is None or not x_caller.strip():
        raise HTTPException(status_code=401, detail="Missing X-Caller header")
    return x_caller.strip()


def mount_providers_api(app: FastAPI, registry: InMemoryRegistry) -> None:
    """Mount the provider allow-list endpoints."""

    @app.get("/api/providers")
    def list_providers() -> list[dict[str, Any]]:
        return [p.to_dict() for p in registry.providers()]

    @app.get("/api/providers/{provider_id:path}")
    def get_provider(provider_id: str) -> dict[str, Any]:
        return {"providerId": provider_id, "authorized": registry.is_authorized(provider_id)}

    @app.post("/api/providers/{provider_id:path}/authorize")
    def authorize_provider(provider_id: str, x_caller: str | None = Header(default=None)) -> dict[str, Any]:
        caller = require_caller(x_caller)
        try:
            registry.authorize_provider(parse_identity(provider_id, field="providerId"), caller=caller)
        except NotAuthorized as ex:
            raise HTTPException(status_code=403, detail=ex.code)
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        return CallResult.ok().to_dict()

    @app.post("/api/providers/{provider_id:path}/revoke")
    def revoke_provider(provider_id: str, x_caller: str | None = Header(default=None)) -> dict[str, Any]:
        caller = require_caller(x_caller)
        try:
            registry.revoke_provider(parse_identity(provider_id, field="providerId"), caller=caller)
        except NotAuthorized as ex:
            raise HTTPException(status_code=403, detail=ex.code)
        except ValueError as ex:
            raise HTTPException(status_code=400, detail=str(ex))
        return CallResult.ok().to_dict()
