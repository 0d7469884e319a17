from __future__ import annotations

import contextlib
import logging
import os
import socket
import threading
import time
from dataclasses import dataclass

import httpx
import uvicorn

from ..api import create_api_app
from ..core.clock import SequenceSource
from ..core.config import RegistryConfig
from ..core.registry import InMemoryRegistry
from ..sdk.client import OracleClient


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OracleServer:
    host: str
    port: int
    url: str
    registry: InMemoryRegistry

    def client(self, caller: str | None = None) -> OracleClient:
        return OracleClient(self.url.rstrip("/"), caller=caller)


def _find_free_port(host: str) -> int:
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return int(s.getsockname()[1])


def _normalize_base_url(url: str) -> str:
    url = url.strip()
    if not url:
        return ""
    # Allow passing just host:port.
    if "://" not in url:
        url = "http://" + url
    return url.rstrip("/")


def _is_server_alive(base_url: str, *, timeout_s: float = 0.2) -> bool:
    try:
        with httpx.Client(base_url=base_url, timeout=timeout_s) as client:
            r = client.get("/healthz")
            if r.status_code != 200:
                return False
            return bool(r.json().get("ok"))
    except (httpx.HTTPError, ValueError):
        return False


def run(
    *,
    host: str = "127.0.0.1",
    port: int = 0,
    config: RegistryConfig | None = None,
    clock: SequenceSource | None = None,
    log_level: str = "info",
    access_log: bool = False,
    new_server: bool = False,
    connect_timeout_s: float = 0.2,
) -> OracleServer | OracleClient:
    """Start a registry server in a background thread, or attach to a running one.

    Behavior:
    - If WXORACLE_URL is set and reachable, return an `OracleClient` for it unless
      `new_server=True`.
    - Otherwise, if `port != 0` and a server already answers at http://{host}:{port},
      attach to it the same way.
    - Otherwise start uvicorn on a daemon thread and return an `OracleServer`.

    `config` defaults to `RegistryConfig.from_env()`.
    """

    env_url = _normalize_base_url(os.getenv("WXORACLE_URL", ""))

    if env_url and not new_server:
        if _is_server_alive(env_url, timeout_s=connect_timeout_s):
            logger.info("Attaching to existing server at %s", env_url)
            return OracleClient(env_url)

    if port != 0 and not new_server:
        default_url = _normalize_base_url(f"http://{host}:{port}")
        if _is_server_alive(default_url, timeout_s=connect_timeout_s):
            logger.info("Attaching to existing server at %s", default_url)
            return OracleClient(default_url)

    if port == 0:
        port = _find_free_port(host)

    registry = InMemoryRegistry(config if config is not None else RegistryConfig.from_env(), clock=clock)
    app = create_api_app(registry)

    server_config = uvicorn.Config(app, host=host, port=port, log_level=log_level, access_log=access_log)
    server = uvicorn.Server(server_config)

    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    url = f"http://{host}:{port}/"
    # Wait briefly for startup so an immediate client call does not race it.
    deadline = time.monotonic() + 5.0
    while not server.started and time.monotonic() < deadline:
        time.sleep(0.01)

    logger.info("Registry server listening on %s (owner %r)", url, registry.owner)
    return OracleServer(host=host, port=port, url=url, registry=registry)
