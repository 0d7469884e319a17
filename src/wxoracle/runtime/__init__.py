from __future__ import annotations

from .server import OracleServer, run

__all__ = ["OracleServer", "run"]
