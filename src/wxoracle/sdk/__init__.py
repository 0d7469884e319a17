from __future__ import annotations

from .client import OracleClient

__all__ = ["OracleClient"]
