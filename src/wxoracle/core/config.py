from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any


class CollisionPolicy(str, Enum):
    """What happens when a submission lands on an existing (location, timestamp) key.

    Notes:
    - LAST_WRITE_WINS keeps every submission in the log; the newest one (by write
      sequence) is the record served for that key.
    - REJECT refuses the second submission with `TimestampCollision`.
    """

    LAST_WRITE_WINS = "last-write-wins"
    REJECT = "reject"

    @classmethod
    def from_any(cls, value: Any) -> "CollisionPolicy":
        if isinstance(value, cls):
            return value

        v = str(value).strip().lower().replace("_", "-")
        aliases: dict[str, CollisionPolicy] = {
            "last-write-wins": cls.LAST_WRITE_WINS,
            "lww": cls.LAST_WRITE_WINS,
            "overwrite": cls.LAST_WRITE_WINS,
            "reject": cls.REJECT,
            "error": cls.REJECT,
        }
        if v in aliases:
            return aliases[v]

        raise ValueError("Unsupported collision policy. Use 'last-write-wins' or 'reject'.")


@dataclass(frozen=True)
class RegistryConfig:
    """Deployment-time settings for a registry instance.

    `owner` is the only identity allowed to grant or revoke provider
    authorization. It is fixed once the registry is built.
    """

    owner: str
    collision_policy: CollisionPolicy = CollisionPolicy.LAST_WRITE_WINS

    def __post_init__(self) -> None:
        owner = str(self.owner).strip()
        if not owner:
            raise ValueError("owner cannot be empty")
        object.__setattr__(self, "owner", owner)
        object.__setattr__(self, "collision_policy", CollisionPolicy.from_any(self.collision_policy))

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "RegistryConfig":
        env = os.environ if environ is None else environ
        owner = env.get("WXORACLE_OWNER", "")
        if not owner.strip():
            raise ValueError("WXORACLE_OWNER must be set to the registry owner identity")
        policy = env.get("WXORACLE_COLLISION_POLICY", CollisionPolicy.LAST_WRITE_WINS.value)
        return cls(owner=owner, collision_policy=CollisionPolicy.from_any(policy))
