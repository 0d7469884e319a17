from __future__ import annotations

import pytest

from wxoracle.core import InMemoryRegistry, MonotonicSequence, RegistryConfig

OWNER = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"


@pytest.fixture
def registry() -> InMemoryRegistry:
    # Timestamps 1000, 2000, 3000, ... for successive submissions.
    return InMemoryRegistry(RegistryConfig(owner=OWNER), clock=MonotonicSequence(start=1000, step=1000))
