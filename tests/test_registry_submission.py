from __future__ import annotations

import threading

import pytest

from wxoracle.core import (
    CollisionPolicy,
    InMemoryRegistry,
    MonotonicSequence,
    NotAuthorized,
    RegistryConfig,
    TimestampCollision,
)

OWNER = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"


def test_unauthorized_submit_writes_nothing(registry: InMemoryRegistry) -> None:
    assert registry.get_latest("New York") is None

    with pytest.raises(NotAuthorized):
        registry.submit("New York", 25, 10, 60, 15, caller="provider1")

    assert registry.get_latest("New York") is None
    assert registry.submissions() == []
    assert registry.locations() == []


def test_revoked_provider_cannot_submit(registry: InMemoryRegistry) -> None:
    registry.authorize_provider("provider1", caller=OWNER)
    registry.submit("New York", 25, 10, 60, 15, caller="provider1")
    registry.revoke_provider("provider1", caller=OWNER)

    with pytest.raises(NotAuthorized):
        registry.submit("New York", 99, 99, 99, 99, caller="provider1")

    latest = registry.get_latest("New York")
    assert latest is not None
    assert latest.temperature == 25
    assert len(registry.submissions()) == 1


def test_submit_then_get_returns_submitted_fields(registry: InMemoryRegistry) -> None:
    registry.authorize_provider("provider1", caller=OWNER)

    record = registry.submit("Lima", -3, 0, 104, 7, caller="provider1", timestamp=42)

    got = registry.get("Lima", 42)
    assert got == record
    assert got.provider == "provider1"
    # Readings are stored as given, humidity is not clamped.
    assert got.readings() == {"temperature": -3, "rainfall": 0, "humidity": 104, "windSpeed": 7}


def test_get_missing_key_returns_none(registry: InMemoryRegistry) -> None:
    registry.authorize_provider("provider1", caller=OWNER)
    registry.submit("Lima", 1, 1, 1, 1, caller="provider1", timestamp=10)

    assert registry.get("Lima", 11) is None
    assert registry.get("Quito", 10) is None


def test_latest_follows_greatest_timestamp(registry: InMemoryRegistry) -> None:
    registry.authorize_provider("provider1", caller=OWNER)
    registry.submit("Oslo", 1, 0, 50, 3, caller="provider1", timestamp=200)
    registry.submit("Oslo", 2, 0, 50, 3, caller="provider1", timestamp=100)

    latest = registry.get_latest("Oslo")
    assert latest is not None
    assert latest.timestamp == 200
    assert latest.temperature == 1


def test_latest_is_per_location(registry: InMemoryRegistry) -> None:
    registry.authorize_provider("provider1", caller=OWNER)
    registry.submit("New York", 25, 10, 60, 15, caller="provider1", timestamp=5)
    registry.submit("New Yorkshire", 10, 1, 80, 4, caller="provider1", timestamp=9)

    latest = registry.get_latest("New York")
    assert latest is not None
    assert latest.location == "New York"
    assert latest.timestamp == 5


def test_latest_for_unknown_location_is_none(registry: InMemoryRegistry) -> None:
    assert registry.get_latest("Atlantis") is None


def test_end_to_end_scenario(registry: InMemoryRegistry) -> None:
    registry.authorize_provider("provider1", caller=OWNER)

    first = registry.submit("New York", 25, 10, 60, 15, caller="provider1")
    assert first.timestamp == 1000

    got = registry.get("New York", 1000)
    assert got is not None
    assert got.readings() == {"temperature": 25, "rainfall": 10, "humidity": 60, "windSpeed": 15}

    second = registry.submit("New York", 26, 5, 55, 20, caller="provider1")
    assert second.timestamp == 2000

    latest = registry.get_latest("New York")
    assert latest is not None
    assert latest.readings() == {"temperature": 26, "rainfall": 5, "humidity": 55, "windSpeed": 20}


def test_collision_last_write_wins_keeps_history(registry: InMemoryRegistry) -> None:
    registry.authorize_provider("provider1", caller=OWNER)
    registry.authorize_provider("provider2", caller=OWNER)

    a = registry.submit("Oslo", 1, 0, 50, 3, caller="provider1", timestamp=7)
    b = registry.submit("Oslo", 2, 0, 50, 3, caller="provider2", timestamp=7)

    assert b.sequence > a.sequence
    assert registry.get("Oslo", 7) == b
    assert registry.get_latest("Oslo") == b
    assert registry.submissions() == [a, b]


def test_collision_reject_policy() -> None:
    reg = InMemoryRegistry(RegistryConfig(owner=OWNER, collision_policy=CollisionPolicy.REJECT))
    reg.authorize_provider("provider1", caller=OWNER)
    first = reg.submit("Oslo", 1, 0, 50, 3, caller="provider1", timestamp=7)

    with pytest.raises(TimestampCollision) as exc:
        reg.submit("Oslo", 2, 0, 50, 3, caller="provider1", timestamp=7)

    assert isinstance(exc.value, ValueError)
    assert reg.get("Oslo", 7) == first
    assert reg.submissions() == [first]

    # Same timestamp on another location is not a collision.
    reg.submit("Bergen", 2, 0, 50, 3, caller="provider1", timestamp=7)


def test_non_integer_readings_are_rejected(registry: InMemoryRegistry) -> None:
    registry.authorize_provider("provider1", caller=OWNER)

    with pytest.raises(ValueError):
        registry.submit("Oslo", 1.5, 0, 50, 3, caller="provider1")
    with pytest.raises(ValueError):
        registry.submit("Oslo", "warm", 0, 50, 3, caller="provider1")

    assert registry.submissions() == []


def test_as_of_and_history(registry: InMemoryRegistry) -> None:
    registry.authorize_provider("provider1", caller=OWNER)
    for ts, temp in [(10, 1), (20, 2), (30, 3)]:
        registry.submit("Oslo", temp, 0, 50, 3, caller="provider1", timestamp=ts)

    assert registry.get_as_of("Oslo", 5) is None
    assert registry.get_as_of("Oslo", 25).temperature == 2
    assert registry.get_as_of("Oslo", 30).temperature == 3
    assert [r.timestamp for r in registry.history("Oslo")] == [10, 20, 30]
    assert [r.timestamp for r in registry.history("Oslo", start=15, end=30)] == [20, 30]
    assert registry.history("Nowhere") == []
    assert registry.bounds("Oslo") == (10, 30)

    with pytest.raises(ValueError):
        registry.history("Oslo", start=30, end=10)


def test_reset_clears_state_but_keeps_owner(registry: InMemoryRegistry) -> None:
    registry.authorize_provider("provider1", caller=OWNER)
    registry.submit("Oslo", 1, 0, 50, 3, caller="provider1")

    registry.reset()

    assert registry.is_authorized("provider1") is False
    assert registry.locations() == []
    assert registry.owner == OWNER


def test_concurrent_submissions_are_serialized() -> None:
    reg = InMemoryRegistry(RegistryConfig(owner=OWNER), clock=MonotonicSequence())
    for i in range(4):
        reg.authorize_provider(f"p{i}", caller=OWNER)

    def _worker(i: int) -> None:
        for n in range(50):
            reg.submit("Oslo", n, 0, 50, 3, caller=f"p{i}")

    threads = [threading.Thread(target=_worker, args=(i,)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    history = reg.history("Oslo")
    assert len(history) == 200
    assert len({r.timestamp for r in history}) == 200
    assert [r.sequence for r in reg.submissions()] == sorted(r.sequence for r in reg.submissions())
    assert reg.get_latest("Oslo") == history[-1]


def test_non_integral_lookup_keys(registry: InMemoryRegistry) -> None:
    registry.authorize_provider("provider1", caller=OWNER)
    registry.submit("Oslo", 1, 0, 50, 3, caller="provider1", timestamp=0)
    registry.submit("Oslo", 2, 0, 50, 3, caller="provider1", timestamp=1000)

    assert registry.get("Oslo", 1000.9) is None
    assert registry.get("Oslo", 1000.0).temperature == 2
    assert registry.get("Oslo", float("nan")) is None

    # As-of rounds down, so a key just below zero sees nothing at 0.
    assert registry.get_as_of("Oslo", 999.5).timestamp == 0
    assert registry.get_as_of("Oslo", -0.5) is None

    with pytest.raises(ValueError):
        registry.history("Oslo", start=1.5)


def test_reserved_characters_in_locations(registry: InMemoryRegistry) -> None:
    registry.authorize_provider("provider1", caller=OWNER)
    for loc in ("Rio/Centro", "What?", "Room #5", "50% chance", "São Paulo"):
        registry.submit(loc, 1, 0, 50, 3, caller="provider1", timestamp=1)
        assert registry.get_latest(loc).location == loc

    assert registry.locations() == sorted(["Rio/Centro", "What?", "Room #5", "50% chance", "São Paulo"])
