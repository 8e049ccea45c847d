"""Unit tests for the session token store."""

from __future__ import annotations

from llama_relay.auth import SessionStore


def test_create_and_resolve() -> None:
    store = SessionStore(ttl_seconds=60)
    token = store.create(5)
    assert store.resolve(token) == 5
    assert store.resolve("unknown") is None
    assert store.resolve(None) is None


def test_sessions_expire() -> None:
    clock = [1000.0]
    store = SessionStore(ttl_seconds=60, clock=lambda: clock[0])
    token = store.create(5)
    clock[0] = 1059.0
    assert store.resolve(token) == 5
    clock[0] = 1060.0
    assert store.resolve(token) is None
    assert len(store) == 0


def test_revoke_single_and_all() -> None:
    store = SessionStore()
    first, second, other = store.create(1), store.create(1), store.create(2)
    assert store.revoke(first)
    assert not store.revoke(first)
    assert store.revoke_user(1) == 1
    assert store.resolve(second) is None
    assert store.resolve(other) == 2


def test_creating_a_session_sweeps_expired_ones() -> None:
    clock = [0.0]
    store = SessionStore(ttl_seconds=10, clock=lambda: clock[0])
    abandoned = [store.create(user_id) for user_id in range(5)]
    clock[0] = 5.0
    recent = store.create(9)
    clock[0] = 12.0
    fresh = store.create(10)
    assert len(store) == 2
    assert store.resolve(recent) == 9
    assert store.resolve(fresh) == 10
    assert all(store.resolve(token) is None for token in abandoned)
