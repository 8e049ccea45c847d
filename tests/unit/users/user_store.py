"""Unit tests for user accounts and usage charging."""

from __future__ import annotations

import asyncio
import threading

import pytest

from llama_relay.errors import AuthenticationError, QuotaExceededError, ValidationError
from llama_relay.users import UserStore, hash_password, verify_password


def test_password_hash_round_trip() -> None:
    stored = hash_password("hunter2")
    digest, salt = stored.split(".")
    assert len(salt) == 32
    assert verify_password("hunter2", stored)
    assert not verify_password("hunter3", stored)


def test_hashes_are_salted() -> None:
    assert hash_password("same") != hash_password("same")


@pytest.mark.parametrize("stored", ["", "nodot", "a.b.c", "zz.salt", ".salt"])
def test_malformed_stored_hash_never_verifies(stored: str) -> None:
    assert not verify_password("anything", stored)


def test_usernames_are_unique_case_insensitively() -> None:
    store = UserStore()
    store.create_user("Alice", "pw")
    with pytest.raises(ValueError):
        store.create_user("alice", "pw")
    assert store.get_user_by_username("ALICE").username == "Alice"
    assert len(store) == 1


def test_verify_credentials_records_login() -> None:
    store = UserStore()
    user = store.create_user("bob", "pw")
    assert user.last_login is None

    async def _run():
        assert await store.verify_credentials("bob", "wrong") is None
        assert await store.verify_credentials("nobody", "pw") is None
        return await store.verify_credentials("bob", "pw")

    assert asyncio.run(_run()) is user
    assert user.last_login is not None


def test_password_checks_run_off_the_event_loop(monkeypatch: pytest.MonkeyPatch) -> None:
    store = UserStore()
    store.create_user("bob", "pw")
    threads: list[int] = []

    def _recording_verify(password: str, stored: str) -> bool:
        threads.append(threading.get_ident())
        return verify_password(password, stored)

    def _recording_hash(password: str) -> str:
        threads.append(threading.get_ident())
        return hash_password(password)

    monkeypatch.setattr("llama_relay.users.store.verify_password", _recording_verify)
    monkeypatch.setattr("llama_relay.users.store.hash_password", _recording_hash)

    async def _run():
        await store.verify_credentials("bob", "pw")
        await store.register("newcomer", "pw")
        return threading.get_ident()

    loop_thread = asyncio.run(_run())
    assert len(threads) == 2
    assert loop_thread not in threads


def test_register_creates_regular_user_and_rejects_duplicates() -> None:
    store = UserStore(default_quota=7)
    store.create_user("alice", "pw")

    async def _run():
        user = await store.register("  frank ", "pw")
        with pytest.raises(ValidationError) as exc_info:
            await store.register("FRANK", "other")
        return user, exc_info.value

    user, err = asyncio.run(_run())
    assert user.username == "frank"
    assert user.quota == 7
    assert not user.is_admin
    assert user.last_login is not None
    assert err.error_code == "username_taken"
    assert len(store) == 2


def test_public_view_hides_password_hash() -> None:
    user = UserStore().create_user("carol", "pw", quota=10)
    public = user.to_public()
    assert "passwordHash" not in public
    assert public["usageCount"] == 0
    assert public["lastLogin"] is None


def test_charge_counts_until_quota() -> None:
    store = UserStore()
    user = store.create_user("dave", "pw", quota=2)

    async def _run():
        assert await store.charge(user.id) == 1
        assert await store.charge(str(user.id)) == 2
        with pytest.raises(QuotaExceededError) as exc_info:
            await store.charge(user.id)
        return exc_info.value

    err = asyncio.run(_run())
    assert (err.quota, err.usage) == (2, 2)
    assert user.quota_exhausted
    assert store.profile(user.id)["usagePercentage"] == 100


def test_zero_quota_is_unlimited() -> None:
    store = UserStore()
    admin = store.create_user("root", "pw", is_admin=True, quota=0)

    async def _run():
        for _ in range(5):
            await store.charge(admin.id)

    asyncio.run(_run())
    assert admin.usage_count == 5
    assert admin.usage_percentage == 0


def test_charging_unknown_user_fails() -> None:
    with pytest.raises(AuthenticationError):
        asyncio.run(UserStore().charge(99))


def test_concurrent_charges_never_exceed_quota() -> None:
    store = UserStore()
    user = store.create_user("eve", "pw", quota=3)

    async def _run():
        return await asyncio.gather(*(store.charge(user.id) for _ in range(10)), return_exceptions=True)

    results = asyncio.run(_run())
    assert sorted(r for r in results if isinstance(r, int)) == [1, 2, 3]
    assert sum(isinstance(r, QuotaExceededError) for r in results) == 7
