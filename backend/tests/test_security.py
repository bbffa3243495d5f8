import pytest

from app.core.security import get_caller_for_token, hash_token


def test_hash_token_is_stable_and_opaque():
    assert hash_token("alice-token") == hash_token("alice-token")
    assert hash_token("alice-token") != "alice-token"
    assert len(hash_token("alice-token")) == 64


@pytest.mark.asyncio
async def test_token_resolves_to_caller(db, accounts):
    caller = await get_caller_for_token(db, "root-token")
    assert caller == accounts.root
    assert caller.is_admin is True


@pytest.mark.asyncio
async def test_unknown_token_has_no_caller(db, accounts):
    assert await get_caller_for_token(db, "not-a-token") is None
