"""Tests for the Argon2 password hasher."""

import pytest
from passlib.hash import pbkdf2_sha256

from app.managers.password_manager import (
    PasswordHasher,
    dummy_verify_password,
    hash_password,
    verify_password,
)


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(level="low")


class TestPasswordHasher:
    def test_hash_is_argon2id(self, hasher: PasswordHasher) -> None:
        hashed = hasher.hash("secret1")
        assert hashed.startswith("$argon2id$")
        assert "secret1" not in hashed

    def test_verify(self, hasher: PasswordHasher) -> None:
        hashed = hasher.hash("secret1")
        assert hasher.verify("secret1", hashed)
        assert not hasher.verify("secret2", hashed)

    def test_same_password_hashes_differently(self, hasher: PasswordHasher) -> None:
        assert hasher.hash("secret1") != hasher.hash("secret1")

    def test_empty_password_rejected(self, hasher: PasswordHasher) -> None:
        with pytest.raises(ValueError, match="empty"):
            hasher.hash("")

    @pytest.mark.parametrize("digest", [None, "", "   ", "not-a-hash", "$argon2id$broken"])
    def test_corrupt_digest_verifies_false(self, hasher: PasswordHasher, digest: str | None) -> None:
        assert hasher.verify("secret1", digest) is False

    def test_pbkdf2_digest_needs_rehash(self, hasher: PasswordHasher) -> None:
        legacy = pbkdf2_sha256.hash("secret1")
        assert hasher.verify("secret1", legacy)
        assert hasher.needs_rehash(legacy)


@pytest.mark.asyncio
async def test_async_wrappers_round_trip() -> None:
    hashed = await hash_password("secret1")
    assert await verify_password("secret1", hashed)
    assert not await verify_password("wrong", hashed)
    await dummy_verify_password()
