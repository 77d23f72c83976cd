"""Tests for bcrypt password hashing."""

from taskboard_server.utils.passwords import hash_password, verify_password


def test_hash_and_verify():
    hashed = hash_password("Sup3r-secret", rounds=4)

    assert hashed != "Sup3r-secret"
    assert hashed.startswith("$2")
    assert verify_password("Sup3r-secret", hashed)
    assert not verify_password("wrong", hashed)


def test_hashes_are_salted():
    assert hash_password("same", rounds=4) != hash_password("same", rounds=4)


def test_malformed_hash_does_not_verify():
    assert verify_password("anything", "not-a-bcrypt-hash") is False
