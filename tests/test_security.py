from social_network_api.app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("password123")
    assert hashed != "password123"
    assert verify_password("password123", hashed)
    assert not verify_password("password124", hashed)


def test_password_hashes_are_salted():
    assert hash_password("same") != hash_password("same")


def test_malformed_hash_does_not_verify():
    assert not verify_password("anything", "not-a-hash")


def test_token_carries_subject():
    token = create_access_token({"sub": "7"}, "secret", 60)
    payload = decode_access_token(token, "secret")
    assert payload["sub"] == "7"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "7"}, "secret", -10)
    assert decode_access_token(token, "secret") is None


def test_tampered_token_is_rejected():
    token = create_access_token({"sub": "7"}, "secret", 60)
    header, payload, signature = token.split(".")
    forged = create_access_token({"sub": "8"}, "secret", 60).split(".")[1]
    assert decode_access_token(f"{header}.{forged}.{signature}", "secret") is None
    assert decode_access_token(token, "other") is None
    assert decode_access_token("garbage", "secret") is None
