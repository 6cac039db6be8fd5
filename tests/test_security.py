import re
import time

import pytest

from leadhub.app.core.security import (
    create_access_token,
    decode_access_token,
    generate_api_key,
    get_password_hash,
    verify_password,
)


def test_password_hashing_not_plain():
    plain = "password123"
    hashed = get_password_hash(plain)
    assert hashed and hashed != plain


def test_verify_password():
    hashed = get_password_hash("secret")
    assert verify_password("secret", hashed)
    assert not verify_password("wrong", hashed)


def test_token_carries_identity_claims():
    token = create_access_token({"id": 123, "email": "a@x.com", "role": "sales"})
    payload = decode_access_token(token)
    assert payload["sub"] == "123"
    assert payload["email"] == "a@x.com"
    assert payload["role"] == "sales"
    assert "exp" in payload


def test_default_expiry_is_seven_days():
    token = create_access_token({"id": 1, "email": "a@x.com", "role": "admin"})
    payload = decode_access_token(token)
    remaining = payload["exp"] - time.time()
    assert 6.9 * 24 * 3600 < remaining <= 7 * 24 * 3600


def test_expired_token_raises_value_error():
    token = create_access_token({"id": 1, "email": "a@x.com", "role": "admin"}, expires_minutes=-1)
    with pytest.raises(ValueError):
        decode_access_token(token)


def test_invalid_token_raises_value_error():
    with pytest.raises(ValueError):
        decode_access_token("invalid.token.value")


def test_generated_api_key_format():
    key = generate_api_key()
    assert re.fullmatch(r"crm_[0-9a-f]{64}", key)
    assert generate_api_key() != key
