"""Tests for access-token issuing/verification and password helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from jose import jwt

from retailpos.app.core.errors import (
    ExpiredCredential,
    InvalidCredential,
    MalformedCredential,
)
from retailpos.app.core.security import (
    ALGORITHM,
    create_access_token,
    get_password_hash,
    validate_password_strength,
    verify_access_token,
    verify_password,
)
from retailpos.app.models.user import RoleEnum

SECRET = "unit-test-secret"
ISSUED = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _token(**overrides: object) -> str:
    return create_access_token(
        subject=str(overrides.pop("user_id", uuid4())),
        role=overrides.pop("role", RoleEnum.STAFF),
        expires_delta=overrides.pop("expires_delta", timedelta(hours=1)),
        secret_key=SECRET,
        now=ISSUED,
    )


class TestVerifyAccessToken:
    def test_valid_token_returns_claim(self) -> None:
        user_id = uuid4()
        token = _token(user_id=user_id, role=RoleEnum.ADMIN)

        claim = verify_access_token(token, secret_key=SECRET, now=ISSUED + timedelta(minutes=5))

        assert claim.user_id == user_id
        assert claim.role is RoleEnum.ADMIN
        assert claim.expires_at == ISSUED + timedelta(hours=1)

    def test_default_validity_is_one_hour(self) -> None:
        token = create_access_token(
            subject=str(uuid4()), role=RoleEnum.STAFF, secret_key=SECRET, now=ISSUED
        )
        claim = verify_access_token(token, secret_key=SECRET, now=ISSUED)
        assert claim.expires_at - ISSUED == timedelta(hours=1)

    def test_expired_exactly_at_expiry(self) -> None:
        token = _token()
        with pytest.raises(ExpiredCredential):
            verify_access_token(token, secret_key=SECRET, now=ISSUED + timedelta(hours=1))

    def test_valid_one_second_before_expiry(self) -> None:
        token = _token()
        claim = verify_access_token(
            token, secret_key=SECRET, now=ISSUED + timedelta(hours=1) - timedelta(seconds=1)
        )
        assert claim.role is RoleEnum.STAFF

    def test_wrong_signature_is_invalid(self) -> None:
        token = _token()
        with pytest.raises(InvalidCredential):
            verify_access_token(token, secret_key="another-secret", now=ISSUED)

    def test_tampered_payload_is_invalid(self) -> None:
        staff_token = _token(role=RoleEnum.STAFF)
        header, _payload, signature = staff_token.split(".")
        forged = jwt.encode(
            {"sub": str(uuid4()), "role": "admin", "exp": int((ISSUED + timedelta(hours=1)).timestamp())},
            "attacker-key",
            algorithm=ALGORITHM,
        )
        _h, forged_payload, _s = forged.split(".")
        with pytest.raises(InvalidCredential):
            verify_access_token(f"{header}.{forged_payload}.{signature}", secret_key=SECRET, now=ISSUED)

    @pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b", "a.b.c"])
    def test_undecodable_token_is_malformed(self, garbage: str) -> None:
        with pytest.raises(MalformedCredential):
            verify_access_token(garbage, secret_key=SECRET, now=ISSUED)

    def test_missing_role_is_malformed(self) -> None:
        token = jwt.encode(
            {"sub": str(uuid4()), "exp": int((ISSUED + timedelta(hours=1)).timestamp())},
            SECRET,
            algorithm=ALGORITHM,
        )
        with pytest.raises(MalformedCredential):
            verify_access_token(token, secret_key=SECRET, now=ISSUED)

    def test_unknown_role_is_malformed(self) -> None:
        token = jwt.encode(
            {
                "sub": str(uuid4()),
                "role": "superuser",
                "exp": int((ISSUED + timedelta(hours=1)).timestamp()),
            },
            SECRET,
            algorithm=ALGORITHM,
        )
        with pytest.raises(MalformedCredential):
            verify_access_token(token, secret_key=SECRET, now=ISSUED)

    def test_non_uuid_subject_is_malformed(self) -> None:
        token = jwt.encode(
            {"sub": "42", "role": "staff", "exp": int((ISSUED + timedelta(hours=1)).timestamp())},
            SECRET,
            algorithm=ALGORITHM,
        )
        with pytest.raises(MalformedCredential):
            verify_access_token(token, secret_key=SECRET, now=ISSUED)


class TestPasswords:
    def test_hash_and_verify(self) -> None:
        digest = get_password_hash("Secret123")
        assert digest != "Secret123"
        assert verify_password("Secret123", digest)
        assert not verify_password("Secret124", digest)

    @pytest.mark.parametrize(
        ("password", "ok"),
        [
            ("short1", False),
            ("onlyletters", False),
            ("1234567890", False),
            ("letters123", True),
        ],
    )
    def test_strength(self, password: str, ok: bool) -> None:
        assert (validate_password_strength(password) is None) is ok
