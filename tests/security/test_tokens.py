from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from src.payroll_admin.payroll_admin.core.exceptions import CredentialExpired, InvalidCredential
from src.payroll_admin.payroll_admin.security.tokens import TokenCodec
from src.payroll_admin.payroll_admin.users.model import User

from tests.fakes import JWT_SECRET, make_codec

USER = User(user_id=7, first_name="Ana", last_name="Ruiz", email="ana@example.com", phone="+84 900 000 000", role_id=3)


def test_issued_token_carries_identity_claims():
    codec = make_codec()

    claims = codec.decode(codec.issue(USER))

    assert (claims.user_id, claims.email, claims.role_id) == (7, "ana@example.com", 3)
    assert claims.expires_at - claims.issued_at == 24 * 3600
    assert codec.expires_in_seconds == 24 * 3600


def test_expired_token():
    issued_long_ago = datetime.now(timezone.utc) - timedelta(days=2)
    codec = make_codec(expires_hours=1, clock=lambda: issued_long_ago)
    token = codec.issue(USER)

    with pytest.raises(CredentialExpired) as exc:
        make_codec().decode(token)
    assert exc.value.code == "TOKEN_EXPIRED"


def test_token_signed_with_another_secret_is_invalid():
    token = TokenCodec("some-other-secret").issue(USER)

    with pytest.raises(InvalidCredential) as exc:
        make_codec().decode(token)
    assert exc.value.code == "INVALID_TOKEN"


def test_garbage_and_missing_subject_are_invalid():
    codec = make_codec()
    no_subject = jwt.encode({"email": "x@example.com"}, JWT_SECRET, algorithm="HS256")

    with pytest.raises(InvalidCredential):
        codec.decode("not-a-jwt")
    with pytest.raises(InvalidCredential):
        codec.decode(no_subject)


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        TokenCodec("")
