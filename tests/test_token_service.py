from datetime import timedelta

import jwt
import pytest

from app.core.errors import (
    IdentityNotFound,
    InvalidOrExpiredCredential,
    RefreshTokenExpired,
    RefreshTokenMismatch,
)
from app.models.user import Identity, SessionState, utcnow
from app.services.token_service import TokenService


SHORT_ACCESS = "expiring-access-secret-0123456789abcdef"
SHORT_REFRESH = "expiring-refresh-secret-0123456789abcdef"


def make_identity(**kwargs):
    return Identity(id="user-1", phone="919812345678", **kwargs)


def store_pair(identity, pair):
    identity.session = SessionState(**pair.model_dump())
    return identity


def test_issue_pair_signs_with_distinct_secrets(tokens):
    pair = tokens.issue_pair(make_identity())

    access = jwt.decode(pair.access_token, "test-access-secret-0123456789abcdef", algorithms=["HS256"])
    refresh = jwt.decode(pair.refresh_token, "test-refresh-secret-0123456789abcdef", algorithms=["HS256"])
    assert access["id"] == refresh["id"] == "user-1"
    assert access["phone"] == refresh["phone"] == "919812345678"

    with pytest.raises(jwt.InvalidSignatureError):
        jwt.decode(pair.access_token, "test-refresh-secret-0123456789abcdef", algorithms=["HS256"])


def test_issue_pair_expiry_windows(tokens):
    before = utcnow()
    pair = tokens.issue_pair(make_identity())

    assert timedelta(minutes=59) < pair.access_expiry - before <= timedelta(hours=1, seconds=5)
    assert timedelta(days=29) < pair.refresh_expiry - before <= timedelta(days=30, seconds=5)


def test_each_issue_produces_a_new_token(tokens):
    identity = make_identity()
    assert tokens.issue_pair(identity).refresh_token != tokens.issue_pair(identity).refresh_token


def test_verify_access_returns_principal(tokens):
    pair = tokens.issue_pair(make_identity(role="admin"))
    principal = tokens.verify_access(pair.access_token)
    assert principal.id == "user-1"
    assert principal.phone == "919812345678"
    assert principal.is_admin


def test_verify_access_rejects_expired_token():
    short = TokenService(SHORT_ACCESS, SHORT_REFRESH, access_ttl=timedelta(seconds=-5))
    pair = short.issue_pair(make_identity())
    with pytest.raises(InvalidOrExpiredCredential):
        short.verify_access(pair.access_token)


def test_verify_access_rejects_garbage_and_refresh_tokens(tokens):
    with pytest.raises(InvalidOrExpiredCredential):
        tokens.verify_access("not-a-token")

    pair = tokens.issue_pair(make_identity())
    with pytest.raises(InvalidOrExpiredCredential):
        tokens.verify_access(pair.refresh_token)


def test_verify_access_rejects_foreign_key():
    other = TokenService("other-access-secret-0123456789abcdef", "other-refresh-secret-0123456789abcdef")
    mine = TokenService("my-access-secret-0123456789abcdef", "my-refresh-secret-0123456789abcdef")
    pair = other.issue_pair(make_identity())
    with pytest.raises(InvalidOrExpiredCredential):
        mine.verify_access(pair.access_token)


def test_verify_refresh_accepts_stored_token(tokens):
    identity = make_identity()
    pair = tokens.issue_pair(identity)
    store_pair(identity, pair)

    assert tokens.verify_refresh(pair.refresh_token, lambda _id: identity) is identity


def test_verify_refresh_unknown_identity_is_unauthorized(tokens):
    pair = tokens.issue_pair(make_identity())
    with pytest.raises(IdentityNotFound) as excinfo:
        tokens.verify_refresh(pair.refresh_token, lambda _id: None)
    assert excinfo.value.status_code == 401


def test_verify_refresh_rejects_superseded_token(tokens):
    identity = make_identity()
    old = tokens.issue_pair(identity)
    store_pair(identity, tokens.issue_pair(identity))

    with pytest.raises(RefreshTokenMismatch):
        tokens.verify_refresh(old.refresh_token, lambda _id: identity)


def test_verify_refresh_checks_stored_expiry(tokens):
    identity = make_identity()
    pair = tokens.issue_pair(identity)
    store_pair(identity, pair)
    identity.session.refresh_expiry = utcnow() - timedelta(seconds=1)

    with pytest.raises(RefreshTokenExpired):
        tokens.verify_refresh(pair.refresh_token, lambda _id: identity)


def test_verify_refresh_checks_embedded_expiry():
    short = TokenService(SHORT_ACCESS, SHORT_REFRESH, refresh_ttl=timedelta(seconds=-5))
    identity = make_identity()
    pair = short.issue_pair(identity)
    store_pair(identity, pair)
    identity.session.refresh_expiry = utcnow() + timedelta(days=1)

    with pytest.raises(InvalidOrExpiredCredential):
        short.verify_refresh(pair.refresh_token, lambda _id: identity)


def test_empty_secret_is_rejected():
    with pytest.raises(ValueError):
        TokenService("", "refresh-secret-0123456789abcdef")
