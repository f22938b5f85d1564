from datetime import timedelta

import pytest

from todo_api.core.tokens import (
    InvalidSignatureError,
    InvalidTokenError,
    TokenExpiredError,
    TokenIssuer,
    TokenNotYetValidError,
)

SECRET = "secret"


def test_access_token_round_trip(issuer, clock):
    token = issuer.issue_access_token(user_id=1, name="John Doe", email="john@doe.com", ttl_minutes=15, secret=SECRET)
    claims = issuer.verify_access_token(token, SECRET)
    assert claims.user_id == 1
    assert claims.name == "John Doe"
    assert claims.email == "john@doe.com"
    assert claims.issued_at == clock.now
    assert claims.not_before == clock.now
    assert claims.expires_at == clock.now + timedelta(minutes=15)


def test_refresh_token_lifetime_is_in_days(issuer, clock):
    token = issuer.issue_refresh_token(user_id=7, ttl_days=3, secret=SECRET)
    claims = issuer.verify_refresh_token(token, SECRET)
    assert claims.user_id == 7
    assert claims.expires_at == clock.now + timedelta(days=3)


def test_issue_is_deterministic_for_a_frozen_clock_and_id(clock):
    issuer = TokenIssuer(algorithm="HS256", clock=clock, new_id=lambda: "fixed")
    first = issuer.issue_refresh_token(user_id=1, ttl_days=1, secret=SECRET)
    assert issuer.issue_refresh_token(user_id=1, ttl_days=1, secret=SECRET) == first
    clock.advance(seconds=1)
    assert issuer.issue_refresh_token(user_id=1, ttl_days=1, secret=SECRET) != first


def test_tokens_issued_in_the_same_second_differ(issuer):
    first = issuer.issue_refresh_token(user_id=1, ttl_days=1, secret=SECRET)
    second = issuer.issue_refresh_token(user_id=1, ttl_days=1, secret=SECRET)
    assert first != second
    assert issuer.verify_refresh_token(second, SECRET).user_id == 1


def test_wrong_secret_is_an_invalid_signature(issuer):
    token = issuer.issue_access_token(user_id=1, name="a", email="a@b.com", ttl_minutes=15, secret=SECRET)
    with pytest.raises(InvalidSignatureError):
        issuer.verify_access_token(token, "another-secret")


def test_garbage_token_is_rejected(issuer):
    with pytest.raises(InvalidSignatureError):
        issuer.verify_access_token("not.a.token", SECRET)
    with pytest.raises(InvalidTokenError):
        issuer.verify_access_token("", SECRET)


def test_expired_at_exact_expiry(issuer, clock):
    token = issuer.issue_access_token(user_id=1, name="a", email="a@b.com", ttl_minutes=15, secret=SECRET)
    clock.advance(minutes=14, seconds=59)
    issuer.verify_access_token(token, SECRET)
    clock.advance(seconds=1)
    with pytest.raises(TokenExpiredError):
        issuer.verify_access_token(token, SECRET)


def test_not_yet_valid_before_nbf(issuer, clock):
    token = issuer.issue_refresh_token(user_id=1, ttl_days=1, secret=SECRET)
    clock.advance(seconds=-1)
    with pytest.raises(TokenNotYetValidError):
        issuer.verify_refresh_token(token, SECRET)


def test_token_kinds_are_not_interchangeable(issuer):
    refresh = issuer.issue_refresh_token(user_id=1, ttl_days=1, secret=SECRET)
    access = issuer.issue_access_token(user_id=1, name="a", email="a@b.com", ttl_minutes=15, secret=SECRET)
    with pytest.raises(InvalidTokenError) as info:
        issuer.verify_access_token(refresh, SECRET)
    assert not isinstance(info.value, InvalidSignatureError)
    with pytest.raises(InvalidTokenError):
        issuer.verify_refresh_token(access, SECRET)
