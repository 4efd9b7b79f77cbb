"""
Unit tests for the Event Access Token Issuer
"""

from datetime import timedelta
from uuid import uuid4

from src.app.services.event_access_token import EventAccessTokenIssuer, to_millis
from src.domain.base import utcnow


def make_issuer():
    return EventAccessTokenIssuer(secret="test-secret", ttl=timedelta(hours=24))


def test_issued_token_verifies_for_same_event_and_user():
    issuer = make_issuer()
    event_id, user_id = uuid4(), uuid4()
    now = utcnow()

    grant = issuer.issue(event_id, user_id, now=now)

    assert issuer.verify(grant.token, event_id, user_id, now=now + timedelta(hours=1))
    assert grant.expires_at - grant.issued_at == timedelta(hours=24)
    assert grant.event_id == str(event_id)


def test_token_embeds_issuance_time():
    issuer = make_issuer()
    now = utcnow()

    grant = issuer.issue(uuid4(), uuid4(), now=now)

    assert grant.token.split(".")[0] == str(to_millis(now))


def test_token_with_altered_timestamp_fails():
    issuer = make_issuer()
    event_id, user_id = uuid4(), uuid4()
    grant = issuer.issue(event_id, user_id)
    issued_ms, digest = grant.token.split(".")

    tampered = f"{int(issued_ms) + 1}.{digest}"

    assert not issuer.verify(tampered, event_id, user_id)


def test_token_for_other_user_or_event_fails():
    issuer = make_issuer()
    event_id, user_id = uuid4(), uuid4()
    grant = issuer.issue(event_id, user_id)

    assert not issuer.verify(grant.token, event_id, uuid4())
    assert not issuer.verify(grant.token, uuid4(), user_id)


def test_expired_token_fails():
    issuer = make_issuer()
    event_id, user_id = uuid4(), uuid4()
    issued = utcnow() - timedelta(hours=25)
    grant = issuer.issue(event_id, user_id, now=issued)

    assert not issuer.verify(grant.token, event_id, user_id)


def test_token_signed_with_other_secret_fails():
    event_id, user_id = uuid4(), uuid4()
    grant = EventAccessTokenIssuer(secret="other").issue(event_id, user_id)

    assert not make_issuer().verify(grant.token, event_id, user_id)


def test_malformed_tokens_fail():
    issuer = make_issuer()
    event_id, user_id = uuid4(), uuid4()

    for token in ["", "abc", "123", "123.", ".deadbeef", "x1.deadbeef"]:
        assert not issuer.verify(token, event_id, user_id)
