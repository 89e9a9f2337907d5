from __future__ import annotations

from datetime import datetime
from urllib.parse import parse_qs, urlparse

import pytest
from sqlalchemy.exc import SQLAlchemyError

from skillmarket import models
from skillmarket.crud import user as user_crud
from skillmarket.services import auth_service
from skillmarket.utils.security import SESSION_LOOKUP_FAILED, create_access_token


@pytest.fixture
def outbox(monkeypatch):
    sent = []

    def _fake_send_email(*, to_email, subject, body_text, **kwargs):
        sent.append({"to": to_email, "subject": subject, "body": body_text})
        return True

    monkeypatch.setattr(auth_service, "send_email", _fake_send_email)
    return sent


@pytest.fixture
def verification_required(monkeypatch):
    monkeypatch.setattr(auth_service.settings, "EMAIL_VERIFICATION_REQUIRED", True)


def _token_from_mail(message) -> str:
    link = next(line for line in message["body"].splitlines() if "/auth/callback" in line)
    return parse_qs(urlparse(link.strip()).query)["token"][0]


def test_sign_up_then_sign_in_returns_sessions(db_session):
    signed_up = auth_service.sign_up(db_session, "Ana@Example.org", "secret123", "Ana Lopez")
    signed_in = auth_service.sign_in(db_session, "ana@example.org", "secret123")

    assert signed_up.error is None
    assert signed_up.user.email == "ana@example.org"
    assert signed_up.access_token
    assert signed_in.error is None
    assert signed_in.user.id == signed_up.user.id
    assert signed_in.expires_at is not None


def test_duplicate_sign_up_is_reported(db_session):
    auth_service.sign_up(db_session, "ana@example.org", "secret123", "Ana")
    again = auth_service.sign_up(db_session, "ANA@example.org", "other-pass", "Ana Again")

    assert again.error == auth_service.USER_ALREADY_REGISTERED
    assert again.access_token is None


def test_wrong_password_gets_friendly_message(db_session):
    auth_service.sign_up(db_session, "ana@example.org", "secret123", "Ana")

    wrong = auth_service.sign_in(db_session, "ana@example.org", "not-it")
    unknown = auth_service.sign_in(db_session, "nobody@example.org", "secret123")

    expected = auth_service.FRIENDLY_MESSAGES[auth_service.INVALID_CREDENTIALS]
    assert wrong.error == expected
    assert unknown.error == expected


def test_to_user_message_passes_unknown_messages_through():
    assert auth_service.to_user_message("Something odd happened") == "Something odd happened"
    assert auth_service.to_user_message("Email not confirmed").startswith("Please check your email")


def test_sign_out_revokes_the_token(db_session):
    result = auth_service.sign_up(db_session, "ana@example.org", "secret123", "Ana")
    token = result.access_token

    assert auth_service.get_current_session(db_session, token).user.email == "ana@example.org"
    assert auth_service.sign_out(db_session, token).error is None
    assert auth_service.get_current_session(db_session, token) is None

    # Another session for the same user stays valid.
    fresh = create_access_token(result.user.id).access_token
    assert auth_service.get_current_session(db_session, fresh) is not None


def test_session_lookup_without_or_with_garbage_token(db_session):
    assert auth_service.get_current_session(db_session, None) is None
    assert auth_service.get_current_session(db_session, "not-a-jwt") is None
    assert auth_service.sign_out(db_session, "not-a-jwt").error == auth_service.NO_SESSION


def test_verification_flow(db_session, outbox, verification_required):
    signed_up = auth_service.sign_up(db_session, "ana@example.org", "secret123", "Ana")

    assert signed_up.needs_email_verification is True
    assert signed_up.access_token is None
    assert len(outbox) == 1
    assert outbox[0]["to"] == "ana@example.org"

    blocked = auth_service.sign_in(db_session, "ana@example.org", "secret123")
    assert blocked.error == auth_service.FRIENDLY_MESSAGES[auth_service.EMAIL_NOT_CONFIRMED]

    verified = auth_service.verify_email(db_session, _token_from_mail(outbox[0]))
    assert verified.error is None
    assert verified.user.email_verified is True
    assert verified.access_token

    assert auth_service.sign_in(db_session, "ana@example.org", "secret123").error is None


def test_verify_email_rejects_access_tokens_and_garbage(db_session):
    result = auth_service.sign_up(db_session, "ana@example.org", "secret123", "Ana")

    assert auth_service.verify_email(db_session, result.access_token).error == auth_service.INVALID_EMAIL_LINK
    assert auth_service.verify_email(db_session, "garbage").error == auth_service.INVALID_EMAIL_LINK


def test_resend_verification(db_session, outbox, verification_required):
    auth_service.sign_up(db_session, "ana@example.org", "secret123", "Ana")

    resent = auth_service.resend_email_verification(db_session, "ana@example.org")
    unknown = auth_service.resend_email_verification(db_session, "ghost@example.org")

    assert resent.error is None
    assert resent.needs_email_verification is True
    assert len(outbox) == 2
    assert unknown.error is None
    assert len(outbox) == 2

    auth_service.verify_email(db_session, _token_from_mail(outbox[-1]))
    confirmed = auth_service.resend_email_verification(db_session, "ana@example.org")
    assert confirmed.error == auth_service.EMAIL_ALREADY_CONFIRMED


def test_resend_reports_mail_failure(db_session, monkeypatch, verification_required):
    monkeypatch.setattr(auth_service, "send_email", lambda **kwargs: False)
    auth_service.sign_up(db_session, "ana@example.org", "secret123", "Ana")

    assert auth_service.resend_email_verification(db_session, "ana@example.org").error == auth_service.RESEND_FAILED


def _failing_store(*args, **kwargs):
    raise SQLAlchemyError("connection lost")


def test_session_lookup_store_failure_is_reported(db_session, monkeypatch):
    token = auth_service.sign_up(db_session, "ana@example.org", "secret123", "Ana").access_token
    monkeypatch.setattr(user_crud, "is_token_revoked", _failing_store)

    session = auth_service.get_current_session(db_session, token)

    assert session.user is None
    assert session.error == SESSION_LOOKUP_FAILED


def test_sign_out_purges_expired_revocations(db_session, create_user):
    old_user = create_user("old@example.org", "Old")
    db_session.add(models.RevokedToken(jti="expired-jti", user_id=old_user.id, expires_at=datetime(2020, 1, 1)))
    db_session.commit()
    token = auth_service.sign_up(db_session, "ana@example.org", "secret123", "Ana").access_token

    assert auth_service.sign_out(db_session, token).error is None

    remaining = [row.jti for row in db_session.query(models.RevokedToken).all()]
    assert "expired-jti" not in remaining
    assert len(remaining) == 1
    assert auth_service.get_current_session(db_session, token) is None


def test_purge_expired_tokens_keeps_live_rows(db_session, create_user):
    user = create_user("ana@example.org", "Ana")
    db_session.add_all([
        models.RevokedToken(jti="gone", user_id=user.id, expires_at=datetime(2024, 1, 1)),
        models.RevokedToken(jti="live", user_id=user.id, expires_at=datetime(2024, 3, 1)),
    ])
    db_session.commit()

    purged = user_crud.purge_expired_tokens(db_session, now=datetime(2024, 2, 1))
    db_session.commit()

    assert purged == 1
    assert user_crud.is_token_revoked(db_session, "gone") is False
    assert user_crud.is_token_revoked(db_session, "live") is True
