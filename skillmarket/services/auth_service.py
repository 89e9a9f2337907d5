# skillmarket/services/auth_service.py
"""
Authentication provider.

Sign-up, sign-in, sign-out, session lookup and email verification on top
of the user store and JWT helpers. Provider-level failures are raised as
AuthProviderError with terse messages and mapped to user-facing text
before leaving this module; callers always get an AuthResponse.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlencode

from jose import JWTError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from skillmarket import models
from skillmarket.config import settings
from skillmarket.crud import user as user_crud
from skillmarket.schemas import AuthResponse, SessionInfo, UserOut
from skillmarket.utils.email import send_email
from skillmarket.utils.security import (
    VERIFICATION_TOKEN_PURPOSE,
    SessionLookupError,
    authenticate_user,
    create_access_token,
    create_verification_token,
    decode_token,
    get_password_hash,
    resolve_token_user,
)

logger = logging.getLogger(__name__)


class AuthProviderError(Exception):
    """Raw provider failure."""


# Provider messages
INVALID_CREDENTIALS = "Invalid login credentials"
EMAIL_NOT_CONFIRMED = "Email not confirmed"
USER_ALREADY_REGISTERED = "User already registered"
EMAIL_ALREADY_CONFIRMED = "Email already confirmed"
INVALID_EMAIL_LINK = "Email link is invalid or has expired"
NO_SESSION = "Auth session missing"

FRIENDLY_MESSAGES = {
    INVALID_CREDENTIALS: "Invalid email or password. Please check your credentials and try again.",
    EMAIL_NOT_CONFIRMED: "Please check your email and click the verification link before signing in.",
}

SIGN_UP_FAILED = "An unexpected error occurred during signup"
SIGN_IN_FAILED = "An unexpected error occurred during sign in"
SIGN_OUT_FAILED = "Failed to sign out"
RESEND_FAILED = "Failed to resend verification email"
VERIFY_FAILED = "Failed to verify email"


def to_user_message(raw_message: str) -> str:
    for needle, friendly in FRIENDLY_MESSAGES.items():
        if needle in raw_message:
            return friendly
    return raw_message


def _session_response(user: models.User) -> AuthResponse:
    token = create_access_token(user.id)
    return AuthResponse(
        user=UserOut.model_validate(user),
        access_token=token.access_token,
        token_type=token.token_type,
        expires_at=token.expires_at,
    )


def _verification_link(user: models.User) -> str:
    query = urlencode({"token": create_verification_token(user.id)})
    return f"{settings.FRONTEND_URL.rstrip('/')}/auth/callback?{query}"


def send_verification_email(user: models.User) -> bool:
    """Best-effort verification mail; False when nothing was sent."""
    name = (user.full_name or "there").strip() or "there"
    body_text = (
        f"Hi {name},\n\n"
        "Thanks for signing up for SkillMarket. Confirm your email address "
        "by opening the link below:\n\n"
        f"{_verification_link(user)}\n\n"
        "If you did not create an account you can ignore this message."
    )
    sent = send_email(
        to_email=user.email,
        subject="Confirm your SkillMarket account",
        body_text=body_text,
    )
    if not sent:
        logger.info("Verification email not sent (user_id=%s)", user.id)
    return sent


# =====================================
# SIGN UP
# =====================================

def _register(db: Session, email: str, password: str, full_name: str) -> models.User:
    if user_crud.get_user_by_email(db, email):
        raise AuthProviderError(USER_ALREADY_REGISTERED)
    try:
        return user_crud.create_user(
            db,
            email=email,
            full_name=full_name,
            password_hash=get_password_hash(password),
            email_verified=not settings.EMAIL_VERIFICATION_REQUIRED,
        )
    except IntegrityError:
        db.rollback()
        raise AuthProviderError(USER_ALREADY_REGISTERED)


def sign_up(db: Session, email: str, password: str, full_name: str) -> AuthResponse:
    try:
        user = _register(db, email, password, full_name)
    except AuthProviderError as exc:
        return AuthResponse(error=to_user_message(str(exc)))
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Sign-up failed for '%s': %s", email, exc)
        return AuthResponse(error=SIGN_UP_FAILED)

    logger.info("User %s signed up", user.id)
    if not user.email_verified:
        send_verification_email(user)
        return AuthResponse(user=UserOut.model_validate(user), needs_email_verification=True)
    return _session_response(user)


# =====================================
# SIGN IN / SIGN OUT / SESSION
# =====================================

def _check_credentials(db: Session, email: str, password: str) -> models.User:
    user = authenticate_user(db, email, password)
    if not user or not user.is_active:
        raise AuthProviderError(INVALID_CREDENTIALS)
    if not user.email_verified:
        raise AuthProviderError(EMAIL_NOT_CONFIRMED)
    return user


def sign_in(db: Session, email: str, password: str) -> AuthResponse:
    try:
        user = _check_credentials(db, email, password)
    except AuthProviderError as exc:
        return AuthResponse(error=to_user_message(str(exc)))
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Sign-in failed for '%s': %s", email, exc)
        return AuthResponse(error=SIGN_IN_FAILED)

    return _session_response(user)


def sign_out(db: Session, token: str) -> AuthResponse:
    try:
        token_data = decode_token(token)
    except JWTError:
        return AuthResponse(error=NO_SESSION)

    if not token_data.jti or token_data.expires_at is None:
        return AuthResponse(error=NO_SESSION)

    try:
        user_crud.revoke_token(
            db,
            jti=token_data.jti,
            user_id=token_data.user_id,
            expires_at=token_data.expires_at,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Sign-out failed (user_id=%s): %s", token_data.user_id, exc)
        return AuthResponse(error=SIGN_OUT_FAILED)

    logger.info("User %s signed out", token_data.user_id)
    return AuthResponse()


def get_current_session(db: Session, token: Optional[str]) -> Optional[SessionInfo]:
    """
    Session for a valid, unrevoked access token; None otherwise.

    A store failure comes back as a SessionInfo carrying only ``error``.
    """
    if not token:
        return None
    try:
        user = resolve_token_user(db, token)
    except SessionLookupError as exc:
        return SessionInfo(error=str(exc))
    if user is None:
        return None
    return SessionInfo(
        user=UserOut.model_validate(user),
        expires_at=decode_token(token).expires_at,
    )


# =====================================
# EMAIL VERIFICATION
# =====================================

def resend_email_verification(db: Session, email: str) -> AuthResponse:
    try:
        user = user_crud.get_user_by_email(db, email)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Verification resend lookup failed for '%s': %s", email, exc)
        return AuthResponse(error=RESEND_FAILED)

    # Unknown addresses look like success so registered emails are not revealed.
    if user is None:
        return AuthResponse()
    if user.email_verified:
        return AuthResponse(error=EMAIL_ALREADY_CONFIRMED)
    if not send_verification_email(user):
        return AuthResponse(error=RESEND_FAILED)
    return AuthResponse(needs_email_verification=True)


def verify_email(db: Session, token: str) -> AuthResponse:
    try:
        token_data = decode_token(token, purpose=VERIFICATION_TOKEN_PURPOSE)
    except JWTError:
        return AuthResponse(error=INVALID_EMAIL_LINK)

    try:
        user = user_crud.get_user(db, token_data.user_id)
        if user is None or not user.is_active:
            return AuthResponse(error=INVALID_EMAIL_LINK)
        if not user.email_verified:
            user = user_crud.mark_email_verified(db, user)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Email verification failed (user_id=%s): %s", token_data.user_id, exc)
        return AuthResponse(error=VERIFY_FAILED)

    logger.info("User %s verified their email", user.id)
    return _session_response(user)
