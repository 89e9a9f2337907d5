import logging
import uuid
from datetime import datetime, timedelta, UTC
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skillmarket import models, schemas
from skillmarket.config import settings
from skillmarket.crud import user as user_crud
from skillmarket.database import get_db

logger = logging.getLogger(__name__)


class SessionLookupError(Exception):
    """The user or revoked-token store could not be read."""


# ==========================
# AUTH CONFIG
# ==========================

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto"
)

SESSION_LOOKUP_FAILED = "Could not verify your session right now. Please try again."

ACCESS_TOKEN_PURPOSE = "access"
VERIFICATION_TOKEN_PURPOSE = "email_verification"


# ==========================
# PASSWORD UTILS
# ==========================

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Bcrypt max input length = 72 bytes
    Truncate safely to avoid crash
    """
    password_bytes = password.encode("utf-8")

    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
        password = password_bytes.decode("utf-8", errors="ignore")

    return pwd_context.hash(password)


# ==========================
# JWT TOKENS
# ==========================

def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> schemas.Token:
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {
        "sub": user_id,
        "jti": str(uuid.uuid4()),
        "purpose": ACCESS_TOKEN_PURPOSE,
        "exp": expire,
    }
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return schemas.Token(access_token=encoded_jwt, token_type="bearer", expires_at=expire)


def create_verification_token(user_id: str) -> str:
    expire = datetime.now(UTC) + timedelta(minutes=settings.VERIFICATION_TOKEN_EXPIRE_MINUTES)
    return jwt.encode(
        {"sub": user_id, "purpose": VERIFICATION_TOKEN_PURPOSE, "exp": expire},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def decode_token(token: str, purpose: str = ACCESS_TOKEN_PURPOSE) -> schemas.TokenData:
    """Decode and validate a token; raises JWTError when it is unusable."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if payload.get("purpose") != purpose:
        raise JWTError("Token has the wrong purpose")

    user_id = payload.get("sub")
    if not user_id:
        raise JWTError("Token has no subject")

    exp = payload.get("exp")
    return schemas.TokenData(
        user_id=user_id,
        jti=payload.get("jti"),
        expires_at=datetime.fromtimestamp(exp, UTC) if exp else None,
    )


# ==========================
# AUTH HELPERS
# ==========================

def authenticate_user(db: Session, email: str, password: str):
    user = user_crud.get_user_by_email(db, email)

    if not user:
        return False

    if not verify_password(password, user.password_hash):
        return False

    return user


def resolve_token_user(db: Session, token: str) -> Optional[models.User]:
    """
    The active user behind an unrevoked access token, or None.

    Raises SessionLookupError when the user store cannot be read.
    """
    try:
        token_data = decode_token(token)
    except JWTError:
        return None

    try:
        if token_data.jti and user_crud.is_token_revoked(db, token_data.jti):
            return None
        user = user_crud.get_user(db, token_data.user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Session lookup failed (user_id=%s): %s", token_data.user_id, exc)
        raise SessionLookupError(SESSION_LOOKUP_FAILED) from exc

    if user is None or not user.is_active:
        return None
    return user


def _resolve_or_503(db: Session, token: str) -> Optional[models.User]:
    try:
        return resolve_token_user(db, token)
    except SessionLookupError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
):
    user = _resolve_or_503(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_optional_current_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db)
) -> Optional[models.User]:
    if not token:
        return None
    return _resolve_or_503(db, token)
