from datetime import datetime, UTC
from typing import Optional

from sqlalchemy.orm import Session

from skillmarket import models


def get_user(db: Session, user_id: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.strip().lower()).first()


def create_user(
    db: Session,
    *,
    email: str,
    full_name: str,
    password_hash: str,
    email_verified: bool,
) -> models.User:
    db_user = models.User(
        email=email.strip().lower(),
        full_name=full_name.strip(),
        password_hash=password_hash,
        email_verified=email_verified,
        is_active=True,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def mark_email_verified(db: Session, user: models.User) -> models.User:
    user.email_verified = True
    db.commit()
    db.refresh(user)
    return user


def purge_expired_tokens(db: Session, now: Optional[datetime] = None) -> int:
    """Drop revocation rows whose token has expired anyway; caller commits."""
    cutoff = now or datetime.now(UTC)
    return (
        db.query(models.RevokedToken)
        .filter(models.RevokedToken.expires_at < cutoff)
        .delete(synchronize_session=False)
    )


def revoke_token(db: Session, *, jti: str, user_id: str, expires_at: datetime) -> models.RevokedToken:
    purge_expired_tokens(db)
    existing = db.query(models.RevokedToken).filter(models.RevokedToken.jti == jti).first()
    if existing:
        db.commit()
        return existing
    revoked = models.RevokedToken(jti=jti, user_id=user_id, expires_at=expires_at)
    db.add(revoked)
    db.commit()
    return revoked


def is_token_revoked(db: Session, jti: str) -> bool:
    return db.query(models.RevokedToken.jti).filter(models.RevokedToken.jti == jti).first() is not None
