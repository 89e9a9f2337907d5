from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from skillmarket import models
from skillmarket.database import get_db
from skillmarket.schemas import (
    AuthResponse,
    LoginRequest,
    ResendVerificationRequest,
    SessionInfo,
    SignUpRequest,
    Token,
)
from skillmarket.services import auth_service
from skillmarket.utils.security import get_current_user, oauth2_scheme

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _raise_for_error(result: AuthResponse, status_code: int) -> AuthResponse:
    if result.error:
        raise HTTPException(status_code=status_code, detail=result.error)
    return result


# ===== SIGN UP =====

@router.post("/register", response_model=AuthResponse)
def register(user_data: SignUpRequest, db: Session = Depends(get_db)):
    """Create an account; returns a session unless email verification is pending."""
    result = auth_service.sign_up(db, user_data.email, user_data.password, user_data.full_name)
    return _raise_for_error(result, status.HTTP_400_BAD_REQUEST)


# ===== SIGN IN =====

@router.post("/login", response_model=AuthResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    result = auth_service.sign_in(db, credentials.email, credentials.password)
    return _raise_for_error(result, status.HTTP_401_UNAUTHORIZED)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """OAuth2 password flow (used by the interactive API docs)."""
    result = auth_service.sign_in(db, form_data.username, form_data.password)
    _raise_for_error(result, status.HTTP_401_UNAUTHORIZED)
    return Token(access_token=result.access_token, token_type=result.token_type, expires_at=result.expires_at)


# ===== SESSION =====

@router.post("/logout")
def logout(
    token: str = Depends(oauth2_scheme),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = auth_service.sign_out(db, token)
    _raise_for_error(result, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return {"message": "Signed out"}


@router.get("/session", response_model=SessionInfo)
def read_session(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
):
    session = auth_service.get_current_session(db, token)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if session.error:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=session.error)
    return session


# ===== EMAIL VERIFICATION =====

@router.post("/resend-verification")
def resend_verification(payload: ResendVerificationRequest, db: Session = Depends(get_db)):
    result = auth_service.resend_email_verification(db, payload.email)
    _raise_for_error(result, status.HTTP_400_BAD_REQUEST)
    return {"message": "If the address needs verification, a new link has been sent."}


@router.get("/callback", response_model=AuthResponse)
def verify_email_callback(token: str, db: Session = Depends(get_db)):
    """Target of the emailed verification link."""
    result = auth_service.verify_email(db, token)
    return _raise_for_error(result, status.HTTP_400_BAD_REQUEST)
