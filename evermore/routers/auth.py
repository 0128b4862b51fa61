"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from evermore.database import get_db
from evermore.dependencies import CurrentUser, get_current_user
from evermore.rate_limit import limiter
from evermore.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from evermore.services.auth import AuthResult, get_auth_service
from evermore.services.jwt import get_jwt_service

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


def _token_response(result: AuthResult) -> TokenResponse:
    token = get_jwt_service().create_token(
        user_id=result.user_id,  # type: ignore[arg-type]
        email=result.email,  # type: ignore[arg-type]
        display_name=result.display_name,  # type: ignore[arg-type]
    )
    return TokenResponse(token=token, email=result.email, display_name=result.display_name)  # type: ignore[arg-type]


@router.post("/register", response_model=TokenResponse)
@limiter.limit("5/minute")
def register(request: Request, body: RegisterRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Register a new user account."""
    result = get_auth_service().register(db, body.email, body.password, body.display_name)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)
    return _token_response(result)


@router.post("/login", response_model=TokenResponse)
@limiter.limit("10/minute")
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Authenticate and receive a JWT token."""
    result = get_auth_service().authenticate(db, body.email, body.password)
    if not result.success:
        raise HTTPException(status_code=401, detail=result.error)
    return _token_response(result)


@router.get("/verify")
def verify_token(token: str) -> dict:
    """Verify a JWT token and return its payload."""
    claims = get_jwt_service().decode_token(token)
    if claims is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return {
        "valid": True,
        "user_id": claims.user_id,
        "email": claims.email,
        "display_name": claims.display_name,
    }


@router.get("/me", response_model=UserResponse)
def current_user(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)) -> UserResponse:
    """Return the signed-in user's account."""
    account = get_auth_service().get_user(db, user.user_id)
    if not account:
        raise HTTPException(status_code=401, detail="Account no longer exists")
    return UserResponse.model_validate(account)
