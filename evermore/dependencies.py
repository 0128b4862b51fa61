"""Authentication dependencies for FastAPI routes."""

from dataclasses import dataclass

from fastapi import HTTPException, Request

from evermore.services.jwt import get_jwt_service


@dataclass
class CurrentUser:
    """Authenticated user context, passed explicitly into every service call as ``user_id``."""

    user_id: int
    email: str
    display_name: str


def get_current_user(request: Request) -> CurrentUser:
    """Extract and validate user from the Bearer token. Raises 401 if invalid."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")

    claims = get_jwt_service().decode_token(auth_header[7:])
    if claims is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return CurrentUser(user_id=claims.user_id, email=claims.email, display_name=claims.display_name)
