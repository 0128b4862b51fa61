"""Bearer token issuing and checking.

A token names the account (``sub``) plus the email and display name shown to
the client; every service call still receives the id explicitly.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from jose import JWTError, jwt

from evermore.config import get_settings


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    display_name: str


class JWTService:
    def __init__(self) -> None:
        settings = get_settings()
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.lifetime = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

    def create_token(self, user_id: int, email: str, display_name: str) -> str:
        issued_at = datetime.utcnow()
        claims = {
            "sub": str(user_id),
            "email": email,
            "displayName": display_name,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> TokenClaims | None:
        """Claims of a well-signed, unexpired token whose subject is an account id; None otherwise."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

        subject = str(payload.get("sub", ""))
        if not subject.isdigit():
            return None
        return TokenClaims(
            user_id=int(subject),
            email=payload.get("email", ""),
            display_name=payload.get("displayName", ""),
        )


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService()
    return _jwt_service
