# auth.py
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from . import config

# Security scheme
security = HTTPBearer()


@dataclass(frozen=True)
class CurrentUser:
    id: int
    role: str = "User"

    @property
    def is_admin(self) -> bool:
        return self.role == config.ADMIN_ROLE


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> CurrentUser:
    """
    Verifies the bearer JWT and returns the caller's user id (sub) and role.
    Token issuance happens elsewhere; this only trusts what it can verify.
    """
    token = credentials.credentials
    secret = config.JWT_SECRET

    if not secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="JWT Secret not configured"
        )

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        options = {"verify_aud": config.JWT_AUDIENCE is not None}
        payload = jwt.decode(
            token,
            secret,
            algorithms=[config.JWT_ALGORITHM],
            audience=config.JWT_AUDIENCE,
            options=options,
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    subject = payload.get("sub")
    if subject is None:
        raise credentials_exception
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise credentials_exception

    return CurrentUser(id=user_id, role=payload.get("role") or "User")
