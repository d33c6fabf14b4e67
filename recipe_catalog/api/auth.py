# api/auth.py
# Resolves the caller from the bearer token and applies role gates.
# Tokens are issued by an external identity provider sharing SECRET_KEY.

import logging
from datetime import timedelta, datetime, timezone

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from recipe_catalog import schemas
from recipe_catalog.core.config import settings

bearer_scheme = HTTPBearer(auto_error=False)

# Get a logger instance
logger = logging.getLogger(__name__)


def create_access_token(data: dict, expires_delta: timedelta | None = None):
    """
    Creates a new JWT access token.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> schemas.Caller:
    """
    Decodes the JWT token to get the current caller.
    This function is a dependency that can be used to protect endpoints.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        logger.warning("Missing Auth Token")
        raise credentials_exception
    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        logger.error("Invalid Auth Token")
        raise credentials_exception

    user_id = payload.get("sub")
    if user_id is None:
        logger.error("Token has no subject")
        raise credentials_exception

    caller = schemas.Caller(
        id=user_id,
        email=payload.get("email"),
        name=payload.get("name"),
        roles=payload.get("roles") or ["user"],
    )
    # Picked up by the structured logging middleware
    request.state.user = caller
    logger.debug(f"Authenticated caller: {caller.id}")
    return caller


def require_roles(*roles: str):
    """
    Dependency factory: the caller must hold at least one of `roles`.
    """
    async def checker(current_user: schemas.Caller = Depends(get_current_user)) -> schemas.Caller:
        if not any(role in current_user.roles for role in roles):
            logger.warning(f"Caller {current_user.id} lacks any of roles {roles}")
            raise HTTPException(status_code=403, detail="Not authorized")
        return current_user

    return checker
