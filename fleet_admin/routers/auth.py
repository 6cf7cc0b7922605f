import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from fleet_admin.config import ALGORITHM

logger = logging.getLogger(__name__)

router = APIRouter()

ADMIN_ROLE = "administrator"

# auto_error is off so that FLEET_AUTH_DISABLED can let unauthenticated requests through
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


class AdminLogin(BaseModel):
    username: str
    password: str


class TokenData(BaseModel):
    username: Optional[str] = None
    role: Optional[str] = None


def create_access_token(data: dict, secret_key: str, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=15)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)
    return encoded_jwt


@router.post("/login", tags=["Authentication"])
async def login_admin(form_data: AdminLogin, request: Request):
    settings = request.app.state.settings
    username_ok = secrets.compare_digest(form_data.username.encode(), settings.admin_username.encode())
    password_ok = secrets.compare_digest(form_data.password.encode(), settings.admin_password.encode())
    if not (username_ok and password_ok):
        logger.warning(f"[Auth] Failed login attempt for user '{form_data.username}'")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"success": False, "error": "Invalid credentials"},
        )

    access_token_expires = timedelta(minutes=settings.access_token_expire_minutes)
    access_token = create_access_token(
        data={"sub": settings.admin_username, "role": ADMIN_ROLE},
        secret_key=settings.secret_key,
        expires_delta=access_token_expires,
    )
    logger.info(f"[Auth] Admin '{settings.admin_username}' logged in")
    return {
        "success": True,
        "user": {"username": settings.admin_username, "role": ADMIN_ROLE},
        "token": access_token,
        "token_type": "bearer",
    }


# Dependency guarding every /api resource router
async def get_current_admin(request: Request, token: Optional[str] = Depends(oauth2_scheme)):
    settings = request.app.state.settings
    if settings.auth_disabled:
        return {"username": settings.admin_username, "role": ADMIN_ROLE}

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise credentials_exception
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        token_data = TokenData(username=payload.get("sub"), role=payload.get("role"))
    except JWTError:
        raise credentials_exception

    if token_data.username != settings.admin_username or token_data.role != ADMIN_ROLE:
        raise credentials_exception
    return {"username": token_data.username, "role": token_data.role}
