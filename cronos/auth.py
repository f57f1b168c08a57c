# cronos/auth.py

from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError

from .config import get_settings
from .schemas import Role, UserPublic

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


def create_access_token(data: dict, expires_minutes: int = None) -> str:
    settings = get_settings()
    if expires_minutes is None:
        expires_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    to_encode = data.copy()
    to_encode["exp"] = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def select_role(email: str) -> Role:
    # role comes from the email, there is no user table
    if "master" in email:
        return Role.master_admin
    if "admin" in email:
        return Role.company_admin
    return Role.client


DISPLAY_NAMES = {
    Role.master_admin: "Master Admin",
    Role.company_admin: "Admin da Empresa",
    Role.client: "Cliente Demo",
}


def login_user(email: str, password: str) -> UserPublic:
    if len(password) < 3:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    role = select_role(email)
    name = DISPLAY_NAMES[role]
    return UserPublic(
        id=email,
        name=name,
        email=email,
        role=role,
        avatar=f"https://ui-avatars.com/api/?name={name.replace(' ', '+')}&background=random",
    )


def get_current_user(token: str = Depends(oauth2_scheme)) -> dict:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        email = payload.get("sub")
        role = payload.get("role")
        if email is None or role not in {r.value for r in Role}:
            raise HTTPException(
                status_code=401,
                detail="Invalid token",
                headers={"WWW-Authenticate": "Bearer"},
            )
    except JWTError:
        raise HTTPException(
            status_code=401,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {
        "id": email,
        "email": email,
        "name": payload.get("name", email),
        "role": role,
    }
