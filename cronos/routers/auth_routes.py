# cronos/routers/auth_routes.py

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from cronos.auth import create_access_token, get_current_user, login_user
from cronos.logging_config import get_logger
from cronos.schemas import Token, UserPublic

logger = get_logger(__name__)

router = APIRouter(
    tags=["auth"],
)


@router.post("/auth/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends()):
    # Swagger OAuth2 "password" flow uses "username" field
    user = login_user(form_data.username, form_data.password)
    token = create_access_token({"sub": user.email, "role": user.role.value, "name": user.name})
    logger.info("user_logged_in", email=user.email, role=user.role.value)
    return {"access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=UserPublic)
def me(current_user: dict = Depends(get_current_user)):
    return {
        "id": current_user["id"],
        "name": current_user["name"],
        "email": current_user["email"],
        "role": current_user["role"],
    }
