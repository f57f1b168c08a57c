# cronos/deps.py

from fastapi import HTTPException, Request

from .schemas import ADMIN_ROLES


def require_role(user: dict, *roles):
    allowed = {getattr(r, "value", r) for r in roles}
    if user["role"] not in allowed:
        raise HTTPException(status_code=403, detail="Forbidden")


def require_admin(user: dict):
    require_role(user, *ADMIN_ROLES)


def get_repos(request: Request):
    return request.app.state.repos


def get_store(request: Request):
    return request.app.state.store


def get_assistant(request: Request):
    return request.app.state.assistant
