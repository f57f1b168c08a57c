# cronos/routers/assistant_routes.py

from datetime import datetime

from fastapi import APIRouter, Depends

from cronos.assistant import SuggestionProvider, draft_from
from cronos.auth import get_current_user
from cronos.deps import get_assistant, get_repos, get_store
from cronos.errors import NotFoundError
from cronos.logging_config import get_logger
from cronos.repositories import Repositories
from cronos.schemas import ReminderResponse, SuggestRequest, SuggestResponse
from cronos.store import AppointmentStore

logger = get_logger(__name__)

router = APIRouter(
    prefix="/assistant",
    tags=["assistant"],
)


@router.post("/suggest", response_model=SuggestResponse)
def suggest(
    req: SuggestRequest,
    assistant: SuggestionProvider = Depends(get_assistant),
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    if not assistant.available:
        return {"available": False}

    extracted = assistant.suggest(req.text, req.reference_time or datetime.now())
    if extracted is None:
        logger.info("assistant_no_suggestion")
        return {"available": True}

    # the form defaults to the first active provider
    providers = [p for p in repos.providers.list() if p.active]
    draft = draft_from(extracted, providers[0].id if providers else None, repos.clients.list())
    return {"available": True, "draft": draft, "extracted": extracted}


@router.get("/reminder/{appt_id}", response_model=ReminderResponse)
def reminder(
    appt_id: str,
    assistant: SuggestionProvider = Depends(get_assistant),
    repos: Repositories = Depends(get_repos),
    store: AppointmentStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
):
    appt = store.get(appt_id)
    try:
        client_name = repos.clients.get(appt.client_id).name
    except NotFoundError:
        client_name = "Cliente"
    message = assistant.reminder(client_name, appt.start.strftime("%H:%M"), appt.title)
    return {"appointment_id": appt.id, "message": message}
