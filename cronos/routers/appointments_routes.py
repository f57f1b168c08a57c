# cronos/routers/appointments_routes.py

from datetime import datetime, date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from cronos.auth import get_current_user
from cronos.deps import get_store
from cronos.schemas import Appointment, AppointmentStatus, SaveResult
from cronos.store import AppointmentStore

router = APIRouter(
    prefix="/appointments",
    tags=["appointments"],
)


@router.get("", response_model=List[Appointment])
def list_appointments(
    status: Optional[str] = "all",
    on_date: Optional[date] = None,
    provider_id: Optional[str] = None,
    store: AppointmentStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
):
    if status not in {"all", "live"} | {s.value for s in AppointmentStatus}:
        raise HTTPException(status_code=422, detail="status must be 'all', 'live' or an appointment status")

    appts = store.list()
    if status == "live":
        appts = [a for a in appts if a.status != AppointmentStatus.cancelled]
    elif status != "all":
        appts = [a for a in appts if a.status.value == status]
    if on_date is not None:
        appts = [a for a in appts if a.start.date() == on_date]
    if provider_id is not None:
        appts = [a for a in appts if a.provider_id == provider_id]

    return sorted(appts, key=lambda a: a.start.timestamp())


@router.get("/check-conflict")
def check_conflict(
    start: datetime,
    end: datetime,
    provider_id: Optional[str] = None,
    exclude_id: Optional[str] = None,
    store: AppointmentStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
):
    return {"conflict": store.has_conflict(start, end, provider_id, exclude_id)}


@router.get("/{appt_id}", response_model=Appointment)
def get_appointment(
    appt_id: str,
    store: AppointmentStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
):
    return store.get(appt_id)


@router.post("", response_model=SaveResult, status_code=201)
def create_appointment(
    appt: Appointment,
    store: AppointmentStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
):
    return store.save(appt)


@router.put("/{appt_id}", response_model=SaveResult)
def save_appointment(
    appt_id: str,
    appt: Appointment,
    store: AppointmentStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
):
    # path id wins over whatever the body carries
    appt.id = appt_id
    return store.save(appt)


@router.patch("/{appt_id}/cancel", response_model=Appointment)
def cancel_appointment(
    appt_id: str,
    store: AppointmentStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
):
    return store.cancel(appt_id)


@router.delete("/{appt_id}", status_code=204)
def delete_appointment(
    appt_id: str,
    store: AppointmentStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
):
    store.delete(appt_id)
    return Response(status_code=204)
