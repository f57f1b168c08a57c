# cronos/routers/availability_routes.py

from datetime import date
from typing import Dict, List

from fastapi import APIRouter, Depends, Response

from cronos.auth import get_current_user
from cronos.availability import slot_starts
from cronos.deps import get_repos, require_admin
from cronos.repositories import Repositories
from cronos.schemas import DayException, DaySchedule, SlotsResponse

router = APIRouter(
    prefix="/availability",
    tags=["availability"],
)


@router.get("/week", response_model=Dict[str, DaySchedule])
def get_week(
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    require_admin(current_user)
    return repos.availability.get_week()


@router.put("/week", response_model=Dict[str, DaySchedule])
def save_week(
    week: Dict[str, DaySchedule],
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    require_admin(current_user)
    return repos.availability.save_week(week)


@router.get("/resolve/{day}", response_model=DaySchedule)
def resolve_day(
    day: date,
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    return repos.availability.resolve(day)


@router.get("/slots/{day}", response_model=SlotsResponse)
def day_slots(
    day: date,
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    schedule = repos.availability.resolve(day)
    return {
        "date": day,
        "active": schedule.active,
        "interval_minutes": schedule.interval_minutes,
        "available_starts": slot_starts(schedule),
    }


@router.get("/exceptions", response_model=List[DayException])
def list_exceptions(
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    require_admin(current_user)
    return sorted(repos.availability.list_exceptions(), key=lambda e: e.date)


@router.get("/exceptions/{day}/seed", response_model=DaySchedule)
def exception_seed(
    day: date,
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    require_admin(current_user)
    return repos.availability.exception_seed(day)


@router.put("/exceptions/{day}", response_model=DayException)
def save_exception(
    day: date,
    schedule: DaySchedule,
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    require_admin(current_user)
    return repos.availability.save_exception(DayException(date=day, schedule=schedule))


@router.delete("/exceptions/{day}", status_code=204)
def delete_exception(
    day: date,
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    require_admin(current_user)
    repos.availability.delete_exception(day)
    return Response(status_code=204)
