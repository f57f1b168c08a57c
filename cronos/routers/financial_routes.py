# cronos/routers/financial_routes.py

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from cronos.auth import get_current_user
from cronos.deps import get_repos, get_store, require_admin
from cronos.reports import dashboard, export_csv, export_filename, monthly_summary
from cronos.repositories import Repositories
from cronos.schemas import DashboardStats, FinancialSummary
from cronos.store import AppointmentStore

router = APIRouter(
    tags=["financial"],
)


def parse_month(month: Optional[str]) -> date:
    if month is None:
        return date.today().replace(day=1)
    try:
        return datetime.strptime(month, "%Y-%m").date()
    except ValueError:
        raise HTTPException(status_code=422, detail="month must look like YYYY-MM")


@router.get("/financial/summary", response_model=FinancialSummary)
def financial_summary(
    month: Optional[str] = None,
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    require_admin(current_user)
    return monthly_summary(repos.transactions.list(), parse_month(month))


@router.get("/financial/export")
def financial_export(
    month: Optional[str] = None,
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    require_admin(current_user)
    target = parse_month(month)
    summary = monthly_summary(repos.transactions.list(), target)
    return Response(
        content=export_csv(summary.transactions),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(target)}"'},
    )


@router.get("/dashboard", response_model=DashboardStats)
def get_dashboard(
    repos: Repositories = Depends(get_repos),
    store: AppointmentStore = Depends(get_store),
    current_user: dict = Depends(get_current_user),
):
    require_admin(current_user)
    return dashboard(store.list(), repos.clients.list(), now=store.clock())
