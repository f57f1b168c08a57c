# cronos/reports.py

import csv
import io
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable, List

from .schemas import (
    Appointment, AppointmentStatus, Client, DashboardStats, DayCount,
    FinancialSummary, Transaction, TransactionStatus, TransactionType,
)

CSV_HEADER = ["Data", "Descrição", "Tipo", "Valor", "Método", "Status"]


def month_key(value: date) -> str:
    return value.strftime("%Y-%m")


def transactions_in_month(transactions: Iterable[Transaction], month: date) -> List[Transaction]:
    key = month_key(month)
    return [t for t in transactions if month_key(t.date) == key]


def monthly_summary(transactions: Iterable[Transaction], month: date) -> FinancialSummary:
    txs = sorted(transactions_in_month(transactions, month), key=lambda t: t.date.timestamp())

    income = sum(t.amount for t in txs if t.type == TransactionType.income and t.status == TransactionStatus.paid)
    expense = sum(t.amount for t in txs if t.type == TransactionType.expense and t.status == TransactionStatus.paid)
    pending = sum(t.amount for t in txs if t.status == TransactionStatus.pending)

    by_method = defaultdict(float)
    for t in txs:
        method = t.payment_method.value if t.payment_method else "other"
        by_method[method] += t.amount

    return FinancialSummary(
        month=month_key(month),
        income=income,
        expense=expense,
        pending=pending,
        balance=income - expense,
        by_payment_method=dict(by_method),
        transactions=txs,
    )


def export_csv(transactions: Iterable[Transaction]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for t in transactions:
        writer.writerow([
            t.date.strftime("%d/%m/%Y"),
            t.description,
            t.type.value,
            f"{t.amount:g}",
            t.payment_method.value if t.payment_method else "-",
            t.status.value,
        ])
    return buf.getvalue()


def export_filename(month: date) -> str:
    return f"extrato_{month.strftime('%m_%Y')}.csv"


def dashboard(
    appointments: Iterable[Appointment],
    clients: Iterable[Client],
    now: datetime,
    upcoming_limit: int = 5,
    days_ahead: int = 7,
) -> DashboardStats:
    appts = list(appointments)
    today = now.date()

    # today's count includes cancelled bookings, the rest do not
    today_count = sum(1 for a in appts if a.start.date() == today)

    live = [a for a in appts if a.status != AppointmentStatus.cancelled]
    upcoming = sorted(
        (a for a in live if a.start.timestamp() >= now.timestamp()),
        key=lambda a: a.start.timestamp(),
    )[:upcoming_limit]

    next_days = []
    for offset in range(days_ahead):
        day = today + timedelta(days=offset)
        next_days.append(DayCount(date=day, count=sum(1 for a in live if a.start.date() == day)))

    return DashboardStats(
        today_count=today_count,
        total_clients=len(list(clients)),
        upcoming=upcoming,
        next_days=next_days,
    )
