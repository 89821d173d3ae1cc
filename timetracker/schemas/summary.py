from datetime import date

from pydantic import BaseModel


class MonthSummary(BaseModel):
    key: str  # YYYY-MM
    label: str
    total_minutes: int
    total_label: str
    days: int
    avg_per_day: int


class SummaryResponse(BaseModel):
    total_minutes: int
    total_label: str
    total_hours: str
    total_days: int
    avg_per_day: int
    avg_per_week: int
    avg_per_month: int
    months: list[MonthSummary]
    max_month_minutes: int
    first_date: date
    last_date: date
