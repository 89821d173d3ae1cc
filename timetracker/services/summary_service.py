from collections import defaultdict
from collections.abc import Iterable
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.clock import (
    MONTH_NAMES,
    format_clock_range,
    format_decimal_hours,
    monday_of,
    round_half_up,
)
from timetracker.schemas.summary import MonthSummary, SummaryResponse
from timetracker.services import segment_service
from timetracker.services.aggregation_service import segment_minutes


def daily_totals(segments: Iterable) -> dict[str, int]:
    """Minutes per date over closed segments.

    Segments ending at or before their start are treated as invalid and
    skipped rather than clamped.
    """
    totals: dict[str, int] = defaultdict(int)
    for segment in segments:
        minutes = segment_minutes(segment)
        if minutes is None or minutes <= 0:
            continue
        totals[segment.date] += minutes
    return dict(totals)


def compute_summary(segments: Iterable) -> SummaryResponse | None:
    totals = daily_totals(segments)
    if not totals:
        return None

    dates = sorted(totals)
    total_minutes = sum(totals.values())
    total_days = len(dates)

    weeks = {monday_of(date.fromisoformat(d)) for d in dates}

    month_totals: dict[str, int] = defaultdict(int)
    month_days: dict[str, int] = defaultdict(int)
    for d in dates:
        key = d[:7]
        month_totals[key] += totals[d]
        month_days[key] += 1

    months = []
    for key in sorted(month_totals):
        year, month = (int(part) for part in key.split("-"))
        months.append(
            MonthSummary(
                key=key,
                label=f"{MONTH_NAMES[month - 1]} {year}",
                total_minutes=month_totals[key],
                total_label=format_clock_range(month_totals[key]),
                days=month_days[key],
                avg_per_day=round_half_up(month_totals[key] / month_days[key]),
            )
        )

    return SummaryResponse(
        total_minutes=total_minutes,
        total_label=format_clock_range(total_minutes),
        total_hours=format_decimal_hours(total_minutes),
        total_days=total_days,
        avg_per_day=round_half_up(total_minutes / total_days),
        avg_per_week=round_half_up(total_minutes / len(weeks)),
        avg_per_month=round_half_up(total_minutes / len(months)),
        months=months,
        max_month_minutes=max([m.total_minutes for m in months] + [1]),
        first_date=date.fromisoformat(dates[0]),
        last_date=date.fromisoformat(dates[-1]),
    )


async def get_summary(db: AsyncSession) -> SummaryResponse | None:
    segments = await segment_service.list_closed(db)
    return compute_summary(segments)
