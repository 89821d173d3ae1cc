"""Per-day and per-week totals derived from time segments.

Segments are anything with ``date``, ``seg_start`` and ``seg_end``
attributes (normally ``TimeSegment`` rows) and are taken in stored order.
Closed-segment time is counted here; live time for a running session is
passed in by the caller and added on top.
"""
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime

from timetracker.clock import (
    DAY_NAMES,
    display_clock_time,
    format_clock_range,
    format_elapsed_clock,
    format_week_range,
    parse_clock_time,
    week_dates,
)
from timetracker.models.segment import TimeSegment
from timetracker.schemas.segment import SegmentResponse
from timetracker.schemas.views import BreakEntry, DaySummary, DayView, WeekRollup, WeekView


def segment_minutes(segment) -> int | None:
    """Duration of a closed segment in minutes, None while open."""
    if not segment.seg_start or not segment.seg_end:
        return None
    return parse_clock_time(segment.seg_end) - parse_clock_time(segment.seg_start)


def day_total_minutes(segments: Iterable) -> int:
    total = 0
    for segment in segments:
        minutes = segment_minutes(segment)
        if minutes is not None:
            total += minutes
    return max(total, 0)


def day_breaks(segments: Sequence) -> list[BreakEntry]:
    breaks = []
    for previous, current in zip(segments, segments[1:]):
        if previous.seg_end and current.seg_start:
            duration = parse_clock_time(current.seg_start) - parse_clock_time(previous.seg_end)
            breaks.append(
                BreakEntry(
                    start=previous.seg_end,
                    end=current.seg_start,
                    duration_minutes=duration,
                    label=format_clock_range(duration),
                )
            )
    return breaks


def group_by_date(segments: Iterable) -> dict[str, list]:
    grouped: dict[str, list] = defaultdict(list)
    for segment in segments:
        grouped[segment.date].append(segment)
    return dict(grouped)


def week_rollup(monday: date, segments_by_date: Mapping[str, Sequence]) -> WeekRollup:
    total = 0
    days_worked = 0
    for day in week_dates(monday):
        segments = segments_by_date.get(day.isoformat())
        if segments:
            total += day_total_minutes(segments)
            days_worked += 1
    return WeekRollup(total_minutes=total, days_worked=days_worked)


def live_seconds(open_since: datetime | None, now: datetime) -> int:
    if open_since is None:
        return 0
    return max(int((now - open_since).total_seconds()), 0)


def is_out_of_order(segments: Sequence) -> bool:
    if any((segment_minutes(s) or 0) < 0 for s in segments):
        return True
    return any(b.duration_minutes < 0 for b in day_breaks(segments))


def build_day_view(
    day: date,
    segments: Sequence[TimeSegment],
    today: date,
    running_seconds: int = 0,
    use_12h: bool = False,
) -> DayView:
    """Assemble the daily log.

    ``running_seconds`` is the live time of the open segment and only
    counts when ``day`` is today.
    """
    is_today = day == today
    live = running_seconds if is_today else 0
    total = day_total_minutes(segments)

    breaks = [
        b.model_copy(update={
            "start": display_clock_time(b.start, use_12h),
            "end": display_clock_time(b.end, use_12h),
        })
        for b in day_breaks(segments)
    ]

    start_time = segments[0].seg_start if segments else None
    all_closed = bool(segments) and all(s.seg_end for s in segments)
    end_time = segments[-1].seg_end if all_closed else None

    return DayView(
        date=day,
        is_today=is_today,
        segments=[SegmentResponse.model_validate(s) for s in segments],
        start_time=display_clock_time(start_time, use_12h),
        end_time=display_clock_time(end_time, use_12h),
        breaks=breaks,
        total_minutes=total,
        total_label=format_clock_range(total),
        live_seconds=live,
        elapsed=format_elapsed_clock(total * 60 + live),
        out_of_order=is_out_of_order(segments),
    )


def build_week_view(
    monday: date,
    segments: Iterable[TimeSegment],
    today: date,
    running_seconds: int = 0,
) -> WeekView:
    by_date = group_by_date(segments)
    rollup = week_rollup(monday, by_date)
    live_minutes = running_seconds // 60

    days = []
    for index, day in enumerate(week_dates(monday)):
        day_segments = by_date.get(day.isoformat(), [])
        minutes = day_total_minutes(day_segments)
        if day == today:
            minutes += live_minutes
        days.append(
            DaySummary(
                date=day,
                day_name=DAY_NAMES[index],
                worked=bool(day_segments),
                minutes=minutes,
                label=format_clock_range(minutes) if day_segments else "—",
                is_today=day == today,
            )
        )

    total = rollup.total_minutes
    if today in week_dates(monday):
        total += live_minutes

    return WeekView(
        monday=monday,
        range_label=format_week_range(monday),
        days=days,
        total_minutes=total,
        total_label=format_clock_range(total),
        days_worked=rollup.days_worked,
    )
