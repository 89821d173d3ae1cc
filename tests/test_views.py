import pytest


async def _segment(client, date: str, start: str, end: str | None = None) -> None:
    body = {"date": date, "seg_start": start}
    if end is not None:
        body["seg_end"] = end
    response = await client.post("/segments", json=body)
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_day_view_empty(client):
    response = await client.get("/days/2024-01-02")
    assert response.status_code == 200
    data = response.json()
    assert data["is_today"] is False
    assert data["segments"] == []
    assert data["breaks"] == []
    assert data["total_minutes"] == 0
    assert data["total_label"] == "0h 0m"


@pytest.mark.asyncio
async def test_day_view_with_break(client):
    await _segment(client, "2024-01-02", "09:00", "12:00")
    await _segment(client, "2024-01-02", "13:00", "17:00")

    data = (await client.get("/days/2024-01-02")).json()
    assert data["start_time"] == "09:00"
    assert data["end_time"] == "17:00"
    assert data["total_minutes"] == 420
    assert data["total_label"] == "7h 0m"
    assert data["breaks"] == [
        {"start": "12:00", "end": "13:00", "duration_minutes": 60, "label": "1h 0m"},
    ]
    assert data["out_of_order"] is False


@pytest.mark.asyncio
async def test_day_view_12h_format(client):
    await _segment(client, "2024-01-02", "09:00", "12:00")
    await _segment(client, "2024-01-02", "13:00", "17:00")

    data = (await client.get("/days/2024-01-02?format=12h")).json()
    assert data["start_time"] == "9:00 AM"
    assert data["end_time"] == "5:00 PM"
    assert data["breaks"][0]["end"] == "1:00 PM"


@pytest.mark.asyncio
async def test_day_view_rejects_unknown_format(client):
    response = await client.get("/days/2024-01-02?format=ampm")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_day_view_flags_out_of_order_edits(client):
    await _segment(client, "2024-01-02", "09:00", "12:00")
    await _segment(client, "2024-01-02", "11:00", "13:00")

    data = (await client.get("/days/2024-01-02")).json()
    assert data["breaks"][0]["duration_minutes"] == -60
    assert data["out_of_order"] is True


@pytest.mark.asyncio
async def test_today_view_includes_live_time(client, clock):
    await _segment(client, "2024-01-03", "07:00", "08:00")
    # A closed segment without a Stop leaves the day paused
    await client.post("/tracker/resume")
    clock.advance(minutes=30)

    data = (await client.get("/days/2024-01-03")).json()
    assert data["is_today"] is True
    assert data["end_time"] is None
    assert data["total_minutes"] == 60
    assert data["live_seconds"] == 1800
    assert data["elapsed"] == "01:30:00"


@pytest.mark.asyncio
async def test_week_view(client, clock):
    await _segment(client, "2024-01-01", "09:00", "12:00")
    await _segment(client, "2024-01-01", "13:00", "17:00")
    await _segment(client, "2024-01-02", "10:00", "10:00")
    await client.post("/tracker/start")
    clock.advance(hours=1)

    response = await client.get("/weeks/2024-01-04")
    assert response.status_code == 200
    data = response.json()
    assert data["monday"] == "2024-01-01"
    assert data["range_label"] == "Jan 1 – Jan 7"
    assert len(data["days"]) == 7
    assert data["days_worked"] == 3
    assert data["days"][0]["minutes"] == 420
    assert data["days"][1]["worked"] is True
    assert data["days"][1]["minutes"] == 0
    assert data["days"][2]["is_today"] is True
    assert data["days"][2]["minutes"] == 60
    assert data["days"][6]["worked"] is False
    assert data["total_minutes"] == 480
    assert data["total_label"] == "8h 0m"


@pytest.mark.asyncio
async def test_week_view_empty(client):
    data = (await client.get("/weeks/2023-12-25")).json()
    assert data["total_minutes"] == 0
    assert data["days_worked"] == 0
    assert all(not day["worked"] for day in data["days"])
