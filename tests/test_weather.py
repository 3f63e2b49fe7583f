"""Tests for the weather client and the coordinate lookups."""
from datetime import datetime
from urllib.parse import parse_qs, urlsplit

import pytest

from core.errors import ApiFormatError, ApiResponseError, ApiTransportError
from core.models import ForecastWindow, GridCell
from core.weather import (
    WeatherClient,
    current_weather,
    mock_rows,
    parse_item,
    short_term_forecast,
    village_forecast,
    weather_for_locations,
)
from tests.helpers import FakeResponse, envelope

SEOUL = (37.5665, 126.9780)
BUSAN = (35.1796, 129.0756)
JEJU = (33.4996, 126.5312)


def _ncst_row(category, value, base_time="1400"):
    return {"baseDate": "20261016", "baseTime": base_time, "category": category,
            "nx": 60, "ny": 127, "obsrValue": value}


# -----------------------------------------------------------------------------
# Row parsing
# -----------------------------------------------------------------------------
def test_parse_observation_row():
    item = parse_item(_ncst_row("T1H", "12.3"))
    assert item.category == "T1H"
    assert item.value == "12.3"
    assert (item.nx, item.ny) == (60, 127)
    assert item.fcst_date is None


def test_parse_forecast_row():
    item = parse_item({"baseDate": "20261016", "baseTime": "1430", "category": "SKY",
                       "fcstDate": "20261016", "fcstTime": "1500", "fcstValue": "3",
                       "nx": "60", "ny": "127"})
    assert item.value == "3"
    assert (item.fcst_date, item.fcst_time) == ("20261016", "1500")
    assert (item.nx, item.ny) == (60, 127)


# -----------------------------------------------------------------------------
# Live mode (patched transport)
# -----------------------------------------------------------------------------
def test_current_weather_live_request(live_config, fake_urlopen):
    fake_urlopen["payloads"].append(envelope([
        _ncst_row("T1H", "18.2"),
        _ncst_row("REH", "64"),
        _ncst_row("PTY", "0"),
        _ncst_row("UUU", "-1.2"),
    ]))
    observation = current_weather(WeatherClient(live_config), *SEOUL,
                                  now=datetime(2026, 10, 16, 14, 20))

    assert observation.temperature == 18.2
    assert observation.humidity == 64
    assert observation.precipitation_type == "None"
    assert observation.sky_condition is None

    path, params, timeout = fake_urlopen["requests"][0]
    assert path.endswith("/VilageFcstInfoService_2.0/getUltraSrtNcst")
    assert params["serviceKey"] == "test-key"
    assert params["base_date"] == "20261016"
    assert params["base_time"] == "1400"
    assert (params["nx"], params["ny"]) == ("60", "127")
    assert params["dataType"] == "JSON"
    assert params["numOfRows"] == "1000"
    assert timeout == 3.0


def test_short_term_forecast_live_uses_fcst_window(live_config, fake_urlopen):
    fake_urlopen["payloads"].append(envelope([]))
    slots = short_term_forecast(WeatherClient(live_config), *BUSAN,
                                now=datetime(2026, 10, 16, 0, 30))
    assert slots == []
    path, params, _ = fake_urlopen["requests"][0]
    assert path.endswith("/getUltraSrtFcst")
    assert (params["base_date"], params["base_time"]) == ("20261015", "2330")
    assert (params["nx"], params["ny"]) == ("98", "76")


def test_village_forecast_live_uses_village_window(live_config, fake_urlopen):
    fake_urlopen["payloads"].append(envelope([
        {"baseDate": "20261015", "baseTime": "2300", "category": "POP",
         "fcstDate": "20261016", "fcstTime": "0200", "fcstValue": "30", "nx": 53, "ny": 38},
    ]))
    slots = village_forecast(WeatherClient(live_config), *JEJU,
                             now=datetime(2026, 10, 16, 2, 5))
    assert slots[0].observation.precipitation_probability == 30
    _, params, _ = fake_urlopen["requests"][0]
    assert (params["base_date"], params["base_time"]) == ("20261015", "2300")


def test_live_error_code_raises(live_config, fake_urlopen):
    fake_urlopen["payloads"].append(envelope([], result_code="03", result_msg="NO_DATA"))
    with pytest.raises(ApiResponseError):
        current_weather(WeatherClient(live_config), *SEOUL)


# -----------------------------------------------------------------------------
# Mock mode
# -----------------------------------------------------------------------------
def test_mock_current_weather_is_deterministic(mock_config):
    client = WeatherClient(mock_config)
    now = datetime(2026, 10, 16, 14, 20)
    first = current_weather(client, *SEOUL, now=now)
    assert first == current_weather(client, *SEOUL, now=now)
    assert first.temperature is not None
    assert first.humidity is not None
    assert first.wind_speed is not None
    # The observation endpoint never reports sky or rain probability.
    assert first.sky_condition is None
    assert first.precipitation_probability is None


def test_mock_short_term_forecast_slots(mock_config):
    slots = short_term_forecast(WeatherClient(mock_config), *SEOUL,
                                now=datetime(2026, 10, 16, 14, 50))
    assert [s.fcst_time for s in slots] == ["1500", "1600", "1700", "1800", "1900", "2000"]
    assert all(s.observation.sky_condition in ("Clear", "Partly Cloudy", "Cloudy") for s in slots)


def test_mock_village_forecast_crosses_midnight(mock_config):
    slots = village_forecast(WeatherClient(mock_config), *SEOUL,
                             now=datetime(2026, 10, 16, 23, 15))
    assert len(slots) == 24
    assert (slots[0].fcst_date, slots[0].fcst_time) == ("20261017", "0000")
    assert all(s.observation.precipitation_probability is not None for s in slots)


def test_mock_rows_echo_window_and_grid():
    rows = mock_rows("getUltraSrtNcst", GridCell(60, 127), ForecastWindow("20261016", "1400"))
    assert {r["category"] for r in rows} == {"T1H", "RN1", "REH", "PTY", "VEC", "WSD"}
    assert all((r["nx"], r["ny"], r["baseTime"]) == (60, 127, "1400") for r in rows)


# -----------------------------------------------------------------------------
# Many locations
# -----------------------------------------------------------------------------
def test_weather_for_locations_mock(mock_config):
    result = weather_for_locations(
        WeatherClient(mock_config),
        [("seoul", *SEOUL), ("busan", *BUSAN), ("jeju", *JEJU)],
        now=datetime(2026, 10, 16, 14, 20),
    )
    assert set(result) == {"seoul", "busan", "jeju"}


def test_weather_for_locations_empty(mock_config):
    assert weather_for_locations(WeatherClient(mock_config), []) == {}


class _FlakyClient:
    """Fails for Busan's grid cell, returns nothing for Jeju's."""

    def __init__(self):
        self.windows = set()

    def ultra_srt_ncst(self, grid, window):
        self.windows.add(window)
        if grid == GridCell(98, 76):
            raise ApiTransportError("timed out")
        if grid == GridCell(53, 38):
            return []
        return [parse_item(_ncst_row("T1H", "15.0"))]


def test_weather_for_locations_skips_failures():
    client = _FlakyClient()
    result = weather_for_locations(
        client,
        [("seoul", *SEOUL), ("busan", *BUSAN), ("jeju", *JEJU)],
        now=datetime(2026, 10, 16, 14, 20),
    )
    assert list(result) == ["seoul"]
    assert result["seoul"].temperature == 15.0
    assert client.windows == {ForecastWindow("20261016", "1400")}


def test_parse_item_rejects_malformed_grid():
    with pytest.raises(ApiFormatError):
        parse_item({**_ncst_row("T1H", "12.3"), "nx": "sixty"})
    with pytest.raises(ApiFormatError):
        parse_item({**_ncst_row("T1H", "12.3"), "ny": None})


def test_weather_for_locations_survives_malformed_responses(live_config, monkeypatch):
    # Requests run on worker threads, so answers are keyed on the grid
    # cell rather than queued in order.
    answers = {
        "60": envelope([_ncst_row("T1H", "15.0")]),
        "98": b"\xff\xfe",
        "53": envelope([{**_ncst_row("T1H", "20.0"), "nx": "?"}]),
    }

    def _urlopen(req, timeout=None):
        params = {k: v[0] for k, v in parse_qs(urlsplit(req.full_url).query).items()}
        return FakeResponse(answers[params["nx"]])

    monkeypatch.setattr("core.http.urlopen", _urlopen)
    result = weather_for_locations(
        WeatherClient(live_config),
        [("seoul", *SEOUL), ("busan", *BUSAN), ("jeju", *JEJU)],
        now=datetime(2026, 10, 16, 14, 20),
    )
    assert list(result) == ["seoul"]
    assert result["seoul"].temperature == 15.0
