"""Tests for the photo contest award client."""
import pytest

from core.errors import ApiResponseError
from core.models import CodeName
from core.photo_award import (
    PhotoAwardClient,
    format_film_date,
    parse_award,
    parse_photo_award,
)
from tests.helpers import envelope


def test_parse_award_splits_category_and_rank():
    assert parse_award("스마트폰 부문 [입선]") == ("스마트폰 부문", "입선")
    assert parse_award("일반 부문[대상]") == ("일반 부문", "대상")
    assert parse_award("특별상") == ("특별상", "")
    assert parse_award("") == ("", "")


def test_format_film_date():
    assert format_film_date("202507") == "2025-07"
    assert format_film_date("2025") == "2025"
    assert format_film_date("") == ""


def test_parse_photo_award_row():
    award = parse_photo_award({
        "contentId": 3000102, "koTitle": "해운대의 아침", "enTitle": "Morning at Haeundae",
        "lDongRegnCd": "26", "koFilmst": "부산 해운대구", "enFilmst": "Haeundae, Busan",
        "filmDay": "202507", "koCmanNm": "박민준", "koWnprzDiz": "스마트폰 부문 [입선]",
        "koKeyWord": "해운대, 바다,,일출 ", "orgImage": "http://img/o.jpg", "thumbImage": "",
        "regDt": "20260115093500", "mdfcnDt": "20260820100000",
    })
    assert award.content_id == "3000102"
    assert (award.award_category, award.award_rank) == ("스마트폰 부문", "입선")
    assert award.keywords == ["해운대", "바다", "일출"]
    assert award.film_date == "2025-07"
    assert award.thumbnail_url is None
    assert award.modified_at == "20260820100000"


# -----------------------------------------------------------------------------
# Mock mode
# -----------------------------------------------------------------------------
def test_mock_search_and_region(mock_config):
    client = PhotoAwardClient(mock_config)
    assert [a.content_id for a in client.search("haeundae")] == ["3000102"]
    assert [a.content_id for a in client.search("일출")] == ["3000103", "3000102"]
    assert [a.english_title for a in client.by_region("50")] == ["Sunrise over Seongsan"]
    assert client.by_region("99") == []


def test_mock_latest_is_newest_first(mock_config):
    latest = PhotoAwardClient(mock_config).latest(2)
    assert [a.content_id for a in latest] == ["3000103", "3000101"]


def test_mock_synced_display_flag(mock_config):
    client = PhotoAwardClient(mock_config)
    assert "3000104" not in [a.content_id for a in client.synced()]
    assert [a.content_id for a in client.synced(show_only=False)] == ["3000104"]


def test_mock_region_codes(mock_config):
    codes = PhotoAwardClient(mock_config).region_codes()
    assert len(codes) == 17
    assert CodeName("11", "서울특별시") in codes


def test_required_arguments(mock_config):
    client = PhotoAwardClient(mock_config)
    with pytest.raises(ValueError):
        client.search(" ")
    with pytest.raises(ValueError):
        client.by_region("")


# -----------------------------------------------------------------------------
# Live mode (patched transport)
# -----------------------------------------------------------------------------
def test_live_search_request(live_config, fake_urlopen):
    fake_urlopen["payloads"].append(envelope(
        [{"contentId": "1", "koTitle": "t", "koWnprzDiz": "일반 부문 [동상]"}],
        result_code="0000",
    ))
    awards = PhotoAwardClient(live_config).search("바다", num_of_rows=5)

    assert awards[0].award_rank == "동상"
    path, params, timeout = fake_urlopen["requests"][0]
    assert path == "/B551011/PhokoAwrdService/phokoAwrdList"
    assert params["keyword"] == "바다"
    assert params["arrange"] == "C"
    assert params["numOfRows"] == "5"
    assert params["_type"] == "json"
    assert params["serviceKey"] == "test-key"
    assert timeout == 3.0


def test_live_sync_and_region_endpoints(live_config, fake_urlopen):
    fake_urlopen["payloads"].append(envelope([], result_code="0000"))
    fake_urlopen["payloads"].append(envelope(
        [{"rnum": 1, "lDongRegnCd": "11", "lDongRegnNm": "서울특별시"}], result_code="0000"))
    client = PhotoAwardClient(live_config)

    assert client.synced() == []
    assert client.region_codes() == [CodeName("11", "서울특별시")]
    (sync_path, sync_params, _), (region_path, _, _) = fake_urlopen["requests"]
    assert sync_path.endswith("/phokoAwrdSyncList")
    assert sync_params["showflag"] == "1"
    assert region_path.endswith("/ldongCode")


def test_live_error_code(live_config, fake_urlopen):
    fake_urlopen["payloads"].append(envelope([], result_code="30", result_msg="SERVICE_KEY_IS_NOT_REGISTERED_ERROR"))
    with pytest.raises(ApiResponseError) as excinfo:
        PhotoAwardClient(live_config).latest()
    assert excinfo.value.service == "photo-award"
