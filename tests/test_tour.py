"""Tests for the tourism content client."""
from datetime import date

import pytest

from core.errors import ApiResponseError
from core.models import CodeName
from core.tour import (
    ARRANGE_CREATED,
    ARRANGE_TITLE,
    CONTENT_TYPE,
    SORT_ORDERS,
    TourClient,
    date_range,
    parse_spot,
    today_yyyymmdd,
)
from tests.helpers import envelope


def test_parse_spot_coordinates():
    spot = parse_spot({"contentid": 126508, "contenttypeid": "12", "title": "경복궁",
                       "addr1": "서울특별시 종로구 사직로 161", "addr2": "(세종로)",
                       "mapx": "126.9769930325", "mapy": "37.5788222356", "areacode": "1",
                       "firstimage": ""})
    assert spot.content_id == "126508"
    assert spot.latitude == pytest.approx(37.5788222356)
    assert spot.longitude == pytest.approx(126.9769930325)
    assert spot.address == "서울특별시 종로구 사직로 161 (세종로)"
    assert spot.image_url is None
    assert spot.coordinate is not None


def test_parse_spot_without_coordinates():
    spot = parse_spot({"contentid": "1", "contenttypeid": "25", "title": "course",
                       "mapx": "", "mapy": "bad"})
    assert spot.latitude is None
    assert spot.longitude is None
    assert spot.coordinate is None


def test_date_helpers():
    assert today_yyyymmdd(date(2026, 10, 16)) == "20261016"
    assert date_range(30, today=date(2026, 12, 15)) == ("20261215", "20270114")


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------
def test_keyword_is_required(mock_config):
    with pytest.raises(ValueError):
        TourClient(mock_config).search_keyword("  ")


def test_festival_start_is_required(mock_config):
    with pytest.raises(ValueError):
        TourClient(mock_config).search_festival("")


def test_detail_requires_content_id(mock_config):
    with pytest.raises(ValueError):
        TourClient(mock_config).detail_common("")


# -----------------------------------------------------------------------------
# Mock catalogue
# -----------------------------------------------------------------------------
def test_mock_keyword_search(mock_config):
    page = TourClient(mock_config).search_keyword("haeundae")
    assert page.total_count == 1
    assert page.items[0].content_id == "126081"


def test_mock_accommodations_by_area(mock_config):
    page = TourClient(mock_config).search_accommodations(area_code="39")
    assert [s.content_type_id for s in page.items] == [CONTENT_TYPE["ACCOMMODATION"]]
    assert page.items[0].area_code == "39"


def test_mock_festival_date_overlap(mock_config):
    client = TourClient(mock_config)
    october = client.search_festival("20261010", event_end_date="20261031")
    assert [s.content_id for s in october.items] == ["506545"]
    november = client.search_festival("20261101")
    assert [s.content_id for s in november.items] == ["141105"]


def test_mock_location_based_list(mock_config):
    page = TourClient(mock_config).location_based_list(37.5788, 126.9770, radius=1000)
    assert [s.content_id for s in page.items] == ["126508"]


def test_mock_detail_common(mock_config):
    client = TourClient(mock_config)
    assert client.detail_common("126452").title.startswith("성산일출봉")
    assert client.detail_common("does-not-exist") is None


def test_mock_pagination(mock_config):
    client = TourClient(mock_config)
    first = client.area_based_list(num_of_rows=5)
    third = client.area_based_list(page_no=3, num_of_rows=5)
    assert len(first.items) == 5
    assert first.total_count == len(third.items) + 10
    assert third.page_no == 3


# -----------------------------------------------------------------------------
# Live mode (patched transport)
# -----------------------------------------------------------------------------
def test_live_keyword_request(live_config, fake_urlopen):
    fake_urlopen["payloads"].append(envelope(
        [{"contentid": "126081", "contenttypeid": "12", "title": "해운대해수욕장",
          "mapx": "129.1586066", "mapy": "35.1586975"}],
        result_code="0000", result_msg="OK",
    ))
    page = TourClient(live_config).search_keyword("해운대", area_code="6")

    assert page.items[0].latitude == pytest.approx(35.1586975)
    path, params, _ = fake_urlopen["requests"][0]
    assert path == "/B551011/KorService2/searchKeyword2"
    assert params["keyword"] == "해운대"
    assert params["areaCode"] == "6"
    assert params["MobileOS"] == "ETC"
    assert params["MobileApp"] == "TravelWeb"
    assert params["_type"] == "json"
    assert params["arrange"] == "C"
    assert "contentTypeId" not in params


def test_live_single_item_and_error(live_config, fake_urlopen):
    fake_urlopen["payloads"].append(envelope(
        [{"contentid": "1", "contenttypeid": "32", "title": "stay"}],
        result_code="0000",
    ))
    # A single result arrives as a bare object, not a list.
    fake_urlopen["payloads"][0]["response"]["body"]["items"]["item"] = {
        "contentid": "1", "contenttypeid": "32", "title": "stay"}
    page = TourClient(live_config).search_accommodations()
    assert [s.title for s in page.items] == ["stay"]
    assert fake_urlopen["requests"][0][1]["contentTypeId"] == "32"

    fake_urlopen["payloads"].append(envelope([], result_code="10", result_msg="INVALID_REQUEST_PARAMETER_ERROR"))
    with pytest.raises(ApiResponseError):
        TourClient(live_config).search_keyword("x")


# -----------------------------------------------------------------------------
# Sort order, details and code tables
# -----------------------------------------------------------------------------
def test_mock_sort_orders(mock_config):
    client = TourClient(mock_config)
    by_title = client.area_based_list(content_type_id="32", arrange=ARRANGE_TITLE)
    assert [s.title for s in by_title.items] == sorted(s.title for s in by_title.items)
    by_created = client.area_based_list(content_type_id="32", arrange=ARRANGE_CREATED)
    assert [s.content_id for s in by_created.items] == ["2465071", "142869", "142785"]
    assert SORT_ORDERS == {"title": "A", "modified": "C", "created": "D"}


def test_live_keyword_sort_order(live_config, fake_urlopen):
    fake_urlopen["payloads"].append(envelope([], result_code="0000"))
    TourClient(live_config).search_keyword("궁", arrange=SORT_ORDERS["title"])
    assert fake_urlopen["requests"][0][1]["arrange"] == "A"


def test_location_radius_bounds(mock_config):
    client = TourClient(mock_config)
    with pytest.raises(ValueError):
        client.location_based_list(37.5, 127.0, radius=0)
    with pytest.raises(ValueError):
        client.location_based_list(37.5, 127.0, radius=20001)


def test_mock_detail_intro(mock_config):
    client = TourClient(mock_config)
    intro = client.detail_intro("126081", "12")
    assert intro["parking"] == "가능"
    assert "usetime" not in intro
    assert client.detail_intro("126081", "32") is None
    with pytest.raises(ValueError):
        client.detail_intro("126081", "")


def test_mock_detail_images(mock_config):
    client = TourClient(mock_config)
    images = client.detail_images("126508")
    assert len(images) == 2
    assert all(i.content_id == "126508" and i.image_url.endswith(".jpg") for i in images)
    assert client.detail_images("200030") == []


def test_mock_code_tables(mock_config):
    client = TourClient(mock_config)
    provinces = client.area_codes()
    assert CodeName("6", "부산") in provinces
    assert len(provinces) == 17
    assert CodeName("16", "해운대구") in client.area_codes("6")
    assert [c.code for c in client.category_codes()][:2] == ["A01", "A02"]
    assert CodeName("A0207", "축제") in client.category_codes(cat1="A02")
    assert client.category_codes(cat1="A02", cat2="A0201", cat3="A02010800") == [
        CodeName("A02010800", "사찰")]


def test_live_detail_image_request(live_config, fake_urlopen):
    fake_urlopen["payloads"].append(envelope(
        [{"contentid": "126508", "originimgurl": "http://img/1.jpg",
          "smallimageurl": "http://img/1_s.jpg", "serialnum": "1"}],
        result_code="0000",
    ))
    images = TourClient(live_config).detail_images("126508")
    assert images[0].thumbnail_url == "http://img/1_s.jpg"
    path, params, _ = fake_urlopen["requests"][0]
    assert path.endswith("/detailImage2")
    assert (params["imageYN"], params["subImageYN"]) == ("Y", "Y")


def test_live_page_metadata_tolerates_garbage(live_config, fake_urlopen):
    payload = envelope([{"contentid": "1", "contenttypeid": "12", "title": "x"}],
                       result_code="0000")
    payload["response"]["body"].update(pageNo="", numOfRows=None, totalCount="many")
    fake_urlopen["payloads"].append(payload)
    page = TourClient(live_config).area_based_list(page_no=2, num_of_rows=7)
    assert (page.page_no, page.num_of_rows, page.total_count) == (2, 7, 0)
    assert [s.title for s in page.items] == ["x"]
