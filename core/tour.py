# =============================================================================
# core/tour.py  -  Tourism content client (KorService2)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Destination search, festival listings, accommodation search and detail
#   lookups against the national tourism organization's content API.  Every
#   listing row comes back as a TouristSpot, whose (latitude, longitude) is
#   what the weather lookups in core/weather.py take as input.
#
# COORDINATES:
#   The API calls longitude "mapx" and latitude "mapy", both as strings, and
#   leaves them empty for some listings.  Missing or unparseable values give
#   a TouristSpot with latitude/longitude = None.
#
# DATA SOURCE TOGGLE:
#   Same as the weather client: ApiConfig.use_live picks the real API, else a
#   small deterministic catalogue answers with rows in the API's own shape.
# =============================================================================

from datetime import date, timedelta
from typing import Optional

from core.config import ApiConfig
from core.http import extract_items, get_envelope
from core.models import CodeName, ListPage, TourImage, TouristSpot

TOUR_SUCCESS_CODE = "0000"

# -----------------------------------------------------------------------------
# Lookup tables
# -----------------------------------------------------------------------------
CONTENT_TYPE = {
    "TOURIST_SPOT": "12",
    "CULTURAL_FACILITY": "14",
    "FESTIVAL": "15",
    "TRAVEL_COURSE": "25",
    "LEISURE": "28",
    "ACCOMMODATION": "32",
    "SHOPPING": "38",
    "RESTAURANT": "39",
}

AREA_CODE = {
    "SEOUL": "1",
    "INCHEON": "2",
    "DAEJEON": "3",
    "DAEGU": "4",
    "GWANGJU": "5",
    "BUSAN": "6",
    "ULSAN": "7",
    "SEJONG": "8",
    "GYEONGGI": "31",
    "GANGWON": "32",
    "CHUNGBUK": "33",
    "CHUNGNAM": "34",
    "GYEONGBUK": "35",
    "GYEONGNAM": "36",
    "JEONBUK": "37",
    "JEONNAM": "38",
    "JEJU": "39",
}

# "arrange" sort orders: A title, C modified, D created, with-image variants O/Q/R.
ARRANGE_TITLE = "A"
ARRANGE_MODIFIED = "C"
ARRANGE_CREATED = "D"

SORT_ORDERS = {
    "title": ARRANGE_TITLE,
    "modified": ARRANGE_MODIFIED,
    "created": ARRANGE_CREATED,
}


def today_yyyymmdd(today: Optional[date] = None) -> str:
    return (today or date.today()).strftime("%Y%m%d")


def date_range(days: int = 30, today: Optional[date] = None) -> tuple[str, str]:
    """(start, end) as YYYYMMDD, from today to `days` days later."""
    start = today or date.today()
    return today_yyyymmdd(start), today_yyyymmdd(start + timedelta(days=days))


def _to_float(raw) -> Optional[float]:
    if raw in (None, ""):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def _to_int(raw, default: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def parse_spot(row: dict) -> TouristSpot:
    """Turn one raw listing row into a TouristSpot."""
    return TouristSpot(
        content_id=str(row.get("contentid", "")),
        content_type_id=str(row.get("contenttypeid", "")),
        title=row.get("title", ""),
        address=" ".join(p for p in (row.get("addr1"), row.get("addr2")) if p),
        latitude=_to_float(row.get("mapy")),
        longitude=_to_float(row.get("mapx")),
        image_url=row.get("firstimage") or None,
        area_code=str(row["areacode"]) if row.get("areacode") else None,
        tel=row.get("tel") or None,
        overview=row.get("overview") or None,
        event_start_date=row.get("eventstartdate") or None,
        event_end_date=row.get("eventenddate") or None,
    )


def parse_image(row: dict) -> TourImage:
    return TourImage(
        content_id=str(row.get("contentid", "")),
        image_url=row.get("originimgurl", ""),
        thumbnail_url=row.get("smallimageurl") or None,
        serial_num=row.get("serialnum") or None,
    )


def parse_code(row: dict) -> CodeName:
    return CodeName(code=str(row.get("code", "")), name=row.get("name", ""))


class TourClient:
    """Client for the tourism content listing and detail endpoints."""

    def __init__(self, config: ApiConfig):
        config.require_key()
        self.config = config

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------
    def search_keyword(
        self,
        keyword: str,
        content_type_id: Optional[str] = None,
        area_code: Optional[str] = None,
        page_no: int = 1,
        num_of_rows: int = 10,
        arrange: str = ARRANGE_MODIFIED,
    ) -> ListPage:
        if not keyword or not keyword.strip():
            raise ValueError("keyword is required")
        return self._list("searchKeyword2", {
            "keyword": keyword.strip(),
            "contentTypeId": content_type_id,
            "areaCode": area_code,
            "arrange": arrange,
        }, page_no, num_of_rows)

    def area_based_list(
        self,
        area_code: Optional[str] = None,
        content_type_id: Optional[str] = None,
        page_no: int = 1,
        num_of_rows: int = 10,
        arrange: str = ARRANGE_MODIFIED,
    ) -> ListPage:
        return self._list("areaBasedList2", {
            "areaCode": area_code,
            "contentTypeId": content_type_id,
            "arrange": arrange,
        }, page_no, num_of_rows)

    def location_based_list(
        self,
        latitude: float,
        longitude: float,
        radius: int = 1000,
        content_type_id: Optional[str] = None,
        page_no: int = 1,
        num_of_rows: int = 10,
    ) -> ListPage:
        """Listings within `radius` metres of a coordinate (max 20000)."""
        if latitude is None or longitude is None:
            raise ValueError("latitude and longitude are required")
        if not 0 < radius <= 20000:
            raise ValueError(f"radius must be between 1 and 20000 metres, got {radius}")
        return self._list("locationBasedList2", {
            "mapX": longitude,
            "mapY": latitude,
            "radius": radius,
            "contentTypeId": content_type_id,
        }, page_no, num_of_rows)

    def search_festival(
        self,
        event_start_date: str,
        event_end_date: Optional[str] = None,
        area_code: Optional[str] = None,
        page_no: int = 1,
        num_of_rows: int = 10,
    ) -> ListPage:
        if not event_start_date:
            raise ValueError("event_start_date is required (format: YYYYMMDD)")
        return self._list("searchFestival2", {
            "eventStartDate": event_start_date,
            "eventEndDate": event_end_date,
            "areaCode": area_code,
            "arrange": ARRANGE_MODIFIED,
        }, page_no, num_of_rows)

    def search_accommodations(
        self,
        area_code: Optional[str] = None,
        page_no: int = 1,
        num_of_rows: int = 10,
    ) -> ListPage:
        return self.area_based_list(
            area_code=area_code,
            content_type_id=CONTENT_TYPE["ACCOMMODATION"],
            page_no=page_no,
            num_of_rows=num_of_rows,
        )

    # -------------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------------
    def detail_common(self, content_id: str) -> Optional[TouristSpot]:
        """Common details (address, coordinates, overview) for one listing."""
        if not content_id:
            raise ValueError("content_id is required")
        page = self._list("detailCommon2", {"contentId": content_id}, 1, 1)
        return page.items[0] if page.items else None

    def detail_intro(self, content_id: str, content_type_id: str) -> Optional[dict]:
        """Type-specific facts (opening hours, parking, check-in, ...).

        The field set depends on the content type, so the row is returned
        as a dict with empty values dropped.  None if nothing matches.
        """
        if not content_id or not content_type_id:
            raise ValueError("content_id and content_type_id are required")
        body = self._request("detailIntro2", {
            "contentId": content_id,
            "contentTypeId": content_type_id,
        })
        rows = extract_items(body)
        if not rows:
            return None
        return {k: v for k, v in rows[0].items() if v not in (None, "")}

    def detail_images(self, content_id: str, num_of_rows: int = 10) -> list[TourImage]:
        """Photos attached to one listing."""
        if not content_id:
            raise ValueError("content_id is required")
        body = self._request("detailImage2", {
            "contentId": content_id,
            "imageYN": "Y",
            "subImageYN": "Y",
            "pageNo": 1,
            "numOfRows": num_of_rows,
        })
        return [parse_image(row) for row in extract_items(body)]

    # -------------------------------------------------------------------------
    # Code tables
    # -------------------------------------------------------------------------
    def area_codes(self, area_code: Optional[str] = None) -> list[CodeName]:
        """Province codes, or a province's district codes when one is given."""
        body = self._request("areaCode2", {
            "areaCode": area_code,
            "pageNo": 1,
            "numOfRows": 100,
        })
        return [parse_code(row) for row in extract_items(body)]

    def category_codes(
        self,
        content_type_id: Optional[str] = None,
        cat1: Optional[str] = None,
        cat2: Optional[str] = None,
        cat3: Optional[str] = None,
    ) -> list[CodeName]:
        """Service category codes, one level below the deepest one given."""
        body = self._request("categoryCode2", {
            "contentTypeId": content_type_id,
            "cat1": cat1,
            "cat2": cat2,
            "cat3": cat3,
            "pageNo": 1,
            "numOfRows": 100,
        })
        return [parse_code(row) for row in extract_items(body)]

    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------
    def _request(self, endpoint: str, params: dict) -> dict:
        if not self.config.use_live:
            return mock_body(endpoint, params)
        return get_envelope(
            f"{self.config.tour_base_url}/{endpoint}",
            {
                "MobileOS": self.config.mobile_os,
                "MobileApp": self.config.mobile_app,
                "_type": "json",
                "serviceKey": self.config.service_key,
                **params,
            },
            timeout=self.config.timeout,
            service="tour",
            success_code=TOUR_SUCCESS_CODE,
        )

    def _list(self, endpoint: str, params: dict, page_no: int, num_of_rows: int) -> ListPage:
        body = self._request(endpoint, {**params, "pageNo": page_no, "numOfRows": num_of_rows})
        return ListPage(
            items=[parse_spot(row) for row in extract_items(body)],
            page_no=_to_int(body.get("pageNo"), page_no),
            num_of_rows=_to_int(body.get("numOfRows"), num_of_rows),
            total_count=_to_int(body.get("totalCount"), 0),
        )


# =============================================================================
# MOCK PROVIDER: a tiny fixed catalogue
# =============================================================================
_MOCK_CATALOGUE = [
    {"contentid": "126508", "contenttypeid": "12", "title": "경복궁 (Gyeongbokgung Palace)",
     "addr1": "서울특별시 종로구 사직로 161", "areacode": "1",
     "mapx": "126.9769930325", "mapy": "37.5788222356"},
    {"contentid": "126535", "contenttypeid": "12", "title": "남산서울타워 (N Seoul Tower)",
     "addr1": "서울특별시 용산구 남산공원길 105", "areacode": "1",
     "mapx": "126.9882266", "mapy": "37.5511694"},
    {"contentid": "126081", "contenttypeid": "12", "title": "해운대해수욕장 (Haeundae Beach)",
     "addr1": "부산광역시 해운대구 우동", "areacode": "6",
     "mapx": "129.1586066", "mapy": "35.1586975"},
    {"contentid": "126452", "contenttypeid": "12", "title": "성산일출봉 (Seongsan Ilchulbong)",
     "addr1": "제주특별자치도 서귀포시 성산읍 일출로 284-12", "areacode": "39",
     "mapx": "126.9423", "mapy": "33.4581"},
    {"contentid": "126207", "contenttypeid": "12", "title": "불국사 (Bulguksa Temple)",
     "addr1": "경상북도 경주시 불국로 385", "areacode": "35",
     "mapx": "129.3320", "mapy": "35.7901"},
    {"contentid": "264570", "contenttypeid": "12", "title": "전주한옥마을 (Jeonju Hanok Village)",
     "addr1": "전라북도 전주시 완산구 기린대로 99", "areacode": "37",
     "mapx": "127.1530", "mapy": "35.8150"},
    {"contentid": "141105", "contenttypeid": "15", "title": "부산불꽃축제 (Busan Fireworks Festival)",
     "addr1": "부산광역시 수영구 광안해변로 219", "areacode": "6",
     "mapx": "129.1186", "mapy": "35.1532",
     "eventstartdate": "20261107", "eventenddate": "20261107"},
    {"contentid": "506545", "contenttypeid": "15", "title": "진주남강유등축제 (Jinju Lantern Festival)",
     "addr1": "경상남도 진주시 남강로 626", "areacode": "36",
     "mapx": "128.0768", "mapy": "35.1890",
     "eventstartdate": "20261001", "eventenddate": "20261015"},
    {"contentid": "142785", "contenttypeid": "32", "title": "롯데호텔 서울 (Lotte Hotel Seoul)",
     "addr1": "서울특별시 중구 을지로 30", "areacode": "1",
     "mapx": "126.9810", "mapy": "37.5653"},
    {"contentid": "142869", "contenttypeid": "32", "title": "파라다이스호텔 부산 (Paradise Hotel Busan)",
     "addr1": "부산광역시 해운대구 해운대해변로 296", "areacode": "6",
     "mapx": "129.1642", "mapy": "35.1597"},
    {"contentid": "2465071", "contenttypeid": "32", "title": "제주신라호텔 (The Shilla Jeju)",
     "addr1": "제주특별자치도 서귀포시 중문관광로72번길 75", "areacode": "39",
     "mapx": "126.4088", "mapy": "33.2476"},
    {"contentid": "200030", "contenttypeid": "25", "title": "동해안 해돋이 코스 (East Coast Sunrise Course)",
     "addr1": "", "areacode": "32", "mapx": "", "mapy": ""},
]

# Intro rows for a few listings; the fields differ per content type.
_MOCK_INTRO = {
    "126508": {"contenttypeid": "12", "infocenter": "02-3700-3900",
               "restdate": "매주 화요일", "usetime": "09:00~18:00", "parking": "가능"},
    "126081": {"contenttypeid": "12", "infocenter": "051-749-7621",
               "restdate": "연중무휴", "usetime": "", "parking": "가능"},
    "141105": {"contenttypeid": "15", "eventplace": "광안리해수욕장",
               "playtime": "19:00~20:10", "usetimefestival": "무료", "sponsor1": "부산광역시"},
    "142785": {"contenttypeid": "32", "checkintime": "15:00", "checkouttime": "11:00",
               "roomcount": "1015", "parkinglodging": "가능"},
}

_MOCK_IMAGE_HOST = "https://tong.visitkorea.or.kr/cms/resource/mock"

_MOCK_PROVINCES = [
    ("1", "서울"), ("2", "인천"), ("3", "대전"), ("4", "대구"), ("5", "광주"),
    ("6", "부산"), ("7", "울산"), ("8", "세종특별자치시"), ("31", "경기도"),
    ("32", "강원특별자치도"), ("33", "충청북도"), ("34", "충청남도"), ("35", "경상북도"),
    ("36", "경상남도"), ("37", "전북특별자치도"), ("38", "전라남도"), ("39", "제주도"),
]

_MOCK_DISTRICTS = {
    "1": [("1", "강남구"), ("21", "용산구"), ("23", "종로구"), ("24", "중구")],
    "6": [("12", "수영구"), ("16", "해운대구")],
    "39": [("3", "서귀포시"), ("4", "제주시")],
}

# Keyed by parent code; None is the top level.
_MOCK_CATEGORIES = {
    None: [("A01", "자연"), ("A02", "인문(문화/예술/역사)"), ("A03", "레포츠"),
           ("A04", "쇼핑"), ("A05", "음식"), ("B02", "숙박")],
    "A01": [("A0101", "자연관광지"), ("A0102", "관광자원")],
    "A02": [("A0201", "역사관광지"), ("A0202", "휴양관광지"), ("A0203", "체험관광지"),
            ("A0207", "축제"), ("A0208", "공연/행사")],
    "B02": [("B0201", "숙박시설")],
    "A0201": [("A02010100", "고궁"), ("A02010200", "성"), ("A02010800", "사찰")],
    "B0201": [("B02010100", "관광호텔"), ("B02010700", "펜션")],
}


def _mock_matches(row: dict, endpoint: str, params: dict) -> bool:
    if params.get("contentTypeId") and row["contenttypeid"] != params["contentTypeId"]:
        return False
    if params.get("areaCode") and row["areacode"] != params["areaCode"]:
        return False
    if endpoint == "searchKeyword2":
        return params["keyword"].lower() in row["title"].lower()
    if endpoint == "searchFestival2":
        if row["contenttypeid"] != CONTENT_TYPE["FESTIVAL"]:
            return False
        if row["eventenddate"] < params["eventStartDate"]:
            return False
        end = params.get("eventEndDate")
        return not end or row["eventstartdate"] <= end
    if endpoint == "detailCommon2":
        return row["contentid"] == params["contentId"]
    if endpoint == "locationBasedList2":
        # ~0.01 degree per km is close enough for a mock radius filter.
        if not row["mapx"] or not row["mapy"]:
            return False
        reach = params["radius"] / 1000 * 0.01
        return (abs(float(row["mapx"]) - float(params["mapX"])) <= reach
                and abs(float(row["mapy"]) - float(params["mapY"])) <= reach)
    return True


def _mock_sorted(rows: list[dict], arrange: Optional[str]) -> list[dict]:
    if arrange == ARRANGE_TITLE:
        return sorted(rows, key=lambda r: r["title"])
    if arrange == ARRANGE_CREATED:
        return sorted(rows, key=lambda r: int(r["contentid"]), reverse=True)
    return rows


def _mock_rows(endpoint: str, params: dict) -> list[dict]:
    if endpoint == "detailIntro2":
        intro = _MOCK_INTRO.get(params["contentId"])
        if intro is None or intro["contenttypeid"] != params["contentTypeId"]:
            return []
        return [{"contentid": params["contentId"], **intro}]

    if endpoint == "detailImage2":
        if not any(row["contentid"] == params["contentId"] and row["mapx"]
                   for row in _MOCK_CATALOGUE):
            return []
        return [
            {"contentid": params["contentId"], "serialnum": f"{params['contentId']}_{n}",
             "originimgurl": f"{_MOCK_IMAGE_HOST}/{params['contentId']}_{n}.jpg",
             "smallimageurl": f"{_MOCK_IMAGE_HOST}/{params['contentId']}_{n}_s.jpg"}
            for n in (1, 2)
        ]

    if endpoint == "areaCode2":
        pairs = _MOCK_DISTRICTS.get(params["areaCode"], []) if params.get("areaCode") else _MOCK_PROVINCES
        return [{"rnum": i, "code": code, "name": name} for i, (code, name) in enumerate(pairs, 1)]

    if endpoint == "categoryCode2":
        # The mock ignores contentTypeId.
        if params.get("cat3"):
            parent = params["cat3"][:5]
            pairs = [p for p in _MOCK_CATEGORIES.get(parent, []) if p[0] == params["cat3"]]
        else:
            pairs = _MOCK_CATEGORIES.get(params.get("cat2") or params.get("cat1"), [])
        return [{"rnum": i, "code": code, "name": name} for i, (code, name) in enumerate(pairs, 1)]

    matches = [row for row in _MOCK_CATALOGUE if _mock_matches(row, endpoint, params)]
    return _mock_sorted(matches, params.get("arrange"))


def mock_body(endpoint: str, params: dict) -> dict:
    """An envelope body for `endpoint` answered from the mock catalogue."""
    rows = _mock_rows(endpoint, params)
    page_no = params.get("pageNo", 1)
    size = params.get("numOfRows", 10)
    page = rows[(page_no - 1) * size: page_no * size]
    return {
        "items": {"item": page} if page else "",
        "numOfRows": size,
        "pageNo": page_no,
        "totalCount": len(rows),
    }
