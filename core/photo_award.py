# =============================================================================
# core/photo_award.py  -  Tourism photo contest awards (PhokoAwrdService)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Looks up award-winning photos from the national tourism photo contest:
#   by keyword, by province, or the most recently updated.  Each winner
#   names where it was shot, so the agent can use them as "what does this
#   place look like" inspiration next to listings and weather.
#
# AWARD TEXT:
#   The award field reads like "스마트폰 부문 [입선]": the category, then
#   the rank in square brackets.  parse_award() splits the two; text without
#   brackets is kept whole as the category.
#
# REGION CODES:
#   This service files photos under legal-district province codes
#   ("lDongRegnCd"), which are NOT the tourism API's area codes.  Use
#   region_codes() to list them.
# =============================================================================

import re

from core.config import ApiConfig
from core.http import extract_items, get_envelope
from core.models import CodeName, PhotoAward
from core.tour import ARRANGE_MODIFIED

PHOTO_SUCCESS_CODE = "0000"

ENDPOINT_LIST = "phokoAwrdList"
ENDPOINT_SYNC_LIST = "phokoAwrdSyncList"
ENDPOINT_REGION_CODES = "ldongCode"

_AWARD_PATTERN = re.compile(r"(.+?)\s*\[(.+?)\]")


def parse_award(text: str) -> tuple[str, str]:
    """Split "category [rank]" into (category, rank)."""
    match = _AWARD_PATTERN.match(text or "")
    if not match:
        return text or "", ""
    return match.group(1).strip(), match.group(2).strip()


def format_film_date(film_day: str) -> str:
    """"YYYYMM" -> "YYYY-MM"; anything else is returned as is."""
    if not film_day or len(film_day) != 6 or not film_day.isdigit():
        return film_day or ""
    return f"{film_day[:4]}-{film_day[4:]}"


def parse_photo_award(row: dict) -> PhotoAward:
    award = row.get("koWnprzDiz", "")
    category, rank = parse_award(award)
    return PhotoAward(
        content_id=str(row.get("contentId", "")),
        title=row.get("koTitle", ""),
        english_title=row.get("enTitle", ""),
        location=row.get("koFilmst", ""),
        english_location=row.get("enFilmst", ""),
        region_code=str(row.get("lDongRegnCd", "")),
        photographer=row.get("koCmanNm", ""),
        award=award,
        award_category=category,
        award_rank=rank,
        keywords=[k.strip() for k in (row.get("koKeyWord") or "").split(",") if k.strip()],
        film_date=format_film_date(str(row.get("filmDay", ""))),
        image_url=row.get("orgImage") or None,
        thumbnail_url=row.get("thumbImage") or None,
        registered_at=row.get("regDt") or None,
        modified_at=row.get("mdfcnDt") or None,
    )


class PhotoAwardClient:
    """Client for the photo contest award listings."""

    def __init__(self, config: ApiConfig):
        config.require_key()
        self.config = config

    def search(self, keyword: str, num_of_rows: int = 10) -> list[PhotoAward]:
        """Winners whose title, place or keywords match `keyword`."""
        if not keyword or not keyword.strip():
            raise ValueError("keyword is required")
        return self._awards(ENDPOINT_LIST, {"keyword": keyword.strip()}, num_of_rows)

    def by_region(self, region_code: str, num_of_rows: int = 10) -> list[PhotoAward]:
        """Winners shot in one province (legal-district code, e.g. "11" Seoul)."""
        if not region_code:
            raise ValueError("region_code is required")
        return self._awards(ENDPOINT_LIST, {"lDongRegnCd": region_code}, num_of_rows)

    def latest(self, count: int = 10) -> list[PhotoAward]:
        """The most recently updated winners."""
        return self._awards(ENDPOINT_LIST, {}, count)

    def synced(self, num_of_rows: int = 10, show_only: bool = True) -> list[PhotoAward]:
        """Winners from the sync listing, filtered on its display flag.

        show_only=True lists the displayed winners, False the withdrawn ones.
        """
        return self._awards(
            ENDPOINT_SYNC_LIST,
            {"showflag": "1" if show_only else "0"},
            num_of_rows,
        )

    def region_codes(self) -> list[CodeName]:
        body = self._request(ENDPOINT_REGION_CODES, {"pageNo": 1, "numOfRows": 20})
        return [
            CodeName(code=str(row.get("lDongRegnCd", "")), name=row.get("lDongRegnNm", ""))
            for row in extract_items(body)
        ]

    def _awards(self, endpoint: str, params: dict, num_of_rows: int) -> list[PhotoAward]:
        body = self._request(endpoint, {
            "arrange": ARRANGE_MODIFIED,
            "pageNo": 1,
            "numOfRows": num_of_rows,
            **params,
        })
        return [parse_photo_award(row) for row in extract_items(body)]

    def _request(self, endpoint: str, params: dict) -> dict:
        if not self.config.use_live:
            return mock_body(endpoint, params)
        return get_envelope(
            f"{self.config.photo_award_base_url}/{endpoint}",
            {
                "MobileOS": self.config.mobile_os,
                "MobileApp": self.config.mobile_app,
                "_type": "json",
                "serviceKey": self.config.service_key,
                **params,
            },
            timeout=self.config.timeout,
            service="photo-award",
            success_code=PHOTO_SUCCESS_CODE,
        )


# =============================================================================
# MOCK PROVIDER
# =============================================================================
_MOCK_AWARDS = [
    {"contentId": "3000101", "koTitle": "경복궁의 가을", "enTitle": "Autumn at Gyeongbokgung",
     "lDongRegnCd": "11", "koFilmst": "서울 종로구 경복궁", "enFilmst": "Gyeongbokgung, Jongno-gu, Seoul",
     "filmDay": "202510", "koCmanNm": "김서연", "koWnprzDiz": "일반 부문 [대상]",
     "koKeyWord": "경복궁, 단풍, 고궁", "orgImage": "https://tong.visitkorea.or.kr/mock/award/3000101.jpg",
     "thumbImage": "https://tong.visitkorea.or.kr/mock/award/3000101_s.jpg",
     "regDt": "20260115093000", "mdfcnDt": "20260901120000"},
    {"contentId": "3000102", "koTitle": "해운대의 아침", "enTitle": "Morning at Haeundae",
     "lDongRegnCd": "26", "koFilmst": "부산 해운대구 해운대해수욕장", "enFilmst": "Haeundae Beach, Busan",
     "filmDay": "202507", "koCmanNm": "박민준", "koWnprzDiz": "스마트폰 부문 [입선]",
     "koKeyWord": "해운대,바다,일출", "orgImage": "https://tong.visitkorea.or.kr/mock/award/3000102.jpg",
     "thumbImage": "https://tong.visitkorea.or.kr/mock/award/3000102_s.jpg",
     "regDt": "20260115093500", "mdfcnDt": "20260820100000"},
    {"contentId": "3000103", "koTitle": "성산일출봉 해돋이", "enTitle": "Sunrise over Seongsan",
     "lDongRegnCd": "50", "koFilmst": "제주 서귀포시 성산읍", "enFilmst": "Seongsan-eup, Seogwipo, Jeju",
     "filmDay": "202601", "koCmanNm": "이지은", "koWnprzDiz": "일반 부문 [금상]",
     "koKeyWord": "성산일출봉, 일출, 제주", "orgImage": "https://tong.visitkorea.or.kr/mock/award/3000103.jpg",
     "thumbImage": "https://tong.visitkorea.or.kr/mock/award/3000103_s.jpg",
     "regDt": "20260210110000", "mdfcnDt": "20261002090000", "showflag": "1"},
    {"contentId": "3000104", "koTitle": "진주 유등", "enTitle": "Lanterns of Jinju",
     "lDongRegnCd": "48", "koFilmst": "경남 진주시 남강", "enFilmst": "Namgang River, Jinju",
     "filmDay": "202510", "koCmanNm": "최우진", "koWnprzDiz": "특별상",
     "koKeyWord": "", "orgImage": "https://tong.visitkorea.or.kr/mock/award/3000104.jpg",
     "thumbImage": "", "regDt": "20260301140000", "mdfcnDt": "20260301140000", "showflag": "0"},
]

_MOCK_REGIONS = [
    ("11", "서울특별시"), ("26", "부산광역시"), ("27", "대구광역시"), ("28", "인천광역시"),
    ("29", "광주광역시"), ("30", "대전광역시"), ("31", "울산광역시"), ("36", "세종특별자치시"),
    ("41", "경기도"), ("43", "충청북도"), ("44", "충청남도"), ("46", "전라남도"),
    ("47", "경상북도"), ("48", "경상남도"), ("50", "제주특별자치도"), ("51", "강원특별자치도"),
    ("52", "전북특별자치도"),
]


def _mock_matches(row: dict, params: dict) -> bool:
    keyword = params.get("keyword")
    if keyword:
        haystack = " ".join((row["koTitle"], row["enTitle"], row["koFilmst"],
                             row["enFilmst"], row["koKeyWord"])).lower()
        if keyword.lower() not in haystack:
            return False
    if params.get("lDongRegnCd") and row["lDongRegnCd"] != params["lDongRegnCd"]:
        return False
    if params.get("showflag") and row.get("showflag", "1") != params["showflag"]:
        return False
    return True


def mock_body(endpoint: str, params: dict) -> dict:
    """An envelope body for `endpoint` answered from a fixed set of winners."""
    if endpoint == ENDPOINT_REGION_CODES:
        rows = [{"rnum": i, "lDongRegnCd": code, "lDongRegnNm": name}
                for i, (code, name) in enumerate(_MOCK_REGIONS, 1)]
    else:
        rows = [row for row in _MOCK_AWARDS if _mock_matches(row, params)]
        rows.sort(key=lambda r: r["mdfcnDt"], reverse=True)
    size = params.get("numOfRows", 10)
    page = rows[:size]
    return {
        "items": {"item": page} if page else "",
        "numOfRows": size,
        "pageNo": params.get("pageNo", 1),
        "totalCount": len(rows),
    }
