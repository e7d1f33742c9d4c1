import re
from dataclasses import dataclass
from datetime import date
from typing import Any

from bs4 import BeautifulSoup

from app.providers.base import ProviderAdapter, ProviderError
from app.providers.http_client import HttpClient

TIME_CODE_PATTERN = re.compile(r"/teetime/(\d{12})")
PRICE_CHARS_PATTERN = re.compile(r"[^0-9.]")


@dataclass(frozen=True)
class Quick18Selectors:
    """CSS selectors for the Quick18 search matrix page."""

    matrix: str = "table.matrixTable"
    slot_cell: str = "td.matrixsched"
    price: str = ".mtrxPrice"
    select_link: str = "a.sexybutton.teebutton"


SELECTORS = Quick18Selectors()


def build_search_url(base_url: str, target_date: date) -> str:
    return f"{base_url}/teetimes/searchmatrix?teedate={target_date.strftime('%Y%m%d')}"


def parse_time_code(code: str) -> str | None:
    """Turn Quick18's 202511201212 into '2025-11-20 12:12'."""
    if not re.fullmatch(r"\d{12}", code):
        return None
    return f"{code[0:4]}-{code[4:6]}-{code[6:8]} {code[8:10]}:{code[10:12]}"


def parse_price(text: str) -> float | None:
    numeric = PRICE_CHARS_PATTERN.sub("", text)
    if not numeric:
        return None
    try:
        return float(numeric)
    except ValueError:
        return None


class Quick18Provider(ProviderAdapter):
    """Quick18 courses publish tee times only as an HTML matrix, so we scrape it."""

    provider = "quick18"

    def __init__(self, http: HttpClient, base_url: str) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")

    async def fetch(self, course_slug: str, target_date: date) -> str:
        return await self._http.get_text(build_search_url(self._base_url, target_date))

    def normalize(self, raw: Any, course_slug: str, course_name: str) -> list[dict[str, Any]]:
        if not isinstance(raw, str) or not raw.strip():
            raise ProviderError(f"Empty Quick18 page for {course_slug}")

        soup = BeautifulSoup(raw, "html.parser")
        matrix = soup.select_one(SELECTORS.matrix)
        if matrix is None:
            # Maintenance pages and login redirects come back 200 without the matrix.
            raise ProviderError(f"No tee time matrix on Quick18 page for {course_slug}")

        tee_times = []
        for cell in matrix.select(SELECTORS.slot_cell):
            price_el = cell.select_one(SELECTORS.price)
            price_text = price_el.get_text(strip=True) if price_el else ""

            link_el = cell.select_one(SELECTORS.select_link)
            link = str(link_el.get("href") or "") if link_el else ""
            match = TIME_CODE_PATTERN.search(link)
            code = match.group(1) if match else None
            timestamp = parse_time_code(code) if code else None
            if not timestamp:
                continue

            tee_times.append(
                {
                    "course_slug": course_slug,
                    "course_name": course_name,
                    "timestamp": timestamp,
                    "price": parse_price(price_text),
                    "booking_url": f"{self._base_url}{link}",
                    "provider_payload": {"price_text": price_text, "link": link, "code": code},
                }
            )

        return tee_times
