"""
GolfBack tee time provider.

GolfBack exposes a POST endpoint per course UUID and date. Its responses are
not consistent across courses: the tee time list may be the top-level value
or nested under `data` / `teeTimes`, and prices may come in dollars or cents
under several different keys. All of that variance is absorbed here.
"""

from datetime import date
from typing import Any

from app.providers.base import ProviderAdapter, ProviderError, first_present, is_number
from app.providers.http_client import HttpClient

GOLFBACK_API_BASE = "https://api.golfback.com/api/v1"

TIME_KEYS = (
    "dateTime",
    "localDateTime",
    "startTime",
    "start_time",
    "teeTime",
    "tee_time",
    "time",
)

# (key, divisor) in priority order. Divisor 100 marks a cents field.
RATE_PRICE_KEYS = (
    ("greenFeeCart", 1),
    ("greenFeeCartCents", 100),
    ("greenFee", 1),
    ("greenFeeCents", 100),
    ("amount", 1),
    ("price", 1),
)


def build_tee_times_url(course_id: str, target_date: date) -> str:
    return f"{GOLFBACK_API_BASE}/courses/{course_id}/date/{target_date.isoformat()}/teetimes"


def extract_tee_time_list(payload: Any) -> list[Any]:
    """
    Find the tee time list inside a GolfBack response.

    Raises:
        ProviderError: If none of the known response shapes match.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get("teeTimes"), list):
            return data["teeTimes"]
        if isinstance(payload.get("teeTimes"), list):
            return payload["teeTimes"]
    raise ProviderError(f"Unexpected GolfBack response structure: {type(payload).__name__}")


def _choose_rate(prices: list[Any]) -> dict[str, Any] | None:
    rates = [rate for rate in prices if isinstance(rate, dict)]
    if not rates:
        return None
    for rate in rates:
        name = rate.get("name")
        if rate.get("holes") == 18 or (isinstance(name, str) and "18" in name.lower()):
            return rate
    return rates[0]


def _price_from_rate(rate: dict[str, Any]) -> float | None:
    for key, divisor in RATE_PRICE_KEYS:
        if is_number(rate.get(key)):
            return rate[key] / divisor
    nested = rate.get("price")
    if isinstance(nested, dict) and is_number(nested.get("amount")):
        return float(nested["amount"])
    return None


def extract_price(tee_time: dict[str, Any]) -> float | None:
    price = None
    primary_prices = tee_time.get("primaryPrices")
    if isinstance(primary_prices, list):
        rate = _choose_rate(primary_prices)
        if rate:
            price = _price_from_rate(rate)

    if price is None:
        if is_number(tee_time.get("greenFee")):
            price = float(tee_time["greenFee"])
        elif is_number(tee_time.get("greenFeeCents")):
            price = tee_time["greenFeeCents"] / 100
        elif isinstance(tee_time.get("rate"), dict) and is_number(tee_time["rate"].get("amount")):
            price = float(tee_time["rate"]["amount"])
        elif is_number(tee_time.get("price")):
            price = float(tee_time["price"])
    return price


class GolfBackProvider(ProviderAdapter):
    provider = "golfback"

    def __init__(
        self,
        http: HttpClient,
        course_id: str,
        request_body: dict[str, Any] | None = None,
        extra_headers: dict[str, str] | None = None,
    ) -> None:
        self._http = http
        self._course_id = course_id
        self._request_body = request_body or {}
        self._extra_headers = extra_headers or {}

    async def fetch(self, course_slug: str, target_date: date) -> Any:
        headers = {
            "Accept": "application/json, text/plain, */*",
            "Content-Type": "application/json",
            **self._extra_headers,
        }
        return await self._http.post_json(
            build_tee_times_url(self._course_id, target_date),
            self._request_body,
            headers=headers,
        )

    def normalize(self, raw: Any, course_slug: str, course_name: str) -> list[dict[str, Any]]:
        tee_times = []
        for tt in extract_tee_time_list(raw):
            if not isinstance(tt, dict):
                continue

            max_players = first_present(tt, "maxPlayers", "max_players", "capacity")
            booked_players = first_present(tt, "bookedPlayers", "booked_players", "booked", default=0)
            available_spots = None
            if is_number(max_players):
                booked = booked_players if is_number(booked_players) else 0
                available_spots = max(max_players - booked, 0)

            timestamp = None
            for key in TIME_KEYS:
                if tt.get(key):
                    timestamp = tt[key]
                    break

            tee_times.append(
                {
                    "course_slug": course_slug,
                    "course_name": course_name,
                    "timestamp": timestamp,
                    "price": extract_price(tt),
                    "available_spots": available_spots,
                    "min_players": first_present(tt, "minPlayers", "min_players", default=1),
                    "max_players": max_players,
                    "booking_url": tt.get("bookingUrl") or tt.get("booking_url"),
                    "provider_payload": tt,
                }
            )
        return tee_times
