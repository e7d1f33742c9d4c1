from datetime import date
from typing import Any

from app.providers.base import ProviderAdapter, ProviderError, is_number
from app.providers.http_client import HttpClient

TEEITUP_TEE_TIMES_URL = "https://phx-api-be-east-1b.kenna.io/v2/tee-times"


def _rate_price(rate: dict[str, Any] | None) -> float | None:
    # greenFeeCart and greenFee are in cents.
    if not rate:
        return None
    if is_number(rate.get("greenFeeCart")):
        return rate["greenFeeCart"] / 100
    if is_number(rate.get("greenFee")):
        return rate["greenFee"] / 100
    if is_number(rate.get("amount")):
        return float(rate["amount"])
    price = rate.get("price")
    if is_number(price):
        return float(price)
    if isinstance(price, dict) and is_number(price.get("amount")):
        return float(price["amount"])
    return None


class TeeItUpProvider(ProviderAdapter):
    """TeeItUp (Kenna) JSON API. Each facility is addressed by id plus an alias header."""

    provider = "teeitup"

    def __init__(self, http: HttpClient, facility_id: int, alias: str) -> None:
        self._http = http
        self._facility_id = facility_id
        self._alias = alias

    async def fetch(self, course_slug: str, target_date: date) -> Any:
        return await self._http.get_json(
            TEEITUP_TEE_TIMES_URL,
            params={"date": target_date.isoformat(), "facilityIds": str(self._facility_id)},
            headers={"Accept": "application/json", "x-be-alias": self._alias},
        )

    def normalize(self, raw: Any, course_slug: str, course_name: str) -> list[dict[str, Any]]:
        if not isinstance(raw, list):
            raise ProviderError(f"Unexpected TeeItUp payload for {course_slug}: {type(raw).__name__}")

        flattened: list[dict[str, Any]] = []
        for day_block in raw:
            if not isinstance(day_block, dict) or not isinstance(day_block.get("teetimes"), list):
                continue
            for tee_time in day_block["teetimes"]:
                if isinstance(tee_time, dict):
                    flattened.append({"dayInfo": day_block.get("dayInfo"), **tee_time})

        tee_times = []
        for tt in flattened:
            rates = tt.get("rates")
            primary_rate = rates[0] if isinstance(rates, list) and rates else None
            max_players = tt.get("maxPlayers")
            booked_players = tt.get("bookedPlayers")
            if not is_number(booked_players):
                booked_players = 0
            available_spots = (
                max(max_players - booked_players, 0) if is_number(max_players) else None
            )
            tee_times.append(
                {
                    "course_slug": course_slug,
                    "course_name": course_name,
                    "timestamp": tt.get("teetime"),
                    "price": _rate_price(primary_rate if isinstance(primary_rate, dict) else None),
                    "available_spots": available_spots,
                    "min_players": tt.get("minPlayers"),
                    "max_players": max_players,
                    "booking_url": None,
                    "provider_payload": tt,
                }
            )
        return tee_times
