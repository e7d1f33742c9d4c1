from dataclasses import dataclass
from datetime import date
from typing import Any

from app.providers.base import ProviderAdapter, ProviderError, is_number
from app.providers.http_client import HttpClient

FOREUP_TIMES_URL = "https://app.foreupsoftware.com/index.php/api/booking/times"


@dataclass(frozen=True)
class ForeUpCourseConfig:
    booking_class: int
    schedule_id: int
    schedule_ids: tuple[int, ...] = ()


def format_foreup_date(target_date: date) -> str:
    """ForeUp expects MM-DD-YYYY."""
    return target_date.strftime("%m-%d-%Y")


def _extract_price(raw: dict[str, Any]) -> float | None:
    green_fee = raw.get("green_fee")
    if is_number(green_fee):
        return float(green_fee)
    rate = raw.get("rate")
    if is_number(rate):
        return float(rate)
    if isinstance(rate, dict) and is_number(rate.get("amount")):
        return float(rate["amount"])
    return None


class ForeUpProvider(ProviderAdapter):
    """ForeUp public booking API (JSON over GET)."""

    provider = "foreup"

    def __init__(self, http: HttpClient, config: ForeUpCourseConfig) -> None:
        self._http = http
        self._config = config

    def build_params(self, target_date: date) -> list[tuple[str, str]]:
        params = [
            ("time", "all"),
            ("date", format_foreup_date(target_date)),
            ("holes", "all"),
            ("players", "0"),
            ("booking_class", str(self._config.booking_class)),
            ("schedule_id", str(self._config.schedule_id)),
            ("specials_only", "0"),
            ("api_key", "no_limits"),
        ]
        schedule_ids = self._config.schedule_ids or (self._config.schedule_id,)
        params.extend(("schedule_ids[]", str(schedule_id)) for schedule_id in schedule_ids)
        return params

    async def fetch(self, course_slug: str, target_date: date) -> Any:
        return await self._http.get_json(
            FOREUP_TIMES_URL,
            params=self.build_params(target_date),
            headers={"Accept": "application/json"},
        )

    def normalize(self, raw: Any, course_slug: str, course_name: str) -> list[dict[str, Any]]:
        if isinstance(raw, dict) and isinstance(raw.get("times"), list):
            raw = raw["times"]
        if not isinstance(raw, list):
            raise ProviderError(f"Unexpected ForeUp payload for {course_slug}: {type(raw).__name__}")

        tee_times = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            tee_times.append(
                {
                    "course_slug": course_slug,
                    "course_name": course_name,
                    "timestamp": item.get("time") or item.get("start_time") or item.get("tee_time"),
                    "price": _extract_price(item),
                    "available_spots": item.get("available_spots"),
                    "provider_payload": item,
                }
            )
        return tee_times
