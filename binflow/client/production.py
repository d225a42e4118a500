"""
Production API Client

Async HTTP client for the BinFlow API used by dashboards and scripts.

Read helpers log failures and return an empty result so a dashboard keeps
rendering while the API is unreachable. Write helpers raise
``httpx.HTTPStatusError`` on any non-2xx response.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

import httpx

from binflow.config import get_settings
from binflow.config.logging import get_logger

logger = get_logger(__name__, component="api_client")

DateLike = Union[date, datetime]


def _iso(value: DateLike) -> str:
    return value.isoformat()


class ProductionClient:
    """
    Client for the shift report and bin tipping endpoints.

    Example:
        async with ProductionClient() as client:
            stats = await client.get_dashboard_stats()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings().polling
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout or settings.request_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "ProductionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None, default: Any = None) -> Any:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.warning("API read failed", path=path, error=str(e), error_type=type(e).__name__)
            return default

    # -------------------------------------------------------------------------
    # Shift reports
    # -------------------------------------------------------------------------

    async def get_shift_reports(
        self,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
    ) -> List[Dict[str, Any]]:
        params = {}
        if start_date is not None:
            params["startDate"] = _iso(start_date)
        if end_date is not None:
            params["endDate"] = _iso(end_date)
        return await self._get_json("shift-aggregates", params=params or None, default=[])

    async def get_shift_reports_by_date_range(self, start_date: DateLike, end_date: DateLike) -> List[Dict[str, Any]]:
        return await self.get_shift_reports(start_date, end_date)

    async def get_shift_report(self, report_id: int) -> Optional[Dict[str, Any]]:
        return await self._get_json(f"shift-aggregates/{report_id}")

    async def get_dashboard_stats(self) -> Dict[str, Any]:
        return await self._get_json(
            "dashboard",
            default={
                "total_shifts_today": 0,
                "total_bins_tipped_today": 0,
                "average_efficiency_today": 0.0,
                "total_downtime_today": 0,
                "recent_metrics": [],
            },
        )

    async def create_shift_report(self, report_date: DateLike, line_manager: str, shift: str) -> Dict[str, Any]:
        response = await self._client.post(
            "shift-aggregates",
            json={"date": _iso(report_date), "line_manager": line_manager, "shift": shift},
        )
        response.raise_for_status()
        return response.json()

    async def update_shift_report(self, report_id: int, report: Dict[str, Any]) -> None:
        body = dict(report)
        if isinstance(body.get("date"), (date, datetime)):
            body["date"] = _iso(body["date"])
        response = await self._client.put(f"shift-aggregates/{report_id}", json=body)
        response.raise_for_status()

    async def delete_shift_report(self, report_id: int) -> None:
        response = await self._client.delete(f"shift-aggregates/{report_id}")
        response.raise_for_status()

    # -------------------------------------------------------------------------
    # Bin tippings
    # -------------------------------------------------------------------------

    async def create_bin_tipping(self, **fields: Any) -> Dict[str, Any]:
        """
        Submit a bin tipping.

        Accepts the fields of the production event payload (``date``,
        ``line_manager``, ``bins_tipped``...). Dates may be passed as
        ``date``/``datetime`` objects.
        """
        body = {k: _iso(v) if isinstance(v, (date, datetime)) else v for k, v in fields.items()}
        response = await self._client.post("production-events", json=body)
        response.raise_for_status()
        return response.json()

    async def get_bin_tippings(self) -> List[Dict[str, Any]]:
        return await self._get_json("production-events", default=[])

    async def get_bin_tippings_by_date(self, day: DateLike) -> List[Dict[str, Any]]:
        return await self._get_json("production-events", params={"date": _iso(day)}, default=[])

    async def get_bin_tippings_by_date_range(self, start_date: DateLike, end_date: DateLike) -> List[Dict[str, Any]]:
        return await self._get_json(
            "production-events",
            params={"startDate": _iso(start_date), "endDate": _iso(end_date)},
            default=[],
        )
