from typing import List, Optional, Tuple

import requests

from celebration_api.core.config import settings
from celebration_api.core.logger import logger


class AdminClientError(Exception):
    pass


class AdminClient:
    """
    Thin HTTP client for the booking API, used by the Streamlit admin panel.
    """

    def __init__(self, base_url: str = None, timeout: float = 10):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout

    def _get(self, path: str, params: dict = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return requests.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"❌ Booking API unreachable ({url}): {e}")
            raise AdminClientError(f"Booking API unreachable: {e}") from e

    @staticmethod
    def _error_text(response: requests.Response) -> str:
        try:
            return response.json().get("error") or response.text
        except ValueError:
            return response.text

    def health(self) -> dict:
        response = self._get("/health")
        if response.status_code != 200:
            raise AdminClientError(self._error_text(response))
        return response.json()

    def tomorrow_bookings(self) -> Tuple[str, List[dict]]:
        response = self._get("/api/notifications", params={"admin": "true"})
        if response.status_code != 200:
            raise AdminClientError(self._error_text(response))
        data = response.json()
        logger.info(f"🔔 Loaded {len(data.get('bookings', []))} booking(s) for tomorrow")
        return data.get("message", ""), data.get("bookings", [])

    def filtered_bookings(
        self,
        date: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        branch: Optional[str] = None,
    ) -> List[dict]:
        params = {
            key: value
            for key, value in {"date": date, "month": month, "year": year, "branch": branch}.items()
            if value not in (None, "")
        }
        response = self._get("/api/bookings/filter", params=params)
        # The API answers 404 when nothing matches
        if response.status_code == 404:
            return []
        if response.status_code != 200:
            raise AdminClientError(self._error_text(response))
        return response.json()
