# frontend/api_client.py
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Raised when the backend answers with a non-success status"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DealershipAPI:
    """
    Thin client for the inventory, contact, valuation and admin endpoints

    `http` may be a requests.Session or anything exposing the same
    request(method, url, json=..., headers=...) call.
    """

    def __init__(self, base_url: str = "", http=None, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api{path}"

    def _send(self, method: str, path: str, failure: str, payload=None, token: Optional[str] = None):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        kwargs: Dict[str, Any] = {"headers": headers}
        if payload is not None:
            kwargs["json"] = payload
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        response = self.http.request(method, self._url(path), **kwargs)
        if not 200 <= response.status_code < 300:
            logger.warning(f"{method} {path} failed with {response.status_code}")
            raise APIError(failure, response.status_code)
        return response.json()

    def get_cars(self) -> List[Dict[str, Any]]:
        data = self._send("GET", "/cars", "Cars load failed")
        if isinstance(data, list):
            return data
        return data.get("cars") or []

    def create_car(self, payload: Dict[str, Any], token: str) -> Dict[str, Any]:
        return self._send("POST", "/cars", "Create failed", payload, token)

    def update_car(self, car_id, payload: Dict[str, Any], token: str) -> Dict[str, Any]:
        return self._send("PUT", f"/cars/{quote(str(car_id), safe='')}", "Update failed", payload, token)

    def delete_car(self, car_id, token: str) -> Dict[str, Any]:
        return self._send("DELETE", f"/cars/{quote(str(car_id), safe='')}", "Delete failed", token=token)

    def submit_valuation(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._send("POST", "/valuations", "Valuation submit failed", payload)

    def submit_message(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._send("POST", "/messages", "Message submit failed", payload)

    def admin_login(self, password: str) -> Optional[Dict[str, Any]]:
        """Returns {token, expiresAt}, or None when the login is refused"""
        try:
            return self._send("POST", "/admin-login", "Login failed", {"password": password})
        except APIError:
            return None
