"""HTTP access to the inventory backend.

Authentication state lives in an explicit ``Session`` handed to the
client; nothing is read from globals. GET requests are tried against the
primary base URL and then each fallback base URL, since deployments have
exposed the API both with and without an ``/api`` prefix.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import requests

from . import config
from .loader import CONVERTERS, extract
from .models import StockAdjustment
from .normalizer import normalize

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "warehouse": "/warehouses",
    "product": "/products",
    "inventory": "/inventory",
    "supplier": "/suppliers",
    "user": "/users",
    "movement": "/inventory/history",
}
REPORT_INPUTS = ("warehouse", "product", "inventory", "supplier")


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SessionExpired(ApiError):
    pass


@dataclass
class Session:
    token: Optional[str] = None
    user: Dict[str, Any] = field(default_factory=dict)

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def clear(self) -> None:
        self.token = None
        self.user = {}


def _error_detail(response: requests.Response) -> str:
    if not response.content:
        return response.reason or ""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] if response.text else response.reason or ""
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)[:200]


class InventoryApiClient:
    def __init__(
        self,
        session: Optional[Session] = None,
        base_url: str = config.API_BASE_URL,
        fallback_urls: Optional[List[str]] = None,
        timeout: float = config.API_TIMEOUT,
        http: Optional[requests.Session] = None,
    ):
        self.session = session or Session()
        self.base_url = base_url.rstrip("/")
        fallbacks = config.API_FALLBACK_URLS if fallback_urls is None else fallback_urls
        self.fallback_urls = [u.rstrip("/") for u in fallbacks if u.rstrip("/") != self.base_url]
        self.timeout = timeout
        self.http = http or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return headers

    def _check(self, response: requests.Response) -> requests.Response:
        if response.status_code == 401:
            self.session.clear()
            raise SessionExpired(_error_detail(response) or "session expired or invalid", status_code=401)
        if response.status_code >= 400:
            raise ApiError(_error_detail(response), status_code=response.status_code)
        return response

    def _json(self, response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"invalid JSON from {response.url}", status_code=response.status_code) from exc

    def get(self, path: str) -> Any:
        last_error: Optional[Exception] = None
        for base in [self.base_url, *self.fallback_urls]:
            url = base + path
            logger.debug("GET %s", url)
            try:
                response = self.http.get(url, headers=self._headers(), timeout=self.timeout)
                return self._json(self._check(response))
            except SessionExpired:
                raise
            except (requests.RequestException, ApiError) as exc:
                logger.warning("request to %s failed: %s", url, exc)
                last_error = exc
        status = getattr(last_error, "status_code", None)
        raise ApiError(f"all endpoints failed for {path}: {last_error}", status_code=status)

    def send(self, method: str, path: str, payload: Any = None) -> Any:
        url = self.base_url + path
        logger.debug("%s %s", method, url)
        try:
            response = self.http.request(method, url, json=payload, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise ApiError(f"{method} {url} failed: {exc}") from exc
        return self._json(self._check(response))

    def login(self, email: str, password: str) -> Session:
        try:
            body = self.send("POST", "/auth/login", {"email": email, "password": password}) or {}
        except SessionExpired as exc:
            # a 401 here means rejected credentials, not a lapsed session
            raise ApiError(str(exc) or "Invalid credentials", status_code=401) from exc
        if body.get("error"):
            raise ApiError(str(body["error"]), status_code=400)
        if not body.get("token"):
            raise ApiError("login response carried no token")
        self.session.token = body["token"]
        self.session.user = body.get("user") or {}
        logger.info("logged in as %s", self.session.user.get("email", email))
        return self.session

    def logout(self) -> None:
        self.session.clear()

    def list(self, entity: str) -> List[Any]:
        body = self.get(ENDPOINTS[entity])
        if entity in CONVERTERS:
            return extract(body, entity)
        return normalize(body)

    def fetch_collection(self, entity: str) -> List[Any]:
        """Like ``list`` but a failed fetch yields an empty collection."""
        try:
            return self.list(entity)
        except SessionExpired:
            raise
        except ApiError as exc:
            logger.warning("could not load %s: %s", entity, exc)
            return []

    def fetch_report_inputs(self) -> Dict[str, List[Any]]:
        with ThreadPoolExecutor(max_workers=len(REPORT_INPUTS)) as pool:
            futures = {entity: pool.submit(self.fetch_collection, entity) for entity in REPORT_INPUTS}
            return {entity: future.result() for entity, future in futures.items()}

    def stock_history(self) -> List[Any]:
        return self.fetch_collection("movement")

    def adjust_stock(self, adjustment: StockAdjustment) -> Any:
        return self.send("POST", "/inventory/adjust", asdict(adjustment))

    def create(self, entity: str, payload: Dict[str, Any]) -> Any:
        return self.send("POST", ENDPOINTS[entity], payload)

    def update(self, entity: str, ident: Any, payload: Dict[str, Any]) -> Any:
        return self.send("PUT", f"{ENDPOINTS[entity]}/{ident}", payload)

    def delete(self, entity: str, ident: Any) -> Any:
        return self.send("DELETE", f"{ENDPOINTS[entity]}/{ident}")
