"""Fast Memos API client.

A thin wrapper around the REST API served by ``fast_memos.app.main``.  It
uses the ``requests`` library and exposes one method per operation:

* :meth:`register` / :meth:`login` – create an account and obtain a token.
* :meth:`list_memos` / :meth:`search_memos` – the caller's memos, newest first.
* :meth:`get_memo`, :meth:`create_memo`, :meth:`update_memo`,
  :meth:`delete_memo` – single memo operations.

Every method returns a tuple ``(data, error)``.  On success ``error`` is
``None``; on failure ``data`` is empty and ``error`` is a dictionary with
``status_code`` and ``message``.  A successful :meth:`login` stores the
token so that subsequent calls are authenticated.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

Error = Dict[str, Any]


class MemosAPI:
    """Client for the Fast Memos HTTP API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Server root, e.g. ``http://localhost:3000``.
            token: Optional bearer token from a previous login.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helper
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path below the API prefix (e.g. ``/memos/``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{API_PREFIX}{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def register(self, username: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create an account.  Returns ``({"id", "username"}, None)`` on success."""
        return self._request("POST", "/auth/register", json_body={"username": username, "password": password})

    def login(self, username: str, password: str) -> Tuple[Optional[str], Optional[Error]]:
        """Log in and remember the returned token."""
        data, error = self._request("POST", "/auth/login", json_body={"username": username, "password": password})
        if error:
            return None, error
        token = (data or {}).get("token")
        if not token:
            return None, {"status_code": None, "message": "Login response did not contain a token"}
        self.token = token
        return token, None

    # ------------------------------------------------------------------
    # Memo operations
    # ------------------------------------------------------------------
    def list_memos(self, keyword: Optional[str] = None) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        params = {"q": keyword} if keyword else None
        data, error = self._request("GET", "/memos/", params=params)
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    def search_memos(self, keyword: str) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Explicit search; the server answers 400 for a blank keyword."""
        data, error = self._request("GET", "/memos/search", params={"q": keyword})
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    def get_memo(self, memo_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/memos/{memo_id}")

    def create_memo(
        self,
        title: str,
        content: str = "",
        related_memo_ids: Optional[List[str]] = None,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        payload: Dict[str, Any] = {"title": title, "content": content}
        if related_memo_ids is not None:
            payload["related_memo_ids"] = list(related_memo_ids)
        return self._request("POST", "/memos/", json_body=payload)

    def update_memo(self, memo_id: str, **changes: Any) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Send only the given fields (``title``, ``content``, ``related_memo_ids``).

        Fields that are not passed are left unchanged on the server.
        """
        allowed = {"title", "content", "related_memo_ids"}
        unknown = set(changes) - allowed
        if unknown:
            raise TypeError(f"Unknown memo fields: {', '.join(sorted(unknown))}")
        return self._request("PUT", f"/memos/{memo_id}", json_body=changes)

    def delete_memo(self, memo_id: str) -> Tuple[bool, Optional[Error]]:
        data, error = self._request("DELETE", f"/memos/{memo_id}")
        if error:
            return False, error
        return True, None
