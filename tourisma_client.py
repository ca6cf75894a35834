"""Tourisma API client.

A thin wrapper around the Tourisma HTTP API built on ``requests``.  It
is used by the terminal client (:mod:`tourisma_cli`) and exposes one
method per operation the front-end needs:

* :meth:`login` – start a demo session for a role.
* :meth:`list_experiences` / :meth:`get_experience` – discovery.
* :meth:`create_booking`, :meth:`my_bookings`, :meth:`all_bookings`,
  :meth:`cancel_booking`, :meth:`respond_to_booking` – the booking lifecycle.
* :meth:`list_conversations`, :meth:`get_thread`, :meth:`send_message`,
  :meth:`contact_about`, :meth:`open_support_chat` – messaging.
* :meth:`unread_count` – the header badge.

Every method returns a tuple ``(data, error)``: on success ``error`` is
``None``, on failure ``data`` is ``None`` and ``error`` is a dictionary
with ``status_code`` and ``message``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]

API_PREFIX = "/api/v1"


class TourismaAPI:
    """Client for the Tourisma API."""

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
            base_url: Base URL of the API server, e.g. ``http://127.0.0.1:8000``.
            token: Optional session token.  If set, an ``Authorization``
                header with the value ``Bearer <token>`` is sent with
                every request.
            session: Optional requests session.  If not supplied a
                session is created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request against ``/api/v1``.

        Returns ``(data, None)`` with the parsed JSON body (``None`` for
        empty responses) or ``(None, error)``.
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
            return None, {"status_code": status, "message": str(message)}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------
    def login(self, role: str) -> Result:
        """Log in as the demo user of ``role`` and remember the token."""
        data, error = self._request("POST", "/session/login", json_body={"role": role.upper()})
        if data:
            self.token = data["access_token"]
        return data, error

    def me(self) -> Result:
        return self._request("GET", "/session/me")

    def unread_count(self) -> Tuple[Optional[int], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", "/messages/unread-count")
        return (data["unread"] if data else None), error

    # ------------------------------------------------------------------
    # Experiences
    # ------------------------------------------------------------------
    def list_experiences(
        self,
        category: Optional[str] = None,
        city: Optional[str] = None,
        max_price: Optional[float] = None,
    ) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        params = {k: v for k, v in {"category": category, "city": city, "max_price": max_price}.items() if v is not None}
        data, error = self._request("GET", "/experiences/", params=params)
        return data or [], error

    def get_experience(self, experience_id: str) -> Result:
        return self._request("GET", f"/experiences/{experience_id}")

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------
    def create_booking(
        self,
        experience_id: str,
        date: str,
        *,
        time: str = "09:00",
        adults: int = 1,
        children: int = 0,
    ) -> Result:
        payload = {
            "experience_id": experience_id,
            "date": date,
            "time": time,
            "adults": adults,
            "children": children,
        }
        return self._request("POST", "/bookings/", json_body=payload)

    def my_bookings(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", "/bookings/me")
        return data or [], error

    def all_bookings(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Every booking on the platform (admins only)."""
        data, error = self._request("GET", "/bookings/")
        return data or [], error

    def my_partner(self) -> Result:
        return self._request("GET", "/partners/me")

    def partner_bookings(self, partner_id: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", f"/partners/{partner_id}/bookings")
        return data or [], error

    def cancel_booking(self, booking_id: str) -> Result:
        return self._request("POST", f"/bookings/{booking_id}/cancel")

    def respond_to_booking(self, booking_id: str, action: str) -> Result:
        """Partner action on a booking: ``accept``, ``refuse`` or ``complete``."""
        if action not in {"accept", "refuse", "complete"}:
            return None, {"status_code": None, "message": f"Unknown booking action {action!r}"}
        return self._request("POST", f"/bookings/{booking_id}/{action}")

    # ------------------------------------------------------------------
    # Messaging
    # ------------------------------------------------------------------
    def list_conversations(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", "/conversations/")
        return data or [], error

    def get_thread(self, conversation_id: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", f"/conversations/{conversation_id}/messages")
        return data or [], error

    def send_message(self, receiver_id: str, content: str, conversation_id: Optional[str] = None) -> Result:
        payload: Dict[str, Any] = {"receiver_id": receiver_id, "content": content}
        if conversation_id:
            payload["conversation_id"] = conversation_id
        return self._request("POST", "/messages/", json_body=payload)

    def contact_about(self, experience_id: str) -> Result:
        """Open a conversation with the partner offering ``experience_id``."""
        return self._request("POST", "/conversations/welcome", json_body={"experience_id": experience_id})

    def open_support_chat(self) -> Result:
        return self._request("POST", "/conversations/support")
