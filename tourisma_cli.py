"""Terminal client for the Tourisma marketplace.

The command line plays the part of the web front-end: you pick a demo
role to log in, and the selected user is remembered between runs in a
small session file named after the ``tourisma_user`` key.  The file is
written on login and removed on logout.

Commands::

    python tourisma_cli.py login --role client
    python tourisma_cli.py whoami
    python tourisma_cli.py experiences --city marrakech --max-price 500
    python tourisma_cli.py book e1 2024-06-01 --adults 2 --children 1
    python tourisma_cli.py bookings
    python tourisma_cli.py respond b3 accept
    python tourisma_cli.py conversations
    python tourisma_cli.py thread c1
    python tourisma_cli.py send u2 "Bonjour !"
    python tourisma_cli.py contact e1
    python tourisma_cli.py support
    python tourisma_cli.py watch
    python tourisma_cli.py logout

``watch`` refreshes the unread-messages badge every
``UNREAD_POLL_SECONDS`` seconds until interrupted, backing off when the
server cannot be reached.

Environment variables:

``TOURISMA_API_URL``
    Base URL of the API server.  Defaults to ``http://127.0.0.1:8000``.

``SESSION_DIR``
    Directory holding the session file.  Defaults to ``~/.tourisma``.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import random
import sys
import time
from typing import Any, Callable, Dict, List, Optional

from tourisma_api.app.core.config import settings
from tourisma_client import TourismaAPI


logger = logging.getLogger(__name__)

SESSION_KEY = "tourisma_user"


class SessionCache:
    """The logged-in user and token, persisted as JSON under ``tourisma_user``."""

    def __init__(self, directory: Optional[str] = None) -> None:
        self.directory = directory or settings.session_dir
        self.path = os.path.join(self.directory, f"{SESSION_KEY}.json")

    def load(self) -> Optional[Dict[str, Any]]:
        """Return ``{"user": ..., "access_token": ...}`` or ``None`` when logged out."""
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return None
        if not isinstance(data, dict) or "user" not in data or "access_token" not in data:
            return None
        return data

    def save(self, user: Dict[str, Any], access_token: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"user": user, "access_token": access_token}, f, ensure_ascii=False, indent=2)

    def clear(self) -> bool:
        """Remove the session file.  Returns ``False`` if there was none."""
        try:
            os.remove(self.path)
        except FileNotFoundError:
            return False
        return True


class TourismaCLI:
    """Command implementations sharing one API client and session cache."""

    def __init__(self, api: TourismaAPI, cache: SessionCache, out: Callable[[str], None] = print) -> None:
        self.api = api
        self.cache = cache
        self.out = out
        self.retry_attempts = 0
        session = cache.load()
        self.user: Optional[Dict[str, Any]] = session["user"] if session else None
        if session:
            self.api.token = session["access_token"]

    def _fail(self, error: Dict[str, Any]) -> int:
        self.out(f"Error: {error.get('message')}")
        return 1

    def _require_login(self) -> bool:
        if self.user is None:
            self.out("Not logged in. Run: login --role client|partner|admin")
            return False
        return True

    # ------------------------------------------------------------------
    # Session commands
    # ------------------------------------------------------------------
    def login(self, role: str) -> int:
        data, error = self.api.login(role)
        if error:
            return self._fail(error)
        self.user = data["user"]
        self.cache.save(self.user, data["access_token"])
        self.out(f"Logged in as {self.user['name']} ({self.user['role']})")
        return 0

    def logout(self) -> int:
        self.cache.clear()
        self.user = None
        self.api.token = None
        self.out("Logged out")
        return 0

    def whoami(self) -> int:
        if not self._require_login():
            return 1
        self.out(f"{self.user['name']} <{self.user['email']}> [{self.user['role']}] id={self.user['id']}")
        return 0

    # ------------------------------------------------------------------
    # Discovery and bookings
    # ------------------------------------------------------------------
    def experiences(self, category: Optional[str], city: Optional[str], max_price: Optional[float]) -> int:
        items, error = self.api.list_experiences(category, city, max_price)
        if error:
            return self._fail(error)
        for e in items:
            self.out(f"{e['id']:>4}  {e['price']:>7} MAD  {e['rating']:.1f}*  {e['location']:<12} {e['title']}")
        if not items:
            self.out("No experiences match these filters")
        return 0

    def bookings(self) -> int:
        if not self._require_login():
            return 1
        if self.user["role"] == "PARTNER":
            # A partner user sees the bookings of the first partner account they own.
            partner, error = self.api.my_partner()
            if error:
                return self._fail(error)
            rows, error = self.api.partner_bookings(partner["id"])
            if error:
                return self._fail(error)
            for b in rows:
                client = (b.get("client") or {}).get("name", "?")
                self.out(f"{b['id']:>4}  {b['date']} {b['time']}  {b['status']:<9} {b['total_price']:>8}  {client} - {b.get('experience_name')}")
            return 0
        if self.user["role"] == "ADMIN":
            rows, error = self.api.all_bookings()
            if error:
                return self._fail(error)
            for b in rows:
                client = (b.get("client") or {}).get("name", "?")
                self.out(
                    f"{b['id']:>4}  {b['date']} {b['time']}  {b['status']:<9} {b['total_price']:>8}  "
                    f"{client} - {b.get('experience_name')} ({b.get('partner_name')})"
                )
            if not rows:
                self.out("No bookings on the platform")
            return 0
        rows, error = self.api.my_bookings()
        if error:
            return self._fail(error)
        for b in rows:
            title = (b.get("experience") or {}).get("title", b["experience_id"])
            self.out(f"{b['id']:>4}  {b['date']} {b['time']}  {b['status']:<9} {b['total_price']:>8}  {title}")
        if not rows:
            self.out("No bookings yet")
        return 0

    def book(self, experience_id: str, date: str, time_: str, adults: int, children: int) -> int:
        if not self._require_login():
            return 1
        booking, error = self.api.create_booking(experience_id, date, time=time_, adults=adults, children=children)
        if error:
            return self._fail(error)
        self.out(f"Booking {booking['id']} created ({booking['status']}), total {booking['total_price']} MAD")
        return 0

    def cancel(self, booking_id: str) -> int:
        if not self._require_login():
            return 1
        booking, error = self.api.cancel_booking(booking_id)
        if error:
            return self._fail(error)
        self.out(f"Booking {booking['id']} is now {booking['status']}")
        return 0

    def respond(self, booking_id: str, action: str) -> int:
        if not self._require_login():
            return 1
        booking, error = self.api.respond_to_booking(booking_id, action)
        if error:
            return self._fail(error)
        self.out(f"Booking {booking['id']} is now {booking['status']}")
        return 0

    # ------------------------------------------------------------------
    # Messaging
    # ------------------------------------------------------------------
    def conversations(self) -> int:
        if not self._require_login():
            return 1
        items, error = self.api.list_conversations()
        if error:
            return self._fail(error)
        for c in items:
            if c["client_id"] == self.user["id"]:
                other = (c.get("partner") or {}).get("company_name", c["partner_id"])
            else:
                other = (c.get("client") or {}).get("name", c["client_id"])
            badge = f" ({c['unread']} new)" if c["unread"] else ""
            self.out(f"{c['id']:>16}  {other}{badge}: {c['last_message']}")
        if not items:
            self.out("No conversations")
        return 0

    def thread(self, conversation_id: str) -> int:
        if not self._require_login():
            return 1
        messages, error = self.api.get_thread(conversation_id)
        if error:
            return self._fail(error)
        for m in messages:
            who = "me" if m["sender_id"] == self.user["id"] else m["sender_id"]
            self.out(f"[{m['timestamp']}] {who}: {m['content']}")
        return 0

    def send(self, receiver_id: str, content: str, conversation_id: Optional[str]) -> int:
        if not self._require_login():
            return 1
        data, error = self.api.send_message(receiver_id, content, conversation_id)
        if error:
            return self._fail(error)
        conversation = data.get("conversation")
        self.out(f"Sent in {conversation['id']}" if conversation else "Sent (no conversation)")
        return 0

    def contact(self, experience_id: str) -> int:
        if not self._require_login():
            return 1
        conversation, error = self.api.contact_about(experience_id)
        if error:
            return self._fail(error)
        self.out(f"Conversation {conversation['id']}: {conversation['last_message']}")
        return 0

    def support(self) -> int:
        if not self._require_login():
            return 1
        conversation, error = self.api.open_support_chat()
        if error:
            return self._fail(error)
        self.out(f"Support conversation {conversation['id']}: {conversation['last_message']}")
        return 0

    # ------------------------------------------------------------------
    # Unread badge polling
    # ------------------------------------------------------------------
    def _backoff_delay(self) -> float:
        """Exponential delay with jitter after a failed poll, capped at 60 s."""
        self.retry_attempts += 1
        return min(2 ** (self.retry_attempts - 1), 60) + random.random()

    def poll_unread(self) -> Optional[int]:
        count, error = self.api.unread_count()
        if error:
            return None
        self.retry_attempts = 0
        return count

    def watch(self, interval: float, iterations: Optional[int] = None, sleep: Callable[[float], None] = time.sleep) -> int:
        """Print the unread badge every ``interval`` seconds.

        Runs until interrupted, or for ``iterations`` polls when given.
        """
        if not self._require_login():
            return 1
        last: Optional[int] = None
        done = 0
        try:
            while iterations is None or done < iterations:
                count = self.poll_unread()
                delay = interval
                if count is None:
                    delay = max(interval, self._backoff_delay())
                    logger.warning("Unread poll failed #%d, retrying in %.1fs", self.retry_attempts, delay)
                elif count != last:
                    self.out(f"Unread messages: {count}")
                    last = count
                done += 1
                if iterations is None or done < iterations:
                    sleep(delay)
        except KeyboardInterrupt:
            logger.info("Stopped watching unread messages.")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tourisma", description="Tourisma terminal client")
    parser.add_argument("--api-url", default=settings.api_url, help="API base URL")
    parser.add_argument("--session-dir", default=settings.session_dir, help="Directory of the session file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Log in as a demo role")
    login.add_argument("--role", required=True, choices=["client", "partner", "admin"])
    sub.add_parser("logout", help="Forget the current session")
    sub.add_parser("whoami", help="Show the logged-in user")

    exp = sub.add_parser("experiences", help="Search experiences")
    exp.add_argument("--category")
    exp.add_argument("--city")
    exp.add_argument("--max-price", type=float)

    sub.add_parser("bookings", help="List your bookings (or your partner's)")
    book = sub.add_parser("book", help="Book an experience")
    book.add_argument("experience_id")
    book.add_argument("date", help="YYYY-MM-DD")
    book.add_argument("--time", default="09:00")
    book.add_argument("--adults", type=int, default=1)
    book.add_argument("--children", type=int, default=0)
    cancel = sub.add_parser("cancel", help="Cancel one of your pending bookings")
    cancel.add_argument("booking_id")
    respond = sub.add_parser("respond", help="Accept, refuse or complete a booking (partners)")
    respond.add_argument("booking_id")
    respond.add_argument("action", choices=["accept", "refuse", "complete"])

    sub.add_parser("conversations", help="List conversations")
    thread = sub.add_parser("thread", help="Show a conversation and mark it read")
    thread.add_argument("conversation_id")
    send = sub.add_parser("send", help="Send a message to a user")
    send.add_argument("receiver_id")
    send.add_argument("content")
    send.add_argument("--conversation")
    contact = sub.add_parser("contact", help="Contact the partner offering an experience")
    contact.add_argument("experience_id")
    sub.add_parser("support", help="Open the support chat")

    watch = sub.add_parser("watch", help="Poll the unread-messages badge")
    watch.add_argument("--interval", type=float, default=settings.unread_poll_seconds)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    cli = TourismaCLI(TourismaAPI(base_url=args.api_url), SessionCache(args.session_dir))
    handlers: Dict[str, Callable[[], int]] = {
        "login": lambda: cli.login(args.role),
        "logout": cli.logout,
        "whoami": cli.whoami,
        "experiences": lambda: cli.experiences(args.category, args.city, args.max_price),
        "bookings": cli.bookings,
        "book": lambda: cli.book(args.experience_id, args.date, args.time, args.adults, args.children),
        "cancel": lambda: cli.cancel(args.booking_id),
        "respond": lambda: cli.respond(args.booking_id, args.action),
        "conversations": cli.conversations,
        "thread": lambda: cli.thread(args.conversation_id),
        "send": lambda: cli.send(args.receiver_id, args.content, args.conversation),
        "contact": lambda: cli.contact(args.experience_id),
        "support": cli.support,
        "watch": lambda: cli.watch(args.interval),
    }
    return handlers[args.command]()


if __name__ == "__main__":
    sys.exit(main())
