import json
from unittest.mock import MagicMock

import requests

from tourisma_cli import SessionCache, TourismaCLI, build_parser
from tourisma_client import TourismaAPI

KARIM = {"id": "u1", "name": "Karim Alaoui", "email": "karim@test.com", "role": "CLIENT"}
ADMIN = {"id": "u3", "name": "Admin Tourisma", "email": "admin@tourisma.ma", "role": "ADMIN"}


def _response(status_code, body=None):
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = json.dumps(body).encode("utf-8") if body is not None else b""
    resp.headers["Content-Type"] = "application/json"
    return resp


def _api(*responses):
    session = MagicMock(spec=requests.Session)
    session.request.side_effect = list(responses)
    return TourismaAPI(base_url="http://api.test/", session=session), session


def test_client_sends_bearer_token_and_parses_json():
    api, session = _api(_response(200, {"unread": 3}))
    api.token = "tok"
    count, error = api.unread_count()
    assert (count, error) == (3, None)
    kwargs = session.request.call_args.kwargs
    assert kwargs["url"] == "http://api.test/api/v1/messages/unread-count"
    assert kwargs["headers"] == {"Authorization": "Bearer tok"}


def test_client_reports_http_errors():
    api, _ = _api(_response(409, {"detail": "Invalid booking transition: CONFIRMED -> CANCELLED"}))
    data, error = api.cancel_booking("b2")
    assert data is None
    assert error == {"status_code": 409, "message": "Invalid booking transition: CONFIRMED -> CANCELLED"}


def test_client_reports_connection_errors():
    api, _ = _api(requests.ConnectionError("refused"))
    data, error = api.me()
    assert data is None and error["status_code"] is None


def test_session_cache_round_trip(tmp_path):
    cache = SessionCache(str(tmp_path))
    assert cache.load() is None
    cache.save(KARIM, "tok")
    assert (tmp_path / "tourisma_user.json").exists()
    assert cache.load() == {"user": KARIM, "access_token": "tok"}
    assert cache.clear() is True
    assert cache.load() is None
    assert cache.clear() is False


def test_corrupt_session_file_is_ignored(tmp_path):
    (tmp_path / "tourisma_user.json").write_text("{not json", encoding="utf-8")
    assert SessionCache(str(tmp_path)).load() is None


def test_login_writes_session_and_logout_removes_it(tmp_path):
    api, session = _api(_response(200, {"access_token": "tok", "token_type": "bearer", "user": KARIM}))
    cache = SessionCache(str(tmp_path))
    lines = []
    cli = TourismaCLI(api, cache, out=lines.append)
    assert cli.login("client") == 0
    assert session.request.call_args.kwargs["json"] == {"role": "CLIENT"}
    assert cache.load()["user"]["id"] == "u1"
    assert lines == ["Logged in as Karim Alaoui (CLIENT)"]

    # A new process picks the session up from the cache.
    restored = TourismaCLI(TourismaAPI(base_url="http://api.test"), cache, out=lines.append)
    assert restored.user["id"] == "u1" and restored.api.token == "tok"

    restored.logout()
    assert cache.load() is None


def test_commands_require_login(tmp_path):
    lines = []
    cli = TourismaCLI(TourismaAPI(base_url="http://api.test"), SessionCache(str(tmp_path)), out=lines.append)
    assert cli.bookings() == 1
    assert lines[0].startswith("Not logged in")


def test_admin_bookings_list_the_whole_platform(tmp_path):
    cache = SessionCache(str(tmp_path))
    cache.save(ADMIN, "tok")
    row = {
        "id": "b2", "experience_id": "e2", "client_id": "u1", "date": "2024-03-12", "time": "19:00",
        "adults": 2, "children": 0, "total_price": 1600, "status": "CONFIRMED", "created_at": "2023-12-05",
        "client": KARIM, "experience_name": "Dîner spectacle sous les étoiles à Agafay",
        "partner_name": "Agafay Luxury Camp",
    }
    api, session = _api(_response(200, [row]))
    lines = []
    assert TourismaCLI(api, cache, out=lines.append).bookings() == 0
    assert session.request.call_args.kwargs["url"] == "http://api.test/api/v1/bookings/"
    assert len(lines) == 1
    assert "Karim Alaoui" in lines[0] and "(Agafay Luxury Camp)" in lines[0]


def test_contact_sends_only_the_experience_id(tmp_path):
    cache = SessionCache(str(tmp_path))
    cache.save(KARIM, "tok")
    api, session = _api(_response(201, {"id": "c3", "last_message": "Bonjour"}))
    lines = []
    assert TourismaCLI(api, cache, out=lines.append).contact("e2") == 0
    assert session.request.call_args.kwargs["json"] == {"experience_id": "e2"}
    assert lines == ["Conversation c3: Bonjour"]


def test_watch_prints_badge_changes_only(tmp_path):
    cache = SessionCache(str(tmp_path))
    cache.save(KARIM, "tok")
    api, _ = _api(_response(200, {"unread": 1}), _response(200, {"unread": 1}), _response(200, {"unread": 2}))
    lines, sleeps = [], []
    cli = TourismaCLI(api, cache, out=lines.append)
    assert cli.watch(5, iterations=3, sleep=sleeps.append) == 0
    assert lines == ["Unread messages: 1", "Unread messages: 2"]
    assert sleeps == [5, 5]


def test_watch_backs_off_when_server_is_down(tmp_path):
    cache = SessionCache(str(tmp_path))
    cache.save(KARIM, "tok")
    api, _ = _api(requests.ConnectionError("down"), _response(200, {"unread": 0}))
    sleeps = []
    cli = TourismaCLI(api, cache, out=lambda line: None)
    cli.watch(0.5, iterations=2, sleep=sleeps.append)
    assert sleeps[0] >= 1
    assert cli.retry_attempts == 0


def test_parser_defaults():
    args = build_parser().parse_args(["book", "e1", "2024-04-01", "--adults", "2", "--children", "1"])
    assert (args.experience_id, args.time, args.adults, args.children) == ("e1", "09:00", 2, 1)
    assert build_parser().parse_args(["contact", "e4"]).experience_id == "e4"
