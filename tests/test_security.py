from tourisma_api.app.core.security import create_access_token, decode_access_token


def test_token_round_trip_carries_subject():
    payload = decode_access_token(create_access_token({"sub": "u1"}))
    assert payload["sub"] == "u1"
    assert "exp" in payload


def test_tampered_token_is_rejected():
    header, payload, signature = create_access_token({"sub": "u1"}).split(".")
    other_payload = create_access_token({"sub": "u3"}).split(".")[1]
    assert decode_access_token(f"{header}.{other_payload}.{signature}") is None
    assert decode_access_token("not-a-token") is None
    assert decode_access_token("a.b.c") is None


def test_expired_token_is_rejected():
    assert decode_access_token(create_access_token({"sub": "u1"}, expires_delta=-10)) is None
