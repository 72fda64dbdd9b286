from __future__ import annotations

from watchsync._redact import redact_for_log, redact_url


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "command": "joinConference",
        "jwt": "eyJhbGciOi",
        "nested": {"password": "pw"},
    }

    redacted = redact_for_log(payload)
    assert redacted["command"] == "joinConference"
    assert redacted["jwt"] == "<redacted>"
    assert redacted["nested"]["password"] == "<redacted>"


def test_redact_url_drops_query_tokens() -> None:
    assert redact_url("https://meet.example.org/Room?jwt=abc#config.startWithAudioMuted=true") == (
        "https://meet.example.org/Room?<redacted>"
    )
    assert redact_url("https://meet.example.org/Room") == "https://meet.example.org/Room"


def test_redact_for_log_redacts_urls_in_lists() -> None:
    redacted = redact_for_log({"recentURLs": [{"conference": "https://x/a?jwt=1"}]})
    assert redacted["recentURLs"][0]["conference"] == "https://x/a?<redacted>"


def test_long_conference_url_redacted_then_truncated() -> None:
    url = "https://meet.example.org/" + "Room" * 50 + "?jwt=secret-token"

    redacted = redact_for_log({"conferenceURL": url}, max_string=40)

    value = redacted["conferenceURL"]
    assert value.startswith("https://meet.example.org/RoomRoom")
    assert value.endswith("<truncated>")
    assert "secret-token" not in value
