"""Tests for the Google Calendar API wrapper."""

import json
import os
import stat
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from gcalsync.google_client import (
    SCOPES,
    fetch_colors,
    fetch_events,
    list_calendars,
    load_credentials,
)
from gcalsync.week import calculate_week_window

MSK = timezone(timedelta(hours=3))
WINDOW = calculate_week_window(datetime(2025, 2, 19, 12, 0, tzinfo=MSK))


# ---------------------------------------------------------------------------
# fetch_events
# ---------------------------------------------------------------------------


class TestFetchEvents:
    def test_query_parameters(self) -> None:
        service = MagicMock()
        service.events.return_value.list.return_value.execute.return_value = {
            "items": [{"id": "e1"}],
        }

        events = fetch_events(service, "primary", WINDOW)

        assert events == [{"id": "e1"}]
        service.events.return_value.list.assert_called_once_with(
            calendarId="primary",
            timeMin="2025-02-17T00:00:00+03:00",
            timeMax="2025-02-24T00:00:00+03:00",
            showDeleted=False,
            singleEvents=True,
            orderBy="startTime",
        )

    def test_timezone_is_passed_when_set(self) -> None:
        service = MagicMock()
        service.events.return_value.list.return_value.execute.return_value = {}

        assert fetch_events(service, "primary", WINDOW, timezone="Europe/Moscow") == []
        kwargs = service.events.return_value.list.call_args.kwargs
        assert kwargs["timeZone"] == "Europe/Moscow"

    def test_follows_pages_in_order(self) -> None:
        service = MagicMock()
        service.events.return_value.list.return_value.execute.side_effect = [
            {"items": [{"id": "e1"}, {"id": "e2"}], "nextPageToken": "page-2"},
            {"items": [{"id": "e3"}]},
        ]

        events = fetch_events(service, "primary", WINDOW)

        assert [e["id"] for e in events] == ["e1", "e2", "e3"]
        calls = service.events.return_value.list.call_args_list
        assert len(calls) == 2
        assert "pageToken" not in calls[0].kwargs
        assert calls[1].kwargs["pageToken"] == "page-2"


class TestFetchColors:
    def test_returns_event_table(self) -> None:
        service = MagicMock()
        service.colors.return_value.get.return_value.execute.return_value = {
            "calendar": {"1": {"background": "#ac725e", "foreground": "#1d1d1d"}},
            "event": {"1": {"background": "#a4bdfc", "foreground": "#1d1d1d"}},
        }
        assert fetch_colors(service) == {"1": {"background": "#a4bdfc", "foreground": "#1d1d1d"}}

    def test_missing_event_section(self) -> None:
        service = MagicMock()
        service.colors.return_value.get.return_value.execute.return_value = {}
        assert fetch_colors(service) == {}


class TestListCalendars:
    def test_summary_and_id_pairs(self) -> None:
        service = MagicMock()
        service.calendarList.return_value.list.return_value.execute.return_value = {
            "items": [
                {"summary": "Family", "id": "family@group.calendar.google.com"},
                {"id": "primary"},
            ],
        }
        assert list_calendars(service) == [
            ("Family", "family@group.calendar.google.com"),
            ("", "primary"),
        ]


# ---------------------------------------------------------------------------
# load_credentials
# ---------------------------------------------------------------------------


class TestLoadCredentials:
    def test_missing_token_without_generation(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError, match="--tkngen"):
            load_credentials("credentials.json", str(tmp_path / "token.json"))

    @patch("gcalsync.google_client.InstalledAppFlow")
    def test_generates_and_saves_token(self, mock_flow, tmp_path) -> None:
        creds = MagicMock()
        creds.to_json.return_value = json.dumps({"token": "abc"})
        mock_flow.from_client_secrets_file.return_value.run_local_server.return_value = creds
        token_path = tmp_path / "token.json"

        result = load_credentials("credentials.json", str(token_path), generate_token=True)

        assert result is creds
        mock_flow.from_client_secrets_file.assert_called_once_with("credentials.json", SCOPES)
        assert json.loads(token_path.read_text()) == {"token": "abc"}
        assert stat.S_IMODE(os.stat(token_path).st_mode) == 0o600

    @patch("gcalsync.google_client.Credentials")
    def test_refreshes_expired_token(self, mock_credentials, tmp_path) -> None:
        token_path = tmp_path / "token.json"
        token_path.write_text("{}")
        creds = MagicMock(expired=True, refresh_token="refresh")
        creds.to_json.return_value = '{"token": "fresh"}'
        mock_credentials.from_authorized_user_file.return_value = creds

        assert load_credentials("credentials.json", str(token_path)) is creds
        creds.refresh.assert_called_once()
        assert token_path.read_text() == '{"token": "fresh"}'

    @patch("gcalsync.google_client.Credentials")
    def test_valid_token_is_used_as_is(self, mock_credentials, tmp_path) -> None:
        token_path = tmp_path / "token.json"
        token_path.write_text("{}")
        creds = MagicMock(expired=False, valid=True)
        mock_credentials.from_authorized_user_file.return_value = creds

        assert load_credentials("credentials.json", str(token_path)) is creds
        creds.refresh.assert_not_called()

    @patch("gcalsync.google_client.Credentials")
    def test_invalid_token(self, mock_credentials, tmp_path) -> None:
        token_path = tmp_path / "token.json"
        token_path.write_text("{}")
        mock_credentials.from_authorized_user_file.return_value = MagicMock(
            expired=True, refresh_token=None, valid=False,
        )

        with pytest.raises(ValueError, match="re-authenticate"):
            load_credentials("credentials.json", str(token_path))
