"""Google Calendar API wrapper.

Handles OAuth token loading and generation, API client initialization,
and fetching events, colors and the calendar list. This module isolates
all Google-specific code so the grouping and rendering stay clean.
"""

import logging
import os
from pathlib import Path
from typing import Any

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from gcalsync.week import TimeWindow

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]


def load_credentials(
    credentials_path: str,
    token_path: str,
    generate_token: bool = False,
) -> Credentials:
    """Load or refresh Google OAuth credentials.

    Args:
        credentials_path: Path to the OAuth client credentials JSON file.
        token_path: Path to the saved token JSON file.
        generate_token: Run the browser consent flow if no token is saved.

    Returns:
        Valid Credentials object.

    Raises:
        FileNotFoundError: If the token file doesn't exist and generation is off.
        ValueError: If the token is expired and can't be refreshed.
    """
    token_file = Path(token_path)
    if not token_file.exists():
        if not generate_token:
            raise FileNotFoundError(
                f"Token file not found at {token_path}. "
                "Run 'python main.py --tkngen' to authenticate."
            )
        creds = generate_credentials(credentials_path)
        save_token(token_file, creds)
        return creds

    creds = Credentials.from_authorized_user_file(str(token_file), SCOPES)

    if creds and creds.expired and creds.refresh_token:
        logger.info("Refreshing expired token...")
        creds.refresh(Request())
        save_token(token_file, creds)
        logger.info("Token refreshed and saved.")
    elif not creds or not creds.valid:
        raise ValueError(
            "Token is invalid and cannot be refreshed. "
            "Run 'python main.py --tkngen' to re-authenticate."
        )

    return creds


def generate_credentials(credentials_path: str) -> Credentials:
    """Run the installed-app OAuth flow in the browser."""
    logger.info("Starting Google Calendar authentication using %s", credentials_path)
    flow = InstalledAppFlow.from_client_secrets_file(credentials_path, SCOPES)
    return flow.run_local_server(port=0)


def save_token(token_file: Path, creds: Credentials) -> None:
    """Save credentials to the token file, readable only by the owner."""
    logger.info("Saving credential file to: %s", token_file)
    fd = os.open(token_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as f:
        f.write(creds.to_json())


def build_service(creds: Credentials) -> Any:
    """Build a Calendar v3 API client."""
    return build("calendar", "v3", credentials=creds, cache_discovery=False)


def fetch_events(
    service: Any,
    calendar_id: str,
    window: TimeWindow,
    timezone: str = "",
) -> list[dict[str, Any]]:
    """Fetch single (expanded) events of a calendar inside a window.

    Args:
        service: Calendar API client from build_service().
        calendar_id: Calendar ID (e.g. "primary").
        window: The week window to query.
        timezone: Optional IANA zone the API should express times in.

    Returns:
        Raw event dicts ordered by start time.
    """
    params: dict[str, Any] = {
        "calendarId": calendar_id,
        "timeMin": window.time_min,
        "timeMax": window.time_max,
        "showDeleted": False,
        "singleEvents": True,
        "orderBy": "startTime",
    }
    if timezone:
        params["timeZone"] = timezone

    logger.info("Fetching events from calendar '%s' (%s to %s)", calendar_id, window.time_min, window.time_max)

    events: list[dict[str, Any]] = []
    page_token = None
    while True:
        if page_token:
            params["pageToken"] = page_token
        events_result = service.events().list(**params).execute()
        events.extend(events_result.get("items", []))
        page_token = events_result.get("nextPageToken")
        if not page_token:
            break

    logger.info("Retrieved %d events from calendar '%s'", len(events), calendar_id)
    return events


def fetch_colors(service: Any) -> dict[str, dict[str, str]]:
    """Fetch the event color table, colorId -> {"background", "foreground"}."""
    colors = service.colors().get().execute()
    return colors.get("event", {})


def list_calendars(service: Any) -> list[tuple[str, str]]:
    """List the user's calendars as (summary, id) pairs."""
    result = service.calendarList().list().execute()
    return [(item.get("summary", ""), item["id"]) for item in result.get("items", [])]
