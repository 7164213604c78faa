"""Global Settings - Loads configuration from environment variables.

Centralizes all configuration so the sync pipeline doesn't read env vars
directly. An optional JSON config file can override the environment.
"""

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Keys used by config.json files written for the original tool
LEGACY_KEYS = {
    "CalendarId": "calendar_id",
    "DisplayOutput": "display_output",
    "PrintOutput": "print_output",
}


@dataclass
class Settings:
    """Application-wide settings loaded from environment variables."""

    # Google Calendar
    google_credentials_path: str = "credentials.json"
    google_token_path: str = "token.json"
    calendar_id: str = "primary"

    # Artifacts
    display_output: str = "display.html"
    print_output: str = "print.html"
    template_dir: str = "templates"
    display_template: str = "display.html"
    print_template: str = "print.html"

    # User preferences
    day_locale: str = "ru"
    user_timezone: str = ""


def load_settings(config_path: str | None = None) -> Settings:
    """Load settings from environment variables with sensible defaults.

    Environment variables:
        GOOGLE_CALENDAR_CREDENTIALS_PATH: Path to Google OAuth credentials.json
        GOOGLE_CALENDAR_TOKEN_PATH: Path to saved OAuth token.json
        CALENDAR_ID: Calendar to read (default: "primary")
        DISPLAY_OUTPUT, PRINT_OUTPUT: Destination paths of the two artifacts
        TEMPLATE_DIR, DISPLAY_TEMPLATE, PRINT_TEMPLATE: Template locations
        DAY_LOCALE: Language of day names ("ru" or "en")
        USER_TIMEZONE: IANA timezone string, empty for system local time

    Args:
        config_path: Optional JSON file whose keys override the environment.

    Returns:
        A populated Settings instance.

    Raises:
        FileNotFoundError: If config_path is given but doesn't exist.
        ValueError: If the config file is not a JSON object.
    """
    settings = Settings(
        google_credentials_path=os.getenv("GOOGLE_CALENDAR_CREDENTIALS_PATH", "credentials.json"),
        google_token_path=os.getenv("GOOGLE_CALENDAR_TOKEN_PATH", "token.json"),
        calendar_id=os.getenv("CALENDAR_ID", "primary"),
        display_output=os.getenv("DISPLAY_OUTPUT", "display.html"),
        print_output=os.getenv("PRINT_OUTPUT", "print.html"),
        template_dir=os.getenv("TEMPLATE_DIR", "templates"),
        display_template=os.getenv("DISPLAY_TEMPLATE", "display.html"),
        print_template=os.getenv("PRINT_TEMPLATE", "print.html"),
        day_locale=os.getenv("DAY_LOCALE", "ru"),
        user_timezone=os.getenv("USER_TIMEZONE", ""),
    )

    if config_path:
        _apply_config_file(settings, Path(config_path))

    return settings


def _apply_config_file(settings: Settings, path: Path) -> None:
    """Override settings with the values found in a JSON config file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found at {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Config file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")

    known = {f.name for f in fields(Settings)}
    for key, value in data.items():
        name = LEGACY_KEYS.get(key, key)
        if name in known:
            setattr(settings, name, str(value))
