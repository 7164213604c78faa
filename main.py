"""gcalsync - Entry Point.

Renders the current week of a Google Calendar into two HTML fragments
(a kiosk display view and a print view) and publishes them atomically.

Usage:
    python main.py                      # Sync the current week (Monday-Sunday)
    python main.py --config config.json # Override settings from a JSON file
    python main.py --tkngen             # Authenticate in the browser if needed
    python main.py --list               # List calendars and their IDs
"""

import argparse
import logging
import sys

from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from config.settings import load_settings
from gcalsync.errors import GcalSyncError
from gcalsync.google_client import build_service, list_calendars, load_credentials
from gcalsync.sync import sync_schedule

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("main")


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run one sync, or list calendars.

    Returns:
        Process exit status.
    """
    parser = argparse.ArgumentParser(description="Render this week's calendar into HTML fragments.")
    parser.add_argument("--config", default=None, help="JSON configuration file.")
    parser.add_argument(
        "--tkngen",
        action="store_true",
        dest="generate_token",
        help="Run the OAuth browser flow when no token is saved.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        dest="list_calendars",
        help="List calendars instead of syncing.",
    )
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
        creds = load_credentials(
            settings.google_credentials_path,
            settings.google_token_path,
            generate_token=args.generate_token,
        )
        service = build_service(creds)

        if args.list_calendars:
            for summary, calendar_id in list_calendars(service):
                print(f'"{summary}": {calendar_id}')
            return 0

        week = sync_schedule(service, settings)
    except (GcalSyncError, HttpError, RefreshError, FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    if week is None:
        logger.info("Nothing published, previous artifacts left in place")
    elif not week:
        logger.info("No events in this week after filtering, published empty %s and %s",
                    settings.print_output, settings.display_output)
    else:
        logger.info("Published %s and %s (%d days)", settings.print_output, settings.display_output, len(week))
    return 0


if __name__ == "__main__":
    sys.exit(main())
