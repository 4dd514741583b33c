"""
Fetch every place once from the CLI and write it in the chosen format.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from app.config import load_settings
from app.connectors.places_connector import PlacesConnector
from app.domain.place import Place
from app.errors import ConfigError, UnsupportedFormatError, UpstreamFetchError
from app.main import configure_logging
from app.serializers import get_serializer


def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch all places and serialize them.")
    parser.add_argument("--env", dest="env_path", default=".env", help="Path to the env file.")
    parser.add_argument("--format", dest="format", default="json", help="json or gob.")
    parser.add_argument(
        "--output",
        dest="output",
        default=None,
        help="Output file; stdout when omitted.",
    )
    args = parser.parse_args()

    try:
        settings = load_settings(args.env_path)
        serializer = get_serializer(args.format, Place)
    except (ConfigError, UnsupportedFormatError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level)
    connector = PlacesConnector(settings=settings.places_api)
    try:
        payload = serializer.serialize(connector.fetch_all_places())
    except UpstreamFetchError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        connector.close()

    if args.output:
        Path(args.output).write_bytes(payload)
    else:
        sys.stdout.buffer.write(payload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
