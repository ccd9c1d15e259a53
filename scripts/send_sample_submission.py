#!/usr/bin/env python3
"""Send one sample submission through the configured form mailer.

Useful to check SMTP settings and the rendered email without a live form.
Run it with TEST mode configured so only testers receive the message.

Usage:
    python scripts/send_sample_submission.py --config config.yaml \
        --event samples/sample_submission.json --form-id 1FAIpQLSdExampleFormId
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from form_mailer.config.exceptions import ConfigurationError
from form_mailer.main import bootstrap
from form_mailer.notifications.models import NotificationError
from form_mailer.sources.exceptions import SourceError


def print_header(title: str):
    """Print a formatted section header."""
    width = 80
    print("\n" + "=" * width)
    print(f" {title}")
    print("=" * width + "\n")


def main() -> int:
    parser = argparse.ArgumentParser(description="Send a sample form submission notification")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument(
        "--event",
        type=Path,
        default=Path("samples") / "sample_submission.json",
        help="JSON file with the submission payload",
    )
    parser.add_argument("--form-id", default=None, help="Form identifier (overrides the payload)")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    args = parser.parse_args()

    try:
        payload = json.loads(args.event.read_text())
    except (OSError, ValueError) as e:
        print(f"Could not read event file {args.event}: {e}", file=sys.stderr)
        return 1

    try:
        mailer = bootstrap(args.config, args.log_level)
        record = mailer.on_form_submit(payload, args.form_id)
    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except (SourceError, NotificationError, ValueError) as e:
        print(f"Notification failed ({type(e).__name__}): {e}", file=sys.stderr)
        return 1

    print_header("Notification Sent")
    print(json.dumps(record.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
