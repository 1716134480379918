"""Command-line entry point for Mail Capture."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from mail_capture.core import (
    AppSettings,
    ConfigurationError,
    MailSaver,
    configure_logging,
    load_app_settings,
)
from mail_capture.ingestion import MailIngestor
from mail_capture.mailbox import CapturedMailbox


def build_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Mail Capture local SMTP sink")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file containing configuration overrides.",
    )
    subcommands = parser.add_subparsers(dest="command")
    subcommands.add_parser("info", help="Show the active capture configuration.")

    replay = subcommands.add_parser(
        "replay",
        help="Feed raw message files through the ingestion pipeline.",
    )
    replay.add_argument("--sender", required=True, help="Envelope sender.")
    replay.add_argument("--recipient", required=True, help="Envelope recipient.")
    replay.add_argument(
        "files",
        nargs="+",
        type=Path,
        help="Raw submissions, each starting with the 4-line engine preamble.",
    )
    return parser


def execute(args: argparse.Namespace, settings: AppSettings) -> int:
    """Execute the requested CLI command and return an exit status."""
    command = args.command or "info"
    if command == "info":
        _print_info(settings)
        return 0
    if command == "replay":
        return _run_replay(
            settings, sender=args.sender, recipient=args.recipient, files=args.files
        )
    return 2


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_app_settings(env_file=args.env_file)
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1
    configure_logging(settings.logging)
    return execute(args, settings)


def _print_info(settings: AppSettings) -> None:
    domains = settings.capture.relay_domains
    print(f"Storage charset: {settings.capture.storage_charset}")
    if domains:
        print(f"Relay domains: {', '.join(domains)}")
    else:
        print("Relay domains: (none, every recipient is accepted)")


def _run_replay(
    settings: AppSettings, *, sender: str, recipient: str, files: list[Path]
) -> int:
    """Ingest each file and report its outcome."""
    try:
        ingestor = MailIngestor(settings.capture)
    except ConfigurationError as exc:
        print(f"Replay failed: {exc}", file=sys.stderr)
        return 1

    mailbox = CapturedMailbox(lock=ingestor.lock)
    with mailbox.attach(ingestor.hub):
        for path in files:
            accepted_before = len(mailbox.accepted)
            if not _ingest_file(ingestor, sender, recipient, path):
                continue
            if len(mailbox.accepted) > accepted_before:
                record = mailbox.accepted[-1]
                print(f"{path}: ACCEPTED subject={record.subject!r}")
            else:
                record = mailbox.rejected[-1]
                print(f"{path}: REJECTED subject={record.subject!r}")

    print(
        f"Replayed {len(files)} file(s): {len(mailbox.accepted)} accepted, "
        f"{len(mailbox.rejected)} rejected"
    )
    return 0


def _ingest_file(saver: MailSaver, sender: str, recipient: str, path: Path) -> bool:
    """Hand one raw file to ``saver``; return ``False`` when it cannot be read."""
    try:
        with path.open("rb") as raw:
            saver.ingest(sender, recipient, raw)
    except OSError as exc:
        print(f"{path}: cannot read ({exc})", file=sys.stderr)
        return False
    return True


if __name__ == "__main__":
    sys.exit(main())
