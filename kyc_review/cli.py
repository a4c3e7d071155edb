"""Command-line review of pending KYC applications."""
import argparse
import asyncio
import getpass
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

from kyc_review.core.config import ReviewSettings, load_settings
from kyc_review.core.logging import configure_logging
from kyc_review.core.models import Notification, ReviewSnapshot
from kyc_review.reporting.sinks import write_csv, write_excel
from kyc_review.review.controller import ReviewSessionController
from kyc_review.review.workflow import record_details, records_to_rows


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI entry point."""

    parser = argparse.ArgumentParser(description="Review pending KYC applications")
    parser.add_argument("--base-url", help="KYC service base URL (defaults to KYC_API_BASE_URL)")
    parser.add_argument("--username", help="Admin username (defaults to KYC_ADMIN_USERNAME)")
    parser.add_argument("--password", help="Admin password (defaults to KYC_ADMIN_PASSWORD)")
    parser.add_argument("--env-file", type=Path, help="Env file to load before reading settings")

    commands = parser.add_subparsers(dest="command", required=True)

    pending = commands.add_parser("pending", help="List the pending queue")
    pending.add_argument("--output", type=Path, help="Also write the queue to this file")
    pending.add_argument(
        "--format",
        choices=["csv", "excel"],
        default="csv",
        help="File format used with --output",
    )

    show = commands.add_parser("show", help="Show one pending application")
    show.add_argument("kyc_id", type=int)

    approve = commands.add_parser("approve", help="Approve a pending application")
    approve.add_argument("kyc_id", type=int)

    reject = commands.add_parser("reject", help="Reject a pending application")
    reject.add_argument("kyc_id", type=int)
    reject.add_argument("--reason", default="", help="Optional rejection reason")
    return parser


def _build_controller(settings: ReviewSettings) -> ReviewSessionController:
    return ReviewSessionController.from_settings(settings)


def _print_queue(snapshot: ReviewSnapshot) -> None:
    rows = records_to_rows(snapshot.records)
    print(f"{len(rows)} applications awaiting review")
    for row in rows:
        print(f"  #{row['ID']} user {row['User ID']}: {row['Name']} <{row['Email']}> {row['Status']}")


async def _run(args: argparse.Namespace, settings: ReviewSettings) -> int:
    controller = _build_controller(settings)
    seen: Dict[int, Notification] = {}

    def collect(snapshot: ReviewSnapshot) -> None:
        for notification in snapshot.notifications:
            seen.setdefault(notification.id, notification)

    controller.subscribe(collect)

    username = args.username or settings.admin_username or input("Admin username: ")
    password = args.password or settings.admin_password or getpass.getpass("Admin password: ")

    exit_code = 0
    login = await controller.login(username, password)
    if not login.ok:
        exit_code = 1
    elif args.command == "pending":
        snapshot = controller.snapshot()
        _print_queue(snapshot)
        if args.output:
            rows = records_to_rows(snapshot.records)
            if args.format == "excel":
                write_excel(rows, args.output)
            else:
                write_csv(rows, args.output)
            print(f"Wrote {args.output}")
    elif args.command == "show":
        opened = controller.open_details(args.kyc_id)
        if opened.ok:
            for label, value in record_details(opened.value):
                print(f"{label:>15}: {value}")
        else:
            print(f"KYC {args.kyc_id} is not in the pending queue")
            exit_code = 1
    elif args.command == "approve":
        exit_code = 0 if (await controller.approve(args.kyc_id)).ok else 1
    elif args.command == "reject":
        exit_code = 0 if (await controller.reject(args.kyc_id, args.reason)).ok else 1

    notifications: List[Notification] = sorted(seen.values(), key=lambda item: item.id)
    for notification in notifications:
        print(f"[{notification.kind}] {notification.message}")
    # Expiry timers would outlive the loop asyncio.run is about to close.
    controller.notifications.clear()
    if exit_code == 0 and any(item.kind == "error" for item in notifications):
        exit_code = 1
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for reviewing the KYC queue from the command line."""

    configure_logging()
    args = build_parser().parse_args(argv)
    settings = load_settings(args.env_file)
    if args.base_url:
        settings = replace(settings, api_base_url=args.base_url.rstrip("/"))
    return asyncio.run(_run(args, settings))


if __name__ == "__main__":
    raise SystemExit(main())
