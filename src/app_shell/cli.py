import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from src.adapters.clock import FrozenClock, SystemClock
from src.adapters.memory import EventStore
from src.adapters.snapshot import EventSnapshot, load_snapshot
from src.app_shell.config import validate_startup_rules
from src.components.promo_codes import (
    format_discount,
    load_config_from_rules,
    remaining_uses,
    status_label,
    status_of,
)
from src.components.publish import PublishComponent, load_defaults_from_rules
from src.components.readiness import EnhancedPublishChecklist, derive_settings_readiness
from src.domain.entities import as_utc
from src.domain.policy import PolicyEngine
from src.ports.clock import ClockPort
from src.rules.loader import get_rules_path, load_rules
from src.rules.models import Rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")

STATUS_MARKERS = {"pass": "PASS", "warning": "WARN", "fail": "FAIL"}


def parse_instant(value: str) -> datetime:
    """ISO-8601 timestamp; naive values are taken as UTC."""
    return as_utc(datetime.fromisoformat(value))


def get_rules(path: Path) -> Rules:
    rules = load_rules(path)
    validate_startup_rules(rules)
    return rules


def build_checklist(
    snapshot: EventSnapshot, rules: Rules, clock: ClockPort
) -> EnhancedPublishChecklist:
    store = EventStore.from_snapshots([snapshot])
    component = PublishComponent(
        event_repo=store.events,
        workspace_repo=store.workspaces,
        request_repo=store.requests,
        policy=PolicyEngine(rules),
        clock=clock,
        defaults=load_defaults_from_rules(rules),
        settings_path_template=rules.publishing.settings_path_template,
        approver_roles=rules.publishing.approver_roles,
        priorities=rules.publishing.priorities,
    )
    readiness = derive_settings_readiness(
        snapshot.event_space,
        clock.now_utc(),
        snapshot.promo_codes,
        snapshot.ticket_tiers,
    )
    return component.checklist(snapshot.event.id, readiness)


def handle_check_rules(rules_path: Path) -> int:
    rules = get_rules(rules_path)
    print(f"Rules OK: {rules.project.slug} v{rules.project.rules_version} ({rules_path})")
    return 0


def handle_readiness(rules: Rules, snapshot: EventSnapshot, clock: ClockPort) -> int:
    checklist = build_checklist(snapshot, rules, clock)
    verdict = "ready to publish" if checklist.can_publish else "not ready to publish"
    print(f"{snapshot.event.name or snapshot.event.id} ({snapshot.event.id}): {verdict}")

    for item in checklist.items:
        flag = " (required)" if item.required else ""
        print(f"  [{STATUS_MARKERS[item.status]}] {item.label}{flag}: {item.description}")

    print(
        f"Completion: {checklist.completion_percentage}% "
        f"({checklist.pass_count} pass, {checklist.warning_count} warning, "
        f"{checklist.fail_count} fail, {checklist.blocking_count} blocking)"
    )
    return 0 if checklist.can_publish else 2


def handle_promo_status(rules: Rules, snapshot: EventSnapshot, clock: ClockPort) -> int:
    config = load_config_from_rules(rules)
    now = clock.now_utc()

    if not snapshot.promo_codes:
        print("No promo codes.")
        return 0

    for code in snapshot.promo_codes:
        remaining = remaining_uses(code)
        uses = "unlimited" if remaining is None else f"{remaining} left"
        print(
            f"{code.code:<20} {format_discount(code, config.currency_symbol):>10}  "
            f"{status_label(status_of(code, now)):<14} {uses}"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Event Space Rules CLI")
    parser.add_argument("--rules", type=Path, help="Path to rules.yaml (default: RULES_PATH)")
    parser.add_argument(
        "--now",
        type=parse_instant,
        help="Evaluate at this ISO-8601 UTC instant instead of the current time",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # check-rules
    subparsers.add_parser("check-rules", help="Validate rules.yaml")

    # readiness
    readiness_parser = subparsers.add_parser(
        "readiness", help="Print the publish checklist of an event snapshot"
    )
    readiness_parser.add_argument("snapshot", type=Path, help="Event snapshot YAML file")

    # promo-status
    promo_parser = subparsers.add_parser(
        "promo-status", help="List promo codes of an event snapshot with their status"
    )
    promo_parser.add_argument("snapshot", type=Path, help="Event snapshot YAML file")

    args = parser.parse_args(argv)
    rules_path = args.rules or get_rules_path()

    try:
        if args.command == "check-rules":
            return handle_check_rules(rules_path)

        rules = get_rules(rules_path)
        snapshot = load_snapshot(args.snapshot)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    clock: ClockPort = FrozenClock(args.now) if args.now else SystemClock()

    if args.command == "readiness":
        return handle_readiness(rules, snapshot, clock)
    return handle_promo_status(rules, snapshot, clock)


if __name__ == "__main__":
    sys.exit(main())
