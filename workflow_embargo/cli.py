import argparse
import logging
import os
import sys
from pathlib import Path
from uuid import UUID

from workflow_embargo.adapters.sqlite.migrator import SQLiteMigrator
from workflow_embargo.context import ServiceContext
from workflow_embargo.core.ports.db import RecordValidationError
from workflow_embargo.core.ports.jobs import JobError
from workflow_embargo.rules.loader import load_rules
from workflow_embargo.services.workflow import WorkflowNotFoundError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")

DB_PATH = os.environ.get("EMBARGO_DB_PATH", "embargo.db")
MIGRATIONS_DIR = "migrations"
RULES_PATH = os.environ.get("EMBARGO_RULES_PATH", "rules.yaml")


def get_context() -> ServiceContext:
    if not Path(RULES_PATH).exists():
        logger.error("Rules file %s not found.", RULES_PATH)
        sys.exit(1)

    rules = load_rules(Path(RULES_PATH))
    return ServiceContext.create(DB_PATH, rules)


def handle_migrate(args: argparse.Namespace) -> None:
    applied = SQLiteMigrator(DB_PATH, MIGRATIONS_DIR).run_migrations()
    print(f"Applied {len(applied)} migrations.")


def handle_start_workflow(args: argparse.Namespace) -> None:
    ctx = get_context()
    record = ctx.records.load(UUID(args.content_id))
    if record is None:
        logger.error("Content %s not found.", args.content_id)
        sys.exit(1)

    try:
        instance = ctx.workflow_service.start_workflow(record)
    except (WorkflowNotFoundError, RecordValidationError, JobError) as e:
        logger.error("Workflow failed: %s", e)
        sys.exit(1)

    print(f"Workflow {instance.id} {instance.status}.")
    handle_timing(args, ctx)


def handle_timing(args: argparse.Namespace, ctx: ServiceContext | None = None) -> None:
    ctx = ctx or get_context()
    record = ctx.records.load(UUID(args.content_id))
    if record is None:
        logger.error("Content %s not found.", args.content_id)
        sys.exit(1)

    item = record.item
    print(f"Status: {item.status}")
    print(f"Desired publish: {item.desired_publish_at or '-'}")
    print(f"Desired unpublish: {item.desired_unpublish_at or '-'}")
    print(f"Publish on: {item.publish_on_at or '-'} (job {item.publish_job_id or '-'})")
    print(f"Unpublish on: {item.unpublish_on_at or '-'} (job {item.unpublish_job_id or '-'})")


def main() -> None:
    parser = argparse.ArgumentParser(description="Workflow embargo & expiry CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Apply database migrations")

    start_parser = subparsers.add_parser("start-workflow", help="Run a content item's workflow")
    start_parser.add_argument("content_id")

    timing_parser = subparsers.add_parser("timing", help="Show embargo & expiry state")
    timing_parser.add_argument("content_id")

    args = parser.parse_args()

    if args.command == "migrate":
        handle_migrate(args)
    elif args.command == "start-workflow":
        handle_start_workflow(args)
    elif args.command == "timing":
        handle_timing(args)


if __name__ == "__main__":
    main()
