"""Main entry point for the footage consolidator.

Loads environment variables, reads a project snapshot, runs one
consolidation pass and optionally writes the consolidated snapshot back.
"""
from dotenv import load_dotenv
import argparse
import os
import sys

from pydantic import ValidationError

# Load environment variables first, before any other imports
load_dotenv()

from consolidator.audit import AuditLog, journal_from_audit, load_audit
from consolidator.config import get_config
from consolidator.dedup import Consolidator
from consolidator.errors import CollaboratorUnavailable, ProjectLoadError
from consolidator.host import dump_project, load_project
from consolidator.run_config import RunConfig
from consolidator.unused import find_unused_resources, remove_unused_resources
from consolidator.utils.logger import (
    log_error,
    log_info,
    log_pass_progress,
    set_log_format,
    set_log_level,
    set_max_json_length,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Consolidate duplicate footage in a project snapshot.")
    parser.add_argument('--project', type=str, help='Project snapshot (YAML or JSON). Defaults to PROJECT_FILE.')
    parser.add_argument('--output', type=str, help='Write the consolidated snapshot to this path.')
    parser.add_argument('--dry-run', action='store_true', default=None, help='Report duplicates without changing the project.')
    parser.add_argument('--keep-duplicates', action='store_true', help='Redirect references but do not remove duplicates.')
    parser.add_argument('--no-content-hash', action='store_true', help='Do not hash file contents when building signatures.')
    parser.add_argument('--resume-pass', type=str, help='Resume an interrupted pass using its audit journal.')
    parser.add_argument('--list-unused', action='store_true', help='List resources nothing refers to and exit.')
    parser.add_argument('--remove-unused', action='store_true', help='Remove resources nothing refers to (project items only, not files).')
    parser.add_argument('--log-level', type=str, help='Override LOG_LEVEL.')
    return parser


def _print_unused(unused) -> None:
    print(f"Found {len(unused)} unused footage item(s):")
    for item in unused:
        print(f"  {item.display()}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.log_level is not None:
        os.environ['LOG_LEVEL'] = args.log_level

    try:
        config = get_config()
    except ValidationError as e:
        print("❌ Invalid configuration:")
        for error in e.errors():
            field = ".".join(str(part) for part in error.get("loc", ())) or "config"
            print(f"  - {field}: {error.get('msg')}")
        return 1

    set_log_level(config.log_level)
    set_log_format(config.log_format)
    set_max_json_length(config.max_json_output_length)
    config.log_configuration()

    issues = config.validate_configuration()
    if issues:
        log_error("Configuration validation failed", issues=issues)
        print("❌ Configuration issues found:")
        for issue in issues:
            print(f"  - {issue}")
        return 1

    project_path = args.project or config.project_file
    if not project_path:
        print("❌ No project snapshot given (use --project or PROJECT_FILE).")
        return 1

    try:
        project = load_project(project_path)
    except ProjectLoadError as e:
        print(f"❌ {e}")
        return 1

    overrides = {}
    if args.dry_run:
        overrides['dry_run'] = True
    if args.keep_duplicates:
        overrides['remove_duplicates'] = False
    if args.no_content_hash:
        overrides['content_hash_enabled'] = False
    if args.resume_pass:
        overrides['pass_id'] = args.resume_pass
    run_config = RunConfig.from_config(config, **overrides)

    if args.list_unused or args.remove_unused:
        unused = find_unused_resources(project)
        if not unused:
            print("No unused footage found in the project.")
            return 0
        _print_unused(unused)
        if args.list_unused or run_config.dry_run:
            return 0

        audit = AuditLog(config.audit_file, run_config.pass_id) if config.audit_enabled else None
        on_removed = audit.record_removal if audit is not None else None
        result = remove_unused_resources(project, [item.id for item in unused], on_removed)
        print(f"Removed {len(result.removed)} unused footage item(s).")
        for failure in result.failures:
            print(f"  ⚠️  {failure.kind}: {failure.item_id} - {failure.message}")
        if args.output:
            dump_project(project, args.output)
        log_pass_progress("Unused footage removed", pass_id=run_config.pass_id, removed=len(result.removed))
        return 0

    audit = AuditLog(config.audit_file, run_config.pass_id) if config.audit_enabled else None
    journal = None
    if args.resume_pass:
        journal = journal_from_audit(load_audit(config.audit_file), args.resume_pass)
        log_info("Resuming pass", pass_id=args.resume_pass, journalled_redirects=len(journal))

    try:
        report = Consolidator(project, run_config, audit=audit).run(journal=journal)
    except CollaboratorUnavailable as e:
        print(f"❌ {e}")
        return 1

    print(report.summary())
    for failure in report.failures:
        print(f"  ⚠️  {failure.kind}: {failure.item_id} - {failure.message}")

    if args.output and not run_config.dry_run:
        dump_project(project, args.output)

    log_pass_progress("Consolidator finished", pass_id=run_config.pass_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
