"""
schemasync - Schema Synchronization Engine

Command-line entry point. Reconciles the schema stored in a saved project with
the project's blocks, or reports whether the two have drifted apart.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .config import ConfigManager, get_config
from .importers import ProjectImporter
from .planning import NamingRules, compute_plan
from .sdl import ParseError, SerializeError, parse
from .sync import SchemaSyncController


def setup_logging(config: ConfigManager):
    """Configure logging for the application."""
    level = getattr(logging, config.get("logging.level", "INFO").upper(), logging.INFO)
    format_str = config.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file = config.log_filename

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file)
        ]
    )


def run_sync(project_path: str, output_path: str, config: ConfigManager) -> int:
    """
    Import a project, run one sync pass and write the result.

    Args:
        project_path: Path to the project JSON file
        output_path: Where to write the updated project, or None to print the schema
        config: Configuration to run with

    Returns:
        Process exit code
    """
    importer = ProjectImporter.from_file(project_path)
    controller = SchemaSyncController(config=config)
    blocks = controller.import_state(importer)

    plan = controller.last_plan
    if plan is not None:
        logging.info(f"Applied plan: {plan.summary()}")
        for conflict in plan.conflicts:
            print(f"warning: {conflict.describe()}", file=sys.stderr)
    if controller.rename_notification:
        print(controller.rename_notification, file=sys.stderr)

    if output_path:
        with open(Path(output_path), 'w', encoding='utf-8') as f:
            json.dump(controller.export_state(blocks), f, indent=2)
            f.write("\n")
        logging.info(f"Project written to {output_path}")
    else:
        sys.stdout.write(controller.schema_text)

    return 0


def run_check(project_path: str, config: ConfigManager) -> int:
    """
    Report the changes a sync would make, without making them.

    Returns:
        0 when the schema matches the blocks, 1 when it has drifted
    """
    importer = ProjectImporter.from_file(project_path)
    document = importer.get_document()
    text = document.text if document is not None else config.default_schema_text

    plan = compute_plan(parse(text), importer.get_blocks(), NamingRules.from_config(config))

    for rename in plan.renames:
        print(f"rename  {rename.old_name} -> {rename.new_name}")
    for addition in plan.additions:
        print(f"add     {addition.type_name} ({addition.block_kind.value} block {addition.block_id})")
    for removal in plan.removals:
        print(f"remove  {removal}")
    for conflict in plan.conflicts:
        print(f"warning {conflict.describe()}")

    if plan.is_empty:
        print("Schema is in sync with the blocks")
        return 0

    print(f"Schema is out of sync: {plan.summary()}")
    return 1


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="schemasync - keep a GraphQL schema in step with event-model blocks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  schemasync sync project.json                     # Print the reconciled schema
  schemasync sync project.json -o synced.json      # Write the reconciled project
  schemasync check project.json                    # Exit 1 if the schema has drifted
        """
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to the configuration file (default: config.yaml)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"schemasync {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Reconcile a project's schema with its blocks")
    sync_parser.add_argument("project", help="Path to the project JSON file")
    sync_parser.add_argument(
        "-o", "--output",
        type=str,
        help="Write the updated project here instead of printing the schema"
    )

    check_parser = subparsers.add_parser("check", help="Show the changes a sync would make")
    check_parser.add_argument("project", help="Path to the project JSON file")

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_arguments(argv)
    config = ConfigManager(args.config) if args.config else get_config()
    setup_logging(config)

    try:
        if args.command == "sync":
            code = run_sync(args.project, args.output, config)
        else:
            code = run_check(args.project, config)
    except ParseError as e:
        logging.error(f"Schema does not parse: {e}")
        print(f"error: schema does not parse: {e}", file=sys.stderr)
        code = 2
    except SerializeError as e:
        logging.error(f"Could not print the reconciled schema: {e}", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        code = 2
    except (OSError, ValueError) as e:
        logging.error(f"Could not read project {args.project}: {e}")
        print(f"error: could not read project: {e}", file=sys.stderr)
        code = 2

    sys.exit(code)


if __name__ == "__main__":
    main()
