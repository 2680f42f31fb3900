"""Command line access to reports, the setup script and saved settings."""
import argparse
import sys
from pathlib import Path

from supportlog.app import Application
from supportlog.core.config import AppConfig, SettingsStore
from supportlog.core.errors import SupportLogError, describe_error
from supportlog.core.logging import configure_logging
from supportlog.reporting.export import ExportFilter, export_report, filter_records
from supportlog.reporting.sinks import write_csv, write_excel
from supportlog.store.schema import setup_sql


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI entry point."""

    parser = argparse.ArgumentParser(description="Support ticket logger utilities")
    parser.add_argument(
        "--settings-file",
        type=Path,
        help="Saved settings file (defaults to ~/.supportlog/settings.json)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    export = commands.add_parser("export", help="Write a report of the stored records")
    export.add_argument(
        "--filter",
        choices=[kind.value for kind in ExportFilter],
        default=ExportFilter.ALL.value,
        help="Which records to include",
    )
    export.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output"),
        help="Folder receiving the report file",
    )
    export.add_argument(
        "--excel",
        action="store_true",
        help="Also write an .xlsx copy next to the CSV",
    )

    commands.add_parser("schema", help="Print the table setup script")

    config = commands.add_parser("config", help="Save or clear the store connection")
    config.add_argument("--url", help="Store endpoint URL")
    config.add_argument("--key", help="Store access key")
    config.add_argument("--clear", action="store_true", help="Remove saved credentials")
    return parser


def _run_export(app: Application, args: argparse.Namespace) -> int:
    controller = app.controller
    if controller.banner:
        print(controller.banner.message, file=sys.stderr)
        return 1

    kind = ExportFilter(args.filter)
    result = export_report(controller.history, kind, controller.role, app.config.locale)
    output_path = write_csv(result, args.output_dir)
    print(f"Wrote {result.row_count} records to {output_path}")
    if args.excel:
        excel_path = output_path.with_suffix(".xlsx")
        write_excel(filter_records(controller.history, kind), excel_path, app.config.locale)
        print(f"Wrote {excel_path}")
    return 0


def _run_config(config: AppConfig, args: argparse.Namespace) -> int:
    app_settings = SettingsStore(config.settings_path)
    if args.clear:
        app_settings.clear()
        print("Saved store settings cleared; the in-memory store will be used.")
        return 0
    app_settings.save(args.url or "", args.key or "")
    print(f"Saved store settings to {app_settings.path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the ``supportlog`` command."""

    configure_logging()
    args = build_parser().parse_args(argv)
    config = AppConfig.load(args.settings_file)

    if args.command == "schema":
        print(setup_sql(config.table))
        return 0

    try:
        if args.command == "config":
            return _run_config(config, args)
        return _run_export(Application(config), args)
    except SupportLogError as exc:
        message, _ = describe_error(exc, config.table)
        print(message, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
