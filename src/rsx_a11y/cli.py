# src/rsx_a11y/cli.py
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm.auto import tqdm

from rsx_a11y.api import check_project
from rsx_a11y.core.managers.config_manager import config_manager
from rsx_a11y.core.utils.configure_logging import configure_logger
from rsx_auditor.controllers.report_controller import ReportController
from rsx_auditor.dom.registry import RuleRegistry
from rsx_auditor.exceptions import ConfigurationError, DiscoveryError

logger = logging.getLogger(__name__)

EXIT_CONFIG_ERROR = 2


def _split_names(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    return [name.strip() for name in value.split(",") if name.strip()]


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rsx-a11y",
        description="Static accessibility linter for html!, view! and rsx! markup in Rust sources.",
    )
    parser.add_argument("path", nargs="?", default=".", help="File or directory to check (default: .)")
    parser.add_argument("--format", choices=["pretty", "json"], default=None, help="Output format.")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only report errors.")
    parser.add_argument("--list-rules", action="store_true", help="List every rule and exit.")
    parser.add_argument("--only", type=str, default=None, help="Comma-separated rules to run exclusively.")
    parser.add_argument("--skip", type=str, default=None, help="Comma-separated rules to disable.")
    parser.add_argument("--out-file", type=str, default=None, help="Write the report to a file instead of stdout.")
    parser.add_argument("--export", type=str, default=None, help="Save the flat diagnostics table as CSV.")
    parser.add_argument("--fail-on-warning", action="store_true", default=None,
                        help="Exit with status 1 when warnings are found.")
    parser.add_argument("--workers", type=int, default=None, help="Worker processes (default from settings).")
    parser.add_argument("--include-html", action="store_true", default=None, help="Also check .html templates.")
    parser.add_argument("--settings", type=str, default=None, help="JSON file overriding the bundled settings.")
    parser.add_argument("--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE",
                        help="Override one setting, e.g. --set lint.workers=4. May be repeated.")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level, e.g. INFO or DEBUG.")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    return parser


def _print_rules() -> None:
    definitions = RuleRegistry.get_all_definitions()
    width = max(len(d.rule_id.value) for d in definitions)
    for d in definitions:
        print(f"{d.rule_id.value:<{width}}  {d.severity.value:<7}  {d.description}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    if args.settings:
        try:
            config_manager.load_overrides(args.settings)
        except ConfigurationError as e:
            print(f"error: {e}", file=sys.stderr)
            return EXIT_CONFIG_ERROR

    for item in args.overrides:
        key, sep, value = item.partition("=")
        if not sep or not key.strip() or not config_manager.set_nested(key.strip(), value):
            print(f"error: invalid setting override '{item}', expected KEY=VALUE", file=sys.stderr)
            return EXIT_CONFIG_ERROR

    configure_logger(args.log_level or config_manager.get_nested("debug.level", "WARNING"))

    if args.list_rules:
        _print_rules()
        return 0

    output_format = args.format or config_manager.get_nested("output.format", "pretty")
    only = _split_names(args.only)
    if only is None:
        only = config_manager.get_nested("lint.only", [])
    skip = _split_names(args.skip)
    if skip is None:
        skip = config_manager.get_nested("lint.skip", [])
    workers = args.workers if args.workers is not None else int(config_manager.get_nested("lint.workers", 1))
    fail_on_warning = args.fail_on_warning or bool(config_manager.get_nested("lint.fail_on_warning", False))

    show_progress = (
        not args.no_progress
        and output_format == "pretty"
        and bool(config_manager.get_nested("output.progress", True))
        and sys.stderr.isatty()
    )
    pbar = tqdm(desc="Linting", unit="file", disable=not show_progress, leave=False)

    def progress_update(current, total):
        pbar.total = total
        pbar.n = current
        pbar.refresh()

    try:
        result = check_project(
            args.path,
            only=only,
            skip=skip,
            workers=workers,
            include_html=args.include_html,
            progress_callback=progress_update,
        )
    except (ConfigurationError, DiscoveryError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    finally:
        pbar.close()

    report = ReportController(result.summary, result.duration)
    text = report.render_json() if output_format == "json" else report.render_pretty(quiet=args.quiet)

    if args.out_file:
        try:
            Path(args.out_file).write_text(text + "\n", encoding="utf-8")
        except OSError as e:
            print(f"error: could not write {args.out_file}: {e}", file=sys.stderr)
            return EXIT_CONFIG_ERROR
        print(f"Report written to: {args.out_file}", file=sys.stderr)
    else:
        print(text)

    if args.export:
        try:
            out_path = report.export_csv(args.export)
        except OSError as e:
            print(f"error: could not export to {args.export}: {e}", file=sys.stderr)
            return EXIT_CONFIG_ERROR
        print(f"Diagnostics exported to: {out_path}", file=sys.stderr)

    return report.exit_code(fail_on_warning=fail_on_warning)


if __name__ == "__main__":
    sys.exit(main())
