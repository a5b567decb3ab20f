from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import CompareConfig, ConfigError, load_config, load_default_config
from ..excel.exporter import default_export_name, export_rows
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.filter_state import FilterState, StatusLabel
from ..services.filters import FilterError
from ..services.pipeline import CompareError, open_session
from ..services.render import build_table, render_options, render_text
from ..services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Resolve and load the comparison config
- Read the before / after workbooks (both must parse, otherwise exit 1)
- Build the filter state from options (omitted options = reset/default state)
- Print the visible rows, optionally export them to xlsx
- Close with a SUMMARY line
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

CONFIG_ENV_VAR = "WORKPLACE_DIFF_CONFIG"
LOCAL_CONFIG_PATH = Path("config/compare.yml")

# --to-reserve / --to-partner shortcuts (bundled rule names)
_TRANSITION_SHORTCUTS = ("to_reserve", "to_partner")


def _status(value: str) -> StatusLabel:
    try:
        return StatusLabel.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="workplace-diff", description="Compare two workplace register snapshots (.xlsx)"
    )
    p.add_argument("before", help="Older snapshot (.xlsx)")
    p.add_argument("after", help="Newer snapshot (.xlsx)")
    p.add_argument("--config", help=f"Comparison config YAML (default: ${CONFIG_ENV_VAR}, {LOCAL_CONFIG_PATH}, bundled)")
    p.add_argument("--status", action="append", type=_status, metavar="LABEL",
                   help="Show only these statuses: WAS/BECAME/NEW/DELETED or БЫЛО/СТАЛО/НОВАЯ/УДАЛЕНА (repeatable)")
    p.add_argument("--address", action="append", default=[], help="Address filter value (repeatable)")
    p.add_argument("--floor", action="append", default=[], help="Floor filter value (repeatable)")
    p.add_argument("--city", action="append", default=[], help="City filter value (repeatable)")
    p.add_argument("--quantity", action="append", default=[], help="Quantity filter value (repeatable)")
    p.add_argument("--change-type", action="append", default=[], metavar="LABEL",
                   help="Changed-field label, or the new/removed record label (repeatable)")
    p.add_argument("--transition", action="append", default=[], metavar="NAME",
                   help="Enable a transition filter by rule name (repeatable)")
    p.add_argument("--to-reserve", action="store_true", help="Shortcut for --transition to_reserve")
    p.add_argument("--to-partner", action="store_true", help="Shortcut for --transition to_partner")
    p.add_argument("--export", nargs="?", const="", default=None, metavar="PATH",
                   help="Write visible rows to xlsx (default name: сравнение_РМ_<date>.xlsx)")
    p.add_argument("--list-options", action="store_true", help="Print available filter values then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv (values in .env win over the process environment)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _resolve_config(explicit: str | None) -> CompareConfig:
    if explicit:
        return load_config(Path(explicit))
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return load_config(Path(env_path))
    if LOCAL_CONFIG_PATH.exists():
        return load_config(LOCAL_CONFIG_PATH)
    return load_default_config()


def _build_filters(args: argparse.Namespace) -> FilterState:
    filters = FilterState.default()
    if args.status:
        filters.status = set(args.status)
    filters.address = set(args.address)
    filters.floor = set(args.floor)
    filters.city = set(args.city)
    filters.quantity = set(args.quantity)
    filters.change_type = set(args.change_type)
    filters.transitions = set(args.transition)
    for rule_name in _TRANSITION_SHORTCUTS:
        if getattr(args, rule_name):
            filters.toggle("transitions", rule_name)
    return filters


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # NOTE: [] が渡された場合に sys.argv が混入しないよう None のときのみ読む
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))
    try:
        cfg = _resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    logger.debug(f"config: {cfg.source}")

    try:
        session = open_session(Path(args.before), Path(args.after), cfg)
    except CompareError as e:
        # 利用者向けには一律のメッセージ、詳細は DEBUG
        logger.error("read: failed to read input files, check that both are valid .xlsx workbooks")
        logger.debug(f"read: {e}")
        return EXIT_FATAL

    if args.list_options:
        print(render_options(session.options()))
        return EXIT_SUCCESS

    filters = _build_filters(args)
    try:
        visible = session.apply(filters)
    except FilterError as e:
        logger.error(f"filter: {e}")
        return EXIT_FATAL

    print(render_text(build_table(visible, session.classified, cfg.catalogue)))

    if args.export is not None:
        target = Path(args.export) if args.export else Path(default_export_name())
        try:
            export_rows(
                target,
                visible,
                session.classified,
                cfg.catalogue,
                highlight_bold=filters.is_change_filter_active,
            )
        except (OSError, ValueError) as e:
            logger.error(f"export: {e}")
            return EXIT_FATAL

    log_summary(render_summary_line(session.summarize(visible)))
    return EXIT_SUCCESS
