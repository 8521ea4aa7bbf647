"""Command line interface: ``meroku download`` and ``meroku parse``."""
from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from .clients import MextClientError
from .config import AppConfig, load_config
from .runtime import create_download_pipeline, create_parse_pipeline

LOGGER = logging.getLogger(__name__)

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H%M%S"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Collect and parse MEXT working group minutes")
    parser.add_argument("--config", type=Path, help="Path to an explicit configuration file")
    commands = parser.add_subparsers(dest="command", required=True)

    download = commands.add_parser("download", help="Download minutes (and rosters) from the MEXT website")
    download.add_argument("--dir", type=Path, help="Target directory (default: ./data/download_<timestamp>)")
    selection = download.add_mutually_exclusive_group()
    selection.add_argument("--wgid", help="Three digit id of the working group to download")
    selection.add_argument("--all", action="store_true", help="Download every working group")
    download.add_argument("--memberlist", action="store_true", help="Also download the roster pages")

    parse = commands.add_parser("parse", help="Parse downloaded minutes and export them")
    parse.add_argument("--dir", type=Path, default=Path("data/example"), help="Directory written by 'download'")
    parse.add_argument("--out", type=Path, help="Output root (default: <dir>/json)")
    parse.add_argument("--memberlist", action="store_true", help="Parse rosters and resolve speakers")
    return parser


def _run_download(args: argparse.Namespace, config: AppConfig) -> int:
    download_dir = args.dir or Path("data") / f"download_{datetime.now().strftime(_TIMESTAMP_FORMAT)}"
    resources = create_download_pipeline(config)
    try:
        reports = resources.pipeline.run(
            download_dir,
            working_group_id=args.wgid,
            download_all=args.all,
            with_member_lists=args.memberlist,
        )
    except (MextClientError, ValueError) as exc:
        LOGGER.error("Download failed: %s", exc)
        return 1
    finally:
        resources.close()
    failed = sum(len(report.failed) for report in reports)
    LOGGER.info("Saved %s pages to %s (%s failed)", sum(len(r.downloaded) for r in reports), download_dir, failed)
    return 0


def _run_parse(args: argparse.Namespace, config: AppConfig) -> int:
    output_root = args.out or args.dir / "json"
    output_dir = output_root / f"output_{datetime.now().strftime(_TIMESTAMP_FORMAT)}"
    resources = create_parse_pipeline(config)
    try:
        minutes_list = resources.pipeline.run(args.dir, output_dir, with_member_lists=args.memberlist)
    finally:
        resources.close()
    LOGGER.info("Parsed %s transcripts into %s", len(minutes_list), output_dir)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    parser = _build_parser()
    args = parser.parse_args(argv)
    config = load_config(args.config)

    if args.command == "download":
        if args.wgid is not None and not (len(args.wgid) == 3 and args.wgid.isascii() and args.wgid.isdigit()):
            parser.error(f"{args.wgid} is not a working group id")
        return _run_download(args, config)
    if args.command == "parse":
        return _run_parse(args, config)
    parser.error(f"Unknown command {args.command}")
    return 2


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
