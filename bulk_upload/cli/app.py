from __future__ import annotations

import argparse
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, UploadConfig, load_config
from ..excel.reader import ParseError
from ..excel.template import TEMPLATE_FILE_NAME, write_template
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.batch_state import BatchState
from ..models.processing_result import UploadSummary
from ..services.catalog_client import CatalogClient
from ..services.pipeline import run_upload, select_file
from ..services.progress import ProgressTracker
from ..services.summary import render_summary_line

"""CLI entrypoint for the bulk item upload.

Sub-commands:
- template: write the example spreadsheet
- check FILE: parse, group and validate, print the report
- upload FILE: check, then create every product in the catalog (as draft)

Exit codes: 0 ok, 1 fatal (config / unreadable file), 2 some uploads failed,
3 validation errors blocked the upload.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2
EXIT_VALIDATION_BLOCKED = 3

FILE_LEVEL = "<FILE_LEVEL>"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env; its values take precedence over the existing environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="bulk-upload", description="Spreadsheet -> catalog bulk item upload")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    t = sub.add_parser("template", help="Write the bulk upload template")
    t.add_argument("--output", type=Path, default=Path(TEMPLATE_FILE_NAME), help="Template path")

    c = sub.add_parser("check", help="Validate a spreadsheet without uploading")
    c.add_argument("file", type=Path)

    u = sub.add_parser("upload", help="Validate and upload a spreadsheet")
    u.add_argument("file", type=Path)
    u.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    return p.parse_args(argv)


def _load_batch(path: Path, logger: logging.Logger, error_log: ErrorLogBuffer | None) -> BatchState | None:
    """select_file wrapper logging parse failures. None means fatal."""
    if not path.exists():
        logger.error(f"file not found: {path}")
        return None
    try:
        return select_file(path.name, path.read_bytes())
    except ParseError as e:
        logger.error(f"parse: {e}")
        if error_log is not None:
            error_log.append(ErrorRecord.create(path.name, FILE_LEVEL, -1, "PARSE_ERROR", str(e)))
        return None


def _report_batch(state: BatchState, logger: logging.Logger, error_log: ErrorLogBuffer | None) -> None:
    for w in state.warnings:
        logger.warning(w.describe())
    if state.report is None:
        return
    for index, draft in enumerate(state.drafts):
        messages = state.report.messages_for(index)
        name = draft.product_name or f"#{index + 1}"
        if not messages:
            logger.info(f"product={name} sizes={len(draft.sizes)} ok")
            continue
        for msg in messages:
            logger.error(f"product={name} {msg}")
            if error_log is not None:
                error_log.append(
                    ErrorRecord.create(state.source_name or "", name, index, "VALIDATION_ERROR", msg)
                )


def _cmd_template(args: argparse.Namespace, logger: logging.Logger) -> int:
    path = write_template(args.output)
    logger.info(f"template written: {path}")
    return EXIT_SUCCESS_ALL


def _cmd_check(args: argparse.Namespace, logger: logging.Logger) -> int:
    state = _load_batch(args.file, logger, None)
    if state is None:
        return EXIT_FATAL
    _report_batch(state, logger, None)
    invalid = len(state.report or ())
    log_summary(f"products={len(state.drafts)} invalid={invalid} warnings={len(state.warnings)}")
    return EXIT_SUCCESS_ALL if state.is_valid else EXIT_VALIDATION_BLOCKED


def _upload(state: BatchState, cfg: UploadConfig, logger: logging.Logger, error_log: ErrorLogBuffer) -> int:
    start = datetime.now(UTC)
    with CatalogClient(cfg.catalog) as client, ProgressTracker(len(state.drafts)) as progress:
        done = run_upload(state, client, on_progress=progress.set_percent)
    end = datetime.now(UTC)

    for index, result in enumerate(done.results):
        if result.success:
            logger.info(f"created product={result.product_name} id={result.remote_id}")
        else:
            logger.error(f"failed product={result.product_name} error={result.error}")
            error_log.append(
                ErrorRecord.create(
                    done.source_name or "", result.product_name, index, "UPLOAD_ERROR", result.error or ""
                )
            )

    summary = UploadSummary.from_results(
        done.results, [len(d.sizes) for d in done.drafts], start, end
    )
    # log_summary が "SUMMARY " を付与するので除去して渡す
    log_summary(render_summary_line(summary)[len("SUMMARY "):])
    return EXIT_PARTIAL_FAILURE if done.failure_count else EXIT_SUCCESS_ALL


def _cmd_upload(args: argparse.Namespace, logger: logging.Logger) -> int:
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer(Path(cfg.logs_directory))
    try:
        state = _load_batch(args.file, logger, error_log)
        if state is None:
            return EXIT_FATAL
        _report_batch(state, logger, error_log)
        if not state.is_valid:
            logger.error("upload blocked: fix validation errors and re-select the file")
            return EXIT_VALIDATION_BLOCKED
        logger.info(f"uploading products={len(state.drafts)} to {cfg.catalog.base_url}")
        return _upload(state, cfg, logger, error_log)
    finally:
        path = error_log.flush()
        if path is not None:
            logger.info(f"error log: {path}")


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む ([] はテストからの明示的な空引数)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)

    if args.command == "template":
        return _cmd_template(args, logger)
    if args.command == "check":
        return _cmd_check(args, logger)
    return _cmd_upload(args, logger)
