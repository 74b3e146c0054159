from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from tb_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, IngestSettings, load_config
from tb_import.ingest.errors import IngestError
from tb_import.logging.init import log_summary, set_log_level, setup_logging
from tb_import.logging.issue_log import IssueLogBuffer
from tb_import.models.upload import RawUpload
from tb_import.services.line_items import group_by_bucket
from tb_import.services.orchestrator import ProcessingError, collect_input_files, process_paths
from tb_import.services.pipeline import ingest
from tb_import.services.summary import render_summary_line

"""CLI entrypoint: ``python -m tb_import.cli PATH [PATH ...]``.

- Load .env, then the YAML config (optional unless named explicitly)
- Ingest every export under the given paths
- Print labeled log lines and one SUMMARY line

Exit codes: 0 every file balanced, 2 any file unbalanced or rejected,
1 fatal (bad config, missing path).
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_NEEDS_ATTENTION = 2

CONFIG_ENV_VAR = "TB_IMPORT_CONFIG"


def _load_env_file(path: Path) -> None:
    """Load .env via python-dotenv; existing environment variables win."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Trial balance import & classification")
    p.add_argument("paths", nargs="+", type=Path, help="Export files or directories (csv/xlsx/xls)")
    p.add_argument("--config", type=Path, default=None, help=f"YAML config (default {DEFAULT_CONFIG_PATH})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect", action="store_true", help="Print detected format, entries & buckets then exit")
    return p.parse_args(argv)


def _resolve_settings(config_arg: Path | None) -> IngestSettings:
    """Explicit config paths must exist; the default path is optional."""
    env_path = os.getenv(CONFIG_ENV_VAR)
    if config_arg is not None:
        return load_config(config_arg)
    if env_path:
        return load_config(Path(env_path))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return IngestSettings()


def _inspect(paths: list[Path], settings: IngestSettings) -> int:
    try:
        files = collect_input_files(paths)
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            result = ingest(RawUpload(content=f.read_bytes(), filename=f.name), settings)
        except (OSError, IngestError) as e:
            print(f"  error: {e}")
            continue
        v = result.validation
        print(
            f"  format={result.source_format} entries={len(result.entries)} "
            f"debits={v.total_debits} credits={v.total_credits} balanced={v.balanced}"
        )
        for entry in result.entries[:3]:
            print(f"    sample_entry= {entry.to_record()}")
        for (account_type, bucket), total in group_by_bucket(result.entries).items():
            print(f"  BUCKET: {account_type.value}/{bucket} entries={total.entry_count} balance={total.balance}")
        for issue in result.issues:
            print(f"  ISSUE: row={issue.row_number} {issue.kind} {issue.message}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when called without arguments; main([...]) in tests must not see pytest's flags
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        set_log_level(logging.DEBUG)
        logger.debug("debug mode enabled")

    try:
        settings = _resolve_settings(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inspect:
        return _inspect(args.paths, settings)

    issue_log = IssueLogBuffer(settings.issue_log_dir)
    try:
        result = process_paths(args.paths, settings, issue_log)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    if issue_log.flush() is not None:
        logger.info(f"row issues written to {issue_log.file_path}")

    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.unbalanced_files > 0 or result.failed_files > 0:
        return EXIT_NEEDS_ATTENTION
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
