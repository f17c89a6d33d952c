#!/usr/bin/env python3
"""wordlist-editor - command line tools for legacy dictionary files.

Usage:
    wordlist-editor check Einfach_gut_A1.1.txt
    wordlist-editor roundtrip Einfach_gut_A1.1.txt
    wordlist-editor languages Einfach_gut_A1.1.txt --rename uk=fr -o out.txt
    wordlist-editor --settings settings.db config file_encoding cp1251
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from core.dictionary_config import DEFAULT_CONFIG, DictionaryConfig
from core.dictionary_format import (
    export_file,
    load_file,
    normalize_text,
    parse_file,
    read_text,
    save_file,
)
from core.language_transition import (
    check_rename_pairs,
    rename_language,
    transition_languages,
)
from core.models import LanguageChangeResult, RenamePair, TopicRow
from core.validation import (
    COLUMN_ID_ADDITIONAL_INFO,
    COLUMN_ID_ARTICLE,
    COLUMN_ID_WORD,
    TRANSLATION_COLUMN_PREFIX,
    is_row_invalid,
    validate_cell,
    validate_config,
)
from utils.config import AppSettings, Config

log = logging.getLogger("wordlisteditor")

DEFAULT_ENCODING = AppSettings.model_fields["file_encoding"].default


def setup_logging(verbose: bool = False) -> None:
    """Log to a rotating file in the XDG state directory and to stderr."""
    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger()
    if root.handlers:
        # Already configured in this process
        root.setLevel(level)
        return

    xdg_state_home = os.environ.get(
        "XDG_STATE_HOME", str(Path.home() / ".local" / "state")
    )
    log_dir = Path(xdg_state_home) / "wordlisteditor"
    log_dir.mkdir(parents=True, exist_ok=True)

    # 1MB max, keep 3 backups
    file_handler = RotatingFileHandler(
        log_dir / "wordlisteditor.log",
        maxBytes=1024 * 1024,
        backupCount=3,
        delay=True,
    )
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[file_handler, logging.StreamHandler()],
    )


@dataclass(frozen=True)
class FileSettings:
    """Where header-less files take their settings from."""

    fallback_config: DictionaryConfig
    encoding: str


def _file_settings(settings_path: Optional[str]) -> FileSettings:
    """Fallback config and file encoding, from the settings database if given."""
    if settings_path is None:
        return FileSettings(DEFAULT_CONFIG, DEFAULT_ENCODING)
    settings = Config(Path(settings_path))
    return FileSettings(
        settings.fallback_dictionary_config(), settings.get("file_encoding")
    )


def _parse_rename(value: str) -> RenamePair:
    from_language, separator, to_language = value.partition("=")
    if not separator or not from_language or not to_language:
        raise argparse.ArgumentTypeError(f"expected FROM=TO, got {value!r}")
    return RenamePair(from_language=from_language, to_language=to_language)


def _report_rejected(pair: RenamePair, change: LanguageChangeResult) -> int:
    print(
        f"Rename {pair.from_language} -> {pair.to_language} failed: "
        f"{change.error} {change.error_params}",
        file=sys.stderr,
    )
    return 2


def cmd_check(args: argparse.Namespace) -> int:
    """Print every invalid row with the reasons of its failing cells."""
    file_settings = _file_settings(args.settings)
    result = load_file(args.file, file_settings.fallback_config, file_settings.encoding)
    config = result.config

    problems = 0
    for error in validate_config(config):
        print(f"config: {error}")
        problems += 1

    column_ids = [COLUMN_ID_WORD, COLUMN_ID_ARTICLE, COLUMN_ID_ADDITIONAL_INFO]
    column_ids.extend(f"{TRANSLATION_COLUMN_PREFIX}{lang}" for lang in config.languages_to)

    for number, row in enumerate(result.rows, start=1):
        if not is_row_invalid(row, config):
            continue
        problems += 1
        if isinstance(row, TopicRow):
            messages = [validate_cell(COLUMN_ID_WORD, row, config).message]
            label = f"topic {row.label!r}"
        else:
            checks = [validate_cell(column_id, row, config) for column_id in column_ids]
            messages = [
                f"{column_id}: {check.message}"
                for column_id, check in zip(column_ids, checks)
                if not check.is_valid
            ]
            label = f"word {row.value_from!r}"
        print(f"row {number} ({label}): {'; '.join(messages)}")

    print(f"{len(result.rows)} rows, {problems} problems")
    return 1 if problems else 0


def cmd_roundtrip(args: argparse.Namespace) -> int:
    """Check that exporting the parsed file reproduces it."""
    file_settings = _file_settings(args.settings)
    original = read_text(args.file, file_settings.encoding)
    result = parse_file(original, file_settings.fallback_config)
    exported = export_file(result.config, result.rows)

    expected_lines = normalize_text(original).split("\n")
    actual_lines = normalize_text(exported).split("\n")
    if expected_lines == actual_lines:
        print(f"OK: {len(result.rows)} rows round-trip unchanged")
        return 0

    for number, (expected, actual) in enumerate(
        zip(expected_lines, actual_lines), start=1
    ):
        if expected != actual:
            print(f"line {number} differs:\n  file:   {expected!r}\n  export: {actual!r}")
            break
    else:
        print(f"line count differs: file {len(expected_lines)}, export {len(actual_lines)}")
    return 1


def cmd_languages(args: argparse.Namespace) -> int:
    """Rename or replace the target languages and write the result."""
    file_settings = _file_settings(args.settings)
    result = load_file(args.file, file_settings.fallback_config, file_settings.encoding)
    config, rows = result.config, result.rows

    if args.set is not None:
        for pair in args.rename:
            change = check_rename_pairs(config, rows, [pair])
            if not change.ok:
                return _report_rejected(pair, change)
        next_languages = [item.strip() for item in args.set.split(",") if item.strip()]
        config, rows = transition_languages(config, rows, next_languages, args.rename)
    else:
        for pair in args.rename:
            change = rename_language(config, rows, pair.from_language, pair.to_language)
            if not change.ok:
                return _report_rejected(pair, change)
            config, rows = change.config, change.rows

    errors = validate_config(config)
    if errors:
        print(f"Refusing to write: {'; '.join(errors)}", file=sys.stderr)
        return 2

    if args.output:
        save_file(args.output, config, rows, file_settings.encoding)
    else:
        print(export_file(config, rows))
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Show or change values in the settings database."""
    if args.settings is None:
        print("Error: config needs --settings DB", file=sys.stderr)
        return 2
    settings = Config(Path(args.settings))

    if args.key is None:
        for key, value in sorted(settings.get_all().items()):
            print(f"{key} = {value!r}")
        return 0

    if args.value is None:
        value = settings.get(args.key)
        if value is None:
            print(f"{args.key} is not set", file=sys.stderr)
            return 1
        print(f"{args.key} = {value!r}")
        return 0

    try:
        settings.set(args.key, args.value)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    log.info(f"Setting {args.key} changed")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wordlist-editor",
        description="Check and transform legacy dictionary word lists",
    )
    parser.add_argument(
        "--settings", metavar="DB", help="Settings database for the fallback config"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="List invalid rows")
    check.add_argument("file")
    check.set_defaults(func=cmd_check)

    roundtrip = subparsers.add_parser("roundtrip", help="Verify export reproduces the file")
    roundtrip.add_argument("file")
    roundtrip.set_defaults(func=cmd_roundtrip)

    languages = subparsers.add_parser("languages", help="Rename or set target languages")
    languages.add_argument("file")
    languages.add_argument("--set", metavar="CODES", help="Comma-separated target languages")
    languages.add_argument(
        "--rename",
        metavar="FROM=TO",
        type=_parse_rename,
        action="append",
        default=[],
        help="Rename a language column (repeatable)",
    )
    languages.add_argument("-o", "--output", help="Write here instead of stdout")
    languages.set_defaults(func=cmd_languages)

    config = subparsers.add_parser("config", help="Show or change stored settings")
    config.add_argument("key", nargs="?", help="Setting to show or change")
    config.add_argument("value", nargs="?", help="New value (escaped form for delimiters)")
    config.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        return args.func(args)
    except OSError as e:
        log.error(f"Cannot access file: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except UnicodeError as e:
        log.error(f"Cannot decode file: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
