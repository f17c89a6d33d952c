"""Reading and writing of the legacy flat-text dictionary format.

A file is an optional configuration header line followed by one row per
line. Topic lines start with the topic flag; word lines look like::

    der Abend; Abende | evening | вечір

that is ``[article ]word[; annotation]`` followed by one column per target
language, columns separated by the configured delimiter.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from core.dictionary_config import DEFAULT_CONFIG, DictionaryConfig
from core.dictionary_helpers import parse_translation_value
from core.models import (
    DictionaryRow,
    ParseResult,
    TopicRow,
    WordRow,
    create_empty_word_row,
    create_topic_row,
)
from core.token_codec import (
    decode,
    decode_list,
    encode,
    encode_list,
    escape_token,
    resolve_token,
)

log = logging.getLogger("wordlisteditor.dictionary_format")

CONFIG_PREFIX = "org.leo.dictionary.config.entity.ParseWords"
CONFIG_PART_SEPARATOR = ":"
CONFIG_PARTS_COUNT = 10

_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class _Delimiters:
    column: str
    additional_information: str
    translation: str
    topic_flag: str


def _resolve_delimiters(config: DictionaryConfig) -> _Delimiters:
    return _Delimiters(
        column=resolve_token(config.delimiter),
        additional_information=resolve_token(config.additional_information_delimiter),
        translation=resolve_token(config.translation_delimiter),
        topic_flag=resolve_token(config.topic_flag),
    )


def _split_lines(content: str) -> list[str]:
    lines = (line.removesuffix("\r") for line in _LINE_BREAK.split(content))
    return [line for line in lines if line.strip()]


def parse_config_line(line: str) -> Optional[DictionaryConfig]:
    """Decode a configuration header line.

    Args:
        line: First non-blank line of a file

    Returns:
        DictionaryConfig, or None if the line is not a configuration header
    """
    if not line.startswith(CONFIG_PREFIX):
        return None

    parts = line.split(CONFIG_PART_SEPARATOR)
    if len(parts) != CONFIG_PARTS_COUNT or parts[0] != CONFIG_PREFIX:
        log.warning(
            f"Ignoring header line with {len(parts)} parts "
            f"(expected {CONFIG_PARTS_COUNT})"
        )
        return None

    fields = parts[1:]
    return DictionaryConfig(
        language_from=decode(fields[0]),
        languages_to=decode_list(fields[1]),
        articles=decode_list(fields[2]),
        delimiter=resolve_token(decode(fields[3])),
        additional_information_delimiter=resolve_token(decode(fields[4])),
        translation_delimiter=resolve_token(decode(fields[5])),
        topic_flag=resolve_token(decode(fields[6])),
        topic_delimiter=resolve_token(decode(fields[7])),
        root_topic=decode(fields[8]),
    )


def _match_article(source_cell: str, articles: list[str]) -> str:
    """Return the longest article prefixing the cell, first seen on ties."""
    matched = ""
    for article in articles:
        if article and source_cell.startswith(article) and len(article) > len(matched):
            matched = article
    return matched


def parse_word_line(line: str, config: DictionaryConfig) -> WordRow:
    """Parse one word line, recovering best-effort from odd column counts."""
    delimiters = _resolve_delimiters(config)
    columns = line.split(delimiters.column) if delimiters.column else [line]
    row = create_empty_word_row(config)

    source_cell = columns[0]
    article = _match_article(source_cell, config.articles)
    if article:
        row.article = article.strip()
        source_cell = source_cell[len(article):].lstrip()

    if delimiters.additional_information:
        word_part, _, additional = source_cell.partition(
            delimiters.additional_information
        )
    else:
        word_part, additional = source_cell, ""
    row.value_from = word_part.strip()

    index = 1
    if len(columns) - index > len(config.languages_to):
        # One column more than languages: explicit annotation column
        row.additional_information = columns[index].strip()
        index += 1
    elif additional.strip():
        row.additional_information = additional.strip()

    for language in config.languages_to:
        value = columns[index] if index < len(columns) else ""
        row.values_to[language] = parse_translation_value(
            value, delimiters.translation
        )
        index += 1

    return row


def parse_file(
    content: str, fallback_config: DictionaryConfig = DEFAULT_CONFIG
) -> ParseResult:
    """Parse dictionary file content.

    Never raises for malformed content; lines that do not fit the format are
    read into rows with empty fields.

    Args:
        content: Raw file text
        fallback_config: Configuration used when the file has no header line

    Returns:
        ParseResult with the effective configuration and the rows
    """
    lines = _split_lines(content)

    config = fallback_config
    start_index = 0
    if lines:
        header_config = parse_config_line(lines[0])
        if header_config is not None:
            config = header_config
            start_index = 1
            log.debug(
                f"Read header: {config.language_from} -> "
                f"{', '.join(config.languages_to)}"
            )
        else:
            log.debug("No header line, using fallback configuration")

    topic_flag = resolve_token(config.topic_flag)
    rows: list[DictionaryRow] = []
    for line in lines[start_index:]:
        if topic_flag and line.startswith(topic_flag):
            rows.append(create_topic_row(line[len(topic_flag):].strip()))
            continue
        rows.append(parse_word_line(line.strip(), config))

    log.debug(f"Parsed {len(rows)} rows")
    return ParseResult(config=config, rows=rows)


def build_config_line(config: DictionaryConfig) -> str:
    parts = [
        encode(config.language_from),
        encode_list(config.languages_to),
        encode_list(config.articles),
        encode(escape_token(config.delimiter)),
        encode(escape_token(config.additional_information_delimiter)),
        encode(escape_token(config.translation_delimiter)),
        encode(escape_token(config.topic_flag)),
        encode(escape_token(config.topic_delimiter)),
        encode(config.root_topic),
    ]
    return CONFIG_PART_SEPARATOR.join([CONFIG_PREFIX, *parts])


def serialize_row(config: DictionaryConfig, row: DictionaryRow) -> str:
    """Render a single row as one line of the file format."""
    delimiters = _resolve_delimiters(config)

    if isinstance(row, TopicRow):
        return f"{delimiters.topic_flag}{row.label}"

    source_column = row.value_from
    if row.article.strip():
        source_column = f"{row.article} {source_column}".strip()
    if row.additional_information.strip():
        source_column = (
            f"{source_column}{delimiters.additional_information} "
            f"{row.additional_information}"
        )

    columns = [source_column]
    translation_separator = f"{delimiters.translation} "
    for language in config.languages_to:
        columns.append(translation_separator.join(row.values_to.get(language, [])))

    return f" {delimiters.column} ".join(columns)


def export_file(config: DictionaryConfig, rows: list[DictionaryRow]) -> str:
    """Serialize configuration and rows; the inputs are not modified."""
    lines = [build_config_line(config)]
    lines.extend(serialize_row(config, row) for row in rows)
    return "\n".join(lines)


def normalize_text(content: str) -> str:
    """Drop blank lines and trailing whitespace for round-trip comparison."""
    return "\n".join(line.rstrip() for line in _split_lines(content))


def read_text(path: Union[str, Path], encoding: str = "utf-8") -> str:
    """Read a dictionary file.

    Raises:
        OSError: If the file cannot be read
    """
    content = Path(path).read_text(encoding=encoding)
    # Files saved by Windows editors may start with a byte order mark
    return content.removeprefix("\ufeff")


def load_file(
    path: Union[str, Path],
    fallback_config: DictionaryConfig = DEFAULT_CONFIG,
    encoding: str = "utf-8",
) -> ParseResult:
    """Read and parse a dictionary file.

    Raises:
        OSError: If the file cannot be read
    """
    result = parse_file(read_text(path, encoding), fallback_config)
    log.info(f"Loaded {len(result.rows)} rows from {path}")
    return result


def save_file(
    path: Union[str, Path],
    config: DictionaryConfig,
    rows: list[DictionaryRow],
    encoding: str = "utf-8",
) -> None:
    """Export rows and write them to ``path``.

    Raises:
        OSError: If the file cannot be written
    """
    content = export_file(config, rows)
    with open(path, "w", encoding=encoding, newline="\n") as f:
        f.write(content)
    log.info(f"Saved {len(rows)} rows to {path}")
