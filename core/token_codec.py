"""Encoding of configuration header tokens.

Header values go through two layers. Delimiter-like values are first
backslash-escaped (``escape_token``) so control characters and the pipe can be
embedded, then every value is percent-encoded with spaces written as ``+``
(``encode``). Reading applies ``decode`` and then ``resolve_token``.
"""

import logging
import re
from urllib.parse import quote, unquote

log = logging.getLogger("wordlisteditor.token_codec")

LIST_SEPARATOR = ";"

# Characters left unescaped besides ASCII letters, digits and "_.-~"
_URI_COMPONENT_SAFE = "!*'()"

_MALFORMED_PERCENT = re.compile(r"%(?![0-9A-Fa-f]{2})")

_ESCAPES = {
    "\\": "\\\\",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    "|": "\\|",
}
_ESCAPE_PATTERN = re.compile(r"[\\\t\n\r|]")

_RESOLVES = {
    "t": "\t",
    "n": "\n",
    "r": "\r",
    "|": "|",
    "\\": "\\",
}
_RESOLVE_PATTERN = re.compile(r"\\([tnr|\\])")


def encode(value: str) -> str:
    """Percent-encode a header value, writing spaces as ``+``."""
    return quote(value, safe=_URI_COMPONENT_SAFE).replace("%20", "+")


def decode(value: str) -> str:
    """Reverse ``encode``.

    Malformed percent sequences and invalid UTF-8 leave the value untouched.

    Args:
        value: Encoded header value

    Returns:
        Decoded value, or ``value`` itself if it cannot be decoded
    """
    prepared = value.replace("+", "%20")
    if _MALFORMED_PERCENT.search(prepared):
        log.debug(f"Malformed percent sequence in header token {value!r}")
        return value
    try:
        return unquote(prepared, errors="strict")
    except UnicodeDecodeError as e:
        log.debug(f"Header token {value!r} is not valid UTF-8 ({e})")
        return value


def escape_token(value: str) -> str:
    """Backslash-escape ``\\``, tab, LF, CR and ``|``."""
    return _ESCAPE_PATTERN.sub(lambda match: _ESCAPES[match.group(0)], value)


def resolve_token(value: str) -> str:
    """Reverse ``escape_token`` in a single pass.

    ``\\\\t`` resolves to a backslash followed by ``t``, never to a backslash
    followed by a tab. Unknown escapes are kept as written.
    """
    return _RESOLVE_PATTERN.sub(lambda match: _RESOLVES[match.group(1)], value)


def parse_list(value: str) -> list[str]:
    if value == "":
        return []
    return value.split(LIST_SEPARATOR)


def encode_list(values: list[str]) -> str:
    """Encode each element and join them with a literal ``;``."""
    return LIST_SEPARATOR.join(encode(value) for value in values)


def decode_list(value: str) -> list[str]:
    """Split an encoded list on ``;`` and decode each element."""
    return [decode(item) for item in parse_list(value)]
