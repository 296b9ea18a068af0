"""
Input helpers shared by the command-line tools.

Tools accept their main input (raw transaction hex, txid, WIF) as an
argument, an option, or piped stdin. Arguments and options may also be
file:// or http(s):// references.
"""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import TextIO

import httpx

from bsvtools.errors import InvalidInputError, ProviderError

HEX_RE = re.compile(r"^[0-9a-fA-F]+$")
FETCH_TIMEOUT = 30.0


def is_valid_hex(value: str) -> bool:
    return bool(value) and HEX_RE.match(value) is not None


def clean_string(value: str) -> str:
    """Keep only printable, non-space ASCII (codes 33-126)."""
    return "".join(ch for ch in value if 32 < ord(ch) < 127)


def read_clean(stream: TextIO) -> str:
    """Read a stream, dropping all whitespace and control characters."""
    return "".join(clean_string(line) for line in stream)


def stdin_is_piped(stream: TextIO | None = None) -> bool:
    stream = stream or sys.stdin
    try:
        return not stream.isatty()
    except (AttributeError, ValueError):
        return False


def resolve_input(value: str, transport: httpx.BaseTransport | None = None) -> str:
    """
    Resolve a literal value, file:// path or http(s):// URL to its content.

    Raises:
        InvalidInputError: If a referenced file cannot be read
        ProviderError: If a URL cannot be fetched
    """
    if value.startswith("file://"):
        path = Path(value.removeprefix("file://"))
        try:
            return clean_string(path.read_text())
        except OSError as e:
            raise InvalidInputError(f"reading file: {e}") from e

    if value.startswith(("http://", "https://")):
        try:
            with httpx.Client(timeout=FETCH_TIMEOUT, transport=transport) as client:
                response = client.get(value)
        except httpx.HTTPError as e:
            raise ProviderError(f"fetching URL: {e}") from e
        if response.status_code != 200:
            raise ProviderError(
                f"HTTP error: {response.status_code}", status_code=response.status_code
            )
        return clean_string(response.text)

    return value.strip()


def get_input(
    argument: str | None,
    option: str | None,
    what: str,
    stdin: TextIO | None = None,
) -> str:
    """
    Pick the tool input from argument, then option, then piped stdin.

    Raises:
        InvalidInputError: If no input was provided
    """
    stdin = stdin or sys.stdin

    if argument:
        value = resolve_input(argument)
    elif option:
        value = resolve_input(option)
    elif stdin_is_piped(stdin):
        value = read_clean(stdin)
    else:
        value = ""

    if not value:
        raise InvalidInputError(f"no {what} provided")
    return value


def get_hex_input(
    argument: str | None, option: str | None, what: str, stdin: TextIO | None = None
) -> str:
    """Like get_input, additionally requiring a hex string."""
    value = get_input(argument, option, what, stdin)
    if not is_valid_hex(value):
        raise InvalidInputError(f"{what} is not a valid hex string")
    return value
