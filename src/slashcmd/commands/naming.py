"""Command naming rules and name sanitization."""

import re

COMMAND_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")

NAME_RULE = "must start with a letter and contain only letters, numbers, and hyphens"

MAX_SANITIZED_NAME_LENGTH = 50

_NON_ASCII = re.compile(r"[^\x00-\x7F]")
_SPECIAL_CHARS = re.compile(r"[^a-zA-Z0-9\s-]")
_WHITESPACE_RUN = re.compile(r"\s+")
_NON_LETTER_PREFIX = re.compile(r"^[^a-zA-Z]+")
_HYPHEN_RUN = re.compile(r"-+")
_EDGE_HYPHENS = re.compile(r"^-+|-+$")


def is_valid_command_name(name: object) -> bool:
    """True if name is a string accepted as a registry key."""
    return isinstance(name, str) and COMMAND_NAME_PATTERN.fullmatch(name) is not None


def sanitize_command_name(name: str) -> str:
    """
    Derive a command name from free-form text (a heading or a file name).

    Returns an empty string when nothing usable remains, which callers treat
    as "no name".

    Examples:
        >>> sanitize_command_name("Build & Deploy")
        'build-deploy'
        >>> sanitize_command_name("2024 Release Notes")
        'release-notes'
        >>> sanitize_command_name("模块")
        ''
    """
    ascii_only = _NON_ASCII.sub("", name)
    if not ascii_only.strip():
        return ""

    result = ascii_only.lower()
    result = _SPECIAL_CHARS.sub("", result)
    result = _WHITESPACE_RUN.sub("-", result)
    result = _NON_LETTER_PREFIX.sub("", result)
    result = _HYPHEN_RUN.sub("-", result)
    result = _EDGE_HYPHENS.sub("", result)
    return result[:MAX_SANITIZED_NAME_LENGTH]
