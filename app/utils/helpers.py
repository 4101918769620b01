"""Utility helper functions"""

from typing import Iterable
import re


def truncate_string(text: str, max_length: int, suffix: str = "") -> str:
    """
    Truncate string to maximum length

    Args:
        text: Text to truncate
        max_length: Maximum length, suffix included
        suffix: Suffix to add if truncated

    Returns:
        Truncated string
    """
    if len(text) <= max_length:
        return text

    return text[:max(max_length - len(suffix), 0)] + suffix


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp an integer score into ``[lower, upper]``."""
    return max(lower, min(upper, value))


def file_extension(filename: str) -> str:
    """
    Return the lowercase extension of a file name, dot included

    Dotfiles without a second dot (``.env``) and extensionless names
    (``Dockerfile``) have no extension.
    """
    stem = filename.rsplit("/", 1)[-1]
    if "." not in stem.lstrip("."):
        return ""
    return "." + stem.rsplit(".", 1)[-1].lower()


def mentions_any(texts: Iterable[str], terms: Iterable[str]) -> bool:
    """
    Check whether any text mentions any of the terms

    Short alphabetic terms (``ai``, ``ui``, ``api``) match as a word with an
    optional plural (``APIs``, ``UIs``) or as an uppercase acronym inside a
    compound (``OpenAI``, ``UIKit``), so ``daily`` or ``rapid`` do not count.
    Longer terms match as case-insensitive substrings.

    Args:
        texts: Texts to search
        terms: Terms to look for

    Returns:
        True if at least one text mentions at least one term
    """
    patterns = []
    for term in terms:
        escaped = re.escape(term.lower())
        if len(term) <= 3 and term.isalpha():
            acronym = re.escape(term.upper())
            patterns.append(rf"(?i:\b{escaped}s?\b)|{acronym}")
        else:
            patterns.append(rf"(?i:{escaped})")
    regex = re.compile("|".join(patterns))

    return any(regex.search(text or "") for text in texts)
