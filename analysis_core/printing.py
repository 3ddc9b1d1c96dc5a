"""Separator-joined printing of sequences."""

from __future__ import annotations

from typing import Any, Iterable


def print_to_string(items: Iterable[Any], separator: str) -> str:
    """Join the string form of *items* with *separator*."""
    return separator.join(str(item) for item in items)


def print_to_comma_separated_string(items: Iterable[Any]) -> str:
    return print_to_string(items, ", ")


def print_to_semicolon_separated_string(items: Iterable[Any]) -> str:
    return print_to_string(items, "; ")


def print_to_newline_separated_string(items: Iterable[Any]) -> str:
    return print_to_string(items, "\n")


__all__ = [
    "print_to_string",
    "print_to_comma_separated_string",
    "print_to_semicolon_separated_string",
    "print_to_newline_separated_string",
]
