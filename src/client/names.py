"""Selection of localized entries (names, effects, flavour text) from PokeAPI payloads."""

from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

from configs.constants import Constants
from src.client.errors import LocalizationError

T = TypeVar("T")


def linear_search(entries: Sequence[T], predicate: Callable[[T], bool]) -> T:
    """Return the first entry matching *predicate*, else the first entry."""
    if not entries:
        raise LocalizationError("unable to find a suitable value in an empty list")
    for entry in entries:
        if predicate(entry):
            return entry
    return entries[0]


def _language_name(language: Any) -> str | None:
    if isinstance(language, dict):
        return language.get("name")
    return language


def english_search(names: Sequence[dict]) -> dict:
    """Pick the English ``{"name", "language"}`` entry of a ``names`` list."""
    return linear_search(
        names, lambda entry: _language_name(entry.get("language")) == Constants.ENGLISH
    )


def english_search_by(entries: Sequence[T], get_language: Callable[[T], Any]) -> T:
    """Like :func:`english_search` for entries whose language sits elsewhere."""
    return linear_search(
        entries, lambda entry: _language_name(get_language(entry)) == Constants.ENGLISH
    )


def english_name(names: Sequence[dict]) -> str:
    return english_search(names)["name"]


def english_effect(entries: Sequence[dict], text_key: str = "effect") -> str:
    """Return the English effect text, whitespace-normalised like flavour text."""
    entry = english_search_by(entries, lambda e: e.get("language"))
    return (
        entry.get(text_key, "")
        .replace("\n", " ")
        .replace("\f", " ")
        .strip()
    )
