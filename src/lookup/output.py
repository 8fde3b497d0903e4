"""Shared helpers for turning API records into the printed report."""

from __future__ import annotations

import logging
from typing import Callable, TextIO, TypeVar

from src.client.errors import DexLookupError, OutputError, ResolutionError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SEPARATOR = "---"


def resolve(kind: str, text: str, fetch: Callable[[], T]) -> T:
    """Run *fetch*, reporting any failure as ``failed to resolve {kind} '{text}'``."""
    try:
        return fetch()
    except ResolutionError:
        raise
    except DexLookupError as exc:
        raise ResolutionError(kind, text, exc) from exc


def format_number(value: float) -> str:
    """``6.9`` stays ``6.9``, ``100.0`` becomes ``100``."""
    return f"{value:g}"


def capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def write_report(out: TextIO, text: str) -> None:
    """Write a complete report in one call; sink failures become OutputError."""
    try:
        out.write(text)
        out.flush()
    except OSError as exc:
        raise OutputError(f"failed to write report - {exc}") from exc
    logger.debug(f"Wrote {len(text)} characters")
