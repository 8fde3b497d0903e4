"""
Defensive type-matchup aggregation.

A :class:`TypeMatchup` starts with every base elemental type at ×1 and
folds in the damage relations of one or more defending types.  Each
contributing type is applied as a unit, in this order:

  1. ``no_damage_from``     → multiplier set to exactly 0
  2. ``double_damage_from`` → multiplier × 2
  3. ``half_damage_from``   → multiplier ÷ 2

Successive types compound multiplicatively.  The grouped report is cached
and rebuilt only after the table changed.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Dict, Iterable, List, Protocol, TextIO, Tuple

from configs.constants import Constants
from src.client.errors import DexLookupError, OutputError, TypeResolutionError
from src.client.models import DamageRelations, ElementalType, NamedResource

# Multipliers are grouped on multiplier * 100, rounded half up
MULTIPLIER_PRECISION = 100


class TypeCatalogProvider(Protocol):
    def list_all_types(self) -> List[ElementalType]: ...

    def get_type(self, name: str) -> ElementalType: ...

    def follow_type(self, resource: NamedResource) -> ElementalType: ...


@dataclass(frozen=True)
class MatchupGroup:
    """Every attacking type sharing one final multiplier."""

    multiplier: float
    names: Tuple[str, ...]

    def __iter__(self):
        # Allows ``for multiplier, names in matchup.get()``
        return iter((self.multiplier, self.names))


def format_multiplier(multiplier: float) -> str:
    """Render a multiplier without trailing zeros: ``×2``, ``×0.5``, ``×0``."""
    return f"×{multiplier:g}"


def group_by_multiplier(entries: Iterable[Tuple[str, float]]) -> Tuple[MatchupGroup, ...]:
    """
    Group ``(display name, multiplier)`` pairs into a report.

    Groups are ordered by multiplier, highest first; names inside a group
    are unique and sorted.
    """
    buckets: Dict[int, set] = {}
    for name, multiplier in entries:
        key = math.floor(multiplier * MULTIPLIER_PRECISION + 0.5)
        buckets.setdefault(key, set()).add(name)

    return tuple(
        MatchupGroup(multiplier=key / MULTIPLIER_PRECISION, names=tuple(sorted(names)))
        for key, names in sorted(buckets.items(), reverse=True)
    )


class TypeMatchup:
    """
    Damage multipliers of every base type against a set of defending types.

    Parameters
    ----------
    provider : TypeCatalogProvider
        Supplies the type catalog and resolves types by name or reference.
        A ``CatalogFetchError`` raised while listing types propagates.
    """

    def __init__(self, provider: TypeCatalogProvider) -> None:
        self.provider = provider
        self._table: Dict[int, List] = {
            elemental_type.id: [elemental_type.display_name, 1.0]
            for elemental_type in provider.list_all_types()
            if elemental_type.id < Constants.BASE_TYPE_ID_CUTOFF
        }
        self._report: Tuple[MatchupGroup, ...] | None = None

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, type_id: int) -> bool:
        return type_id in self._table

    def multiplier(self, type_id: int) -> float:
        return self._table[type_id][1]

    def multipliers(self) -> Dict[int, float]:
        return {type_id: entry[1] for type_id, entry in self._table.items()}

    # ------------------------------------------------------------------
    # Single-type mutators
    # ------------------------------------------------------------------

    def _update(self, type_id: int, value: float) -> bool:
        entry = self._table.get(type_id)
        if entry is None:
            return False
        entry[1] = value
        self._report = None
        return True

    def no_damage_from(self, type_id: int) -> bool:
        """Set *type_id* to ×0.  Returns False when the type is not tracked."""
        return self._update(type_id, 0.0)

    def double_damage_from(self, type_id: int) -> bool:
        entry = self._table.get(type_id)
        return entry is not None and self._update(type_id, entry[1] * 2.0)

    def half_damage_from(self, type_id: int) -> bool:
        entry = self._table.get(type_id)
        return entry is not None and self._update(type_id, entry[1] / 2.0)

    # ------------------------------------------------------------------
    # Resolving mutators
    # ------------------------------------------------------------------

    def _resolve_name(self, name: str) -> ElementalType:
        try:
            return self.provider.get_type(name)
        except DexLookupError as exc:
            raise TypeResolutionError(name, exc) from exc

    def _resolve_ref(self, resource: NamedResource) -> ElementalType:
        try:
            return self.provider.follow_type(resource)
        except DexLookupError as exc:
            raise TypeResolutionError(resource.name, exc) from exc

    def no_damage_from_name(self, name: str) -> bool:
        return self.no_damage_from(self._resolve_name(name).id)

    def double_damage_from_name(self, name: str) -> bool:
        return self.double_damage_from(self._resolve_name(name).id)

    def half_damage_from_name(self, name: str) -> bool:
        return self.half_damage_from(self._resolve_name(name).id)

    def no_damage_from_ref(self, resource: NamedResource) -> bool:
        return self.no_damage_from(self._resolve_ref(resource).id)

    def double_damage_from_ref(self, resource: NamedResource) -> bool:
        return self.double_damage_from(self._resolve_ref(resource).id)

    def half_damage_from_ref(self, resource: NamedResource) -> bool:
        return self.half_damage_from(self._resolve_ref(resource).id)

    # ------------------------------------------------------------------
    # Relation bundles
    # ------------------------------------------------------------------

    def apply_relations(self, relations: DamageRelations) -> None:
        """Apply one type's relations: zero, then double, then halve."""
        for resource in relations.no_damage_from:
            self.no_damage_from(resource.id)
        for resource in relations.double_damage_from:
            self.double_damage_from(resource.id)
        for resource in relations.half_damage_from:
            self.half_damage_from(resource.id)

    def apply_type(self, elemental_type: ElementalType) -> ElementalType:
        self.apply_relations(elemental_type.damage_relations)
        return elemental_type

    def apply_type_by_name(self, name: str) -> ElementalType:
        return self.apply_type(self._resolve_name(name))

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def get(self) -> Tuple[MatchupGroup, ...]:
        """Return the grouped report, rebuilding it only after a mutation."""
        if self._report is None:
            self._report = group_by_multiplier(
                (name, multiplier) for name, multiplier in self._table.values()
            )
        return self._report

    def render(self) -> str:
        return "".join(
            f"{format_multiplier(group.multiplier)}\t{', '.join(group.names)}\n"
            for group in self.get()
        )

    def print(self, out: TextIO | None = None) -> None:
        """
        Write the report to *out* (stdout by default) in a single call.

        Raises
        ------
        OutputError
            The sink raised an ``OSError``.
        """
        out = sys.stdout if out is None else out
        try:
            out.write(self.render())
            out.flush()
        except OSError as exc:
            raise OutputError(f"failed to write type matchups - {exc}") from exc
