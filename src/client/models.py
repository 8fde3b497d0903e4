"""Typed views over the PokeAPI payloads the type-matchup engine consumes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Tuple


@dataclass(frozen=True)
class NamedResource:
    """A ``{"name", "url"}`` reference to another API resource."""

    name: str
    url: str

    @property
    def id(self) -> int:
        return int(self.url.rstrip("/").rsplit("/", 1)[-1])

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "NamedResource":
        return cls(name=data["name"], url=data["url"])


def _resources(items: list[dict] | None) -> Tuple[NamedResource, ...]:
    return tuple(NamedResource.from_api(item) for item in items or [])


@dataclass(frozen=True)
class DamageRelations:
    """Defensive damage relations of one attacking/defending type."""

    no_damage_from: Tuple[NamedResource, ...] = ()
    double_damage_from: Tuple[NamedResource, ...] = ()
    half_damage_from: Tuple[NamedResource, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any] | None) -> "DamageRelations":
        data = data or {}
        return cls(
            no_damage_from=_resources(data.get("no_damage_from")),
            double_damage_from=_resources(data.get("double_damage_from")),
            half_damage_from=_resources(data.get("half_damage_from")),
        )


@dataclass(frozen=True)
class ElementalType:
    id: int
    name: str
    display_name: str
    damage_relations: DamageRelations = field(default_factory=DamageRelations)
