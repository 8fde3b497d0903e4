"""
Lookup commands: one renderer per search kind.

Every renderer resolves the full record (following references as needed)
and returns the finished text; nothing is written until the whole report
exists, so a failure never leaves a partial report behind.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Sequence, TextIO

from src.client.errors import DexLookupError, TypeResolutionError
from src.client.models import ElementalType
from src.client.names import english_effect, english_name
from src.client.pokeapi import PokeAPIClient
from src.lookup.output import SEPARATOR, capitalize, format_number, resolve, write_report
from src.matchup.aggregator import TypeMatchup

logger = logging.getLogger(__name__)

NO_EFFECT = "No effect description available."


def _effect(entries: list[dict]) -> str:
    return english_effect(entries) if entries else NO_EFFECT


def _generation_name(client: PokeAPIClient, record: dict) -> str:
    return english_name(client.follow(record["generation"])["names"])


# ---------------------------------------------------------------------------
# Elemental types
# ---------------------------------------------------------------------------


def resolve_types(client: PokeAPIClient, names: Sequence[str]) -> List[ElementalType]:
    """Fetch the named types concurrently; the result keeps the input order."""

    def fetch(name: str) -> ElementalType:
        try:
            return client.get_type(name)
        except DexLookupError as exc:
            raise TypeResolutionError(name, exc) from exc

    return client.executor.map(fetch, names)


def build_matchup(client: PokeAPIClient, types: Sequence[ElementalType]) -> TypeMatchup:
    matchup = TypeMatchup(client)
    for elemental_type in types:
        logger.debug(f"Applying damage relations of {elemental_type.name}")
        matchup.apply_type(elemental_type)
    return matchup


def lookup_type(client: PokeAPIClient, names: Sequence[str]) -> str:
    types = resolve_types(client, names)
    matchup = build_matchup(client, types)
    type_names = ", ".join(t.display_name for t in types)
    return f"Types:\t{type_names}\n\n{matchup.render()}"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


def lookup_pokemon(client: PokeAPIClient, text: str) -> str:
    pokemon = resolve("pokemon", text, lambda: client.get_pokemon(text))

    species = client.follow(pokemon["species"])
    species_name = english_name(species["names"])
    generation = _generation_name(client, species)

    slots = sorted(pokemon.get("types", []), key=lambda slot: slot["slot"])
    types = resolve_types(client, [slot["type"]["name"] for slot in slots])
    matchup = build_matchup(client, types)

    weight = format_number(pokemon["weight"] / 10.0)
    lines = [
        f"{species_name} ({generation})",
        "",
        f"Types:\t{', '.join(t.display_name for t in types)}",
        f"Weight:\t{weight} kg",
        "",
    ]
    return "\n".join(lines) + "\n" + matchup.render()


def lookup_ability(client: PokeAPIClient, text: str) -> str:
    ability = resolve("ability", text, lambda: client.get_ability(text))

    name = english_name(ability["names"])
    generation = _generation_name(client, ability)
    effect = _effect(ability.get("effect_entries", []))

    return f"{name} ({generation})\n\n{SEPARATOR}\n\n{effect}\n"


def lookup_move(client: PokeAPIClient, text: str) -> str:
    move = resolve("move", text, lambda: client.get_move(text))

    name = english_name(move["names"])
    generation = _generation_name(client, move)
    damage_class = capitalize(english_name(client.follow(move["damage_class"])["names"]))
    move_type = english_name(client.follow(move["type"])["names"])
    target = english_name(client.follow(move["target"])["names"])

    effect = _effect(move.get("effect_entries", []))
    if move.get("effect_chance") is not None:
        effect = effect.replace("$effect_chance", str(move["effect_chance"]))

    def optional(value) -> str:
        return "-" if value is None else str(value)

    lines = [
        f"{name} ({generation})",
        "",
        f"Class:\t\t{damage_class}",
        f"Type:\t\t{move_type}",
        f"PP:\t\t{optional(move.get('pp'))}",
        f"Power:\t\t{optional(move.get('power'))}",
        f"Accuracy:\t{optional(move.get('accuracy'))}",
    ]
    if move.get("priority"):
        lines.append(f"Priority:\t{move['priority']}")
    lines += [f"Target:\t\t{target}", "", SEPARATOR, "", effect]
    return "\n".join(lines) + "\n"


def lookup_item(client: PokeAPIClient, text: str) -> str:
    item = resolve("item", text, lambda: client.get_item(text))

    name = english_name(item["names"])
    category = english_name(client.follow(item["category"])["names"])

    parts = [f"{name} ({category})\n\n{SEPARATOR}\n"]

    fling_effect, fling_power = item.get("fling_effect"), item.get("fling_power")
    if fling_effect and fling_power:
        fling_text = _effect(client.follow(fling_effect).get("effect_entries", []))
        parts.append(f"Thrown with fling ({fling_power} power)\n:   {fling_text}\n")

    parts.append(_effect(item.get("effect_entries", [])))
    return "\n".join(parts) + "\n"


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

LOOKUPS: Dict[str, Callable[[PokeAPIClient, str], str]] = {
    "pokemon": lookup_pokemon,
    "ability": lookup_ability,
    "move": lookup_move,
    "item": lookup_item,
}


def run_lookup(kind: str, client: PokeAPIClient, query: Sequence[str], out: TextIO) -> None:
    """Resolve *query* for *kind* and write the report to *out*."""
    if kind == "type":
        report = lookup_type(client, list(query))
    else:
        if kind not in LOOKUPS:
            raise KeyError(f"Unknown search kind '{kind}'")
        report = LOOKUPS[kind](client, " ".join(query))
    write_report(out, report)
