import pathlib
import sys

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from collections import Counter

import pytest
import requests

from configs.constants import Constants
from src.client.base import ClientConfig
from src.client.errors import ResourceNotFoundError
from src.client.models import DamageRelations, ElementalType, NamedResource
from src.client.pokeapi import PokeAPIClient

BASE = Constants.POKEAPI_BASE_URL


def ref(kind, name, resource_id):
    return {"name": name, "url": f"{BASE}/{kind}/{resource_id}/"}


def names(english, french=None):
    entries = [{"name": english, "language": {"name": "en", "url": f"{BASE}/language/9/"}}]
    if french:
        entries.insert(0, {"name": french, "language": {"name": "fr", "url": f"{BASE}/language/5/"}})
    return entries


TYPE_IDS = {
    "normal": 1,
    "flying": 3,
    "ground": 5,
    "fire": 10,
    "water": 11,
    "grass": 12,
    "electric": 13,
    "unknown": 10001,
}


def type_ref(name):
    return ref("type", name, TYPE_IDS[name])


def type_payload(name, french=None, no=(), double=(), half=()):
    return {
        "id": TYPE_IDS[name],
        "name": name,
        "names": names(name.capitalize(), french),
        "damage_relations": {
            "no_damage_from": [type_ref(n) for n in no],
            "double_damage_from": [type_ref(n) for n in double],
            "half_damage_from": [type_ref(n) for n in half],
            "no_damage_to": [],
            "double_damage_to": [],
            "half_damage_to": [],
        },
    }


def build_api():
    """A miniature PokeAPI keyed by URL (without trailing slash)."""
    types = {
        "normal": type_payload("normal", "Normal", no=("unknown",)),
        "flying": type_payload("flying", "Vol", no=("ground",), double=("electric",), half=("grass",)),
        "ground": type_payload("ground", "Sol", no=("electric",), double=("water", "grass")),
        "fire": type_payload("fire", "Feu", double=("water", "ground"), half=("fire", "grass")),
        "water": type_payload("water", "Eau", double=("electric", "grass"), half=("fire", "water")),
        "grass": type_payload("grass", "Plante", double=("fire", "flying"), half=("water", "grass", "ground")),
        "electric": type_payload("electric", "Électrik", double=("ground",), half=("electric", "flying")),
        "unknown": type_payload("unknown"),
    }
    type_names = list(types)
    api = {
        f"{BASE}/type?limit={Constants.TYPE_LIST_LIMIT}": {
            "count": len(type_names),
            "next": f"{BASE}/type?offset=5&limit=5",
            "results": [type_ref(n) for n in type_names[:5]],
        },
        f"{BASE}/type?offset=5&limit=5": {
            "count": len(type_names),
            "next": None,
            "results": [type_ref(n) for n in type_names[5:]],
        },
    }
    for name, payload in types.items():
        api[f"{BASE}/type/{payload['id']}"] = payload
        api[f"{BASE}/type/{name}"] = payload

    api[f"{BASE}/generation/1"] = {"id": 1, "names": names("Generation I", "Génération I")}
    api[f"{BASE}/generation/3"] = {"id": 3, "names": names("Generation III")}

    api[f"{BASE}/pokemon/charizard"] = {
        "id": 6,
        "name": "charizard",
        "weight": 905,
        "species": ref("pokemon-species", "charizard", 6),
        "types": [
            {"slot": 2, "type": type_ref("flying")},
            {"slot": 1, "type": type_ref("fire")},
        ],
    }
    api[f"{BASE}/pokemon-species/6"] = {
        "id": 6,
        "names": names("Charizard", "Dracaufeu"),
        "generation": ref("generation", "generation-i", 1),
    }

    api[f"{BASE}/ability/swift-swim"] = {
        "id": 33,
        "names": names("Swift Swim", "Glissade"),
        "generation": ref("generation", "generation-iii", 3),
        "effect_entries": [
            {"effect": "Doubles\nspeed during rain.", "short_effect": "x", "language": {"name": "de"}},
            {"effect": "Doubles\nspeed during rain.", "short_effect": "x", "language": {"name": "en"}},
        ],
    }

    api[f"{BASE}/move/thunderbolt"] = {
        "id": 85,
        "names": names("Thunderbolt", "Tonnerre"),
        "generation": ref("generation", "generation-i", 1),
        "damage_class": ref("move-damage-class", "special", 3),
        "type": type_ref("electric"),
        "target": ref("move-target", "selected-pokemon", 10),
        "pp": 15,
        "power": 90,
        "accuracy": 100,
        "priority": 0,
        "effect_chance": 10,
        "effect_entries": [
            {"effect": "Has a $effect_chance% chance to paralyze the target.", "language": {"name": "en"}},
        ],
    }
    api[f"{BASE}/move/quick-attack"] = {
        "id": 98,
        "names": names("Quick Attack"),
        "generation": ref("generation", "generation-i", 1),
        "damage_class": ref("move-damage-class", "physical", 2),
        "type": type_ref("normal"),
        "target": ref("move-target", "selected-pokemon", 10),
        "pp": 30,
        "power": 40,
        "accuracy": None,
        "priority": 1,
        "effect_chance": None,
        "effect_entries": [],
    }
    api[f"{BASE}/move-damage-class/2"] = {"names": names("physical")}
    api[f"{BASE}/move-damage-class/3"] = {"names": names("special")}
    api[f"{BASE}/move-target/10"] = {"names": names("Selected Pokémon")}

    api[f"{BASE}/item/flame-orb"] = {
        "id": 249,
        "names": names("Flame Orb", "Orbe Flamme"),
        "category": ref("item-category", "bad-held-items", 15),
        "fling_power": 30,
        "fling_effect": ref("item-fling-effect", "burn", 1),
        "effect_entries": [
            {"effect": "Burns the holder at the end of each turn.", "language": {"name": "en"}},
        ],
    }
    api[f"{BASE}/item/poke-ball"] = {
        "id": 4,
        "names": names("Poké Ball"),
        "category": ref("item-category", "standard-balls", 34),
        "fling_power": None,
        "fling_effect": None,
        "effect_entries": [
            {"effect": "Used in battle to catch wild Pokémon.", "language": {"name": "en"}},
        ],
    }
    api[f"{BASE}/item-category/15"] = {"names": names("Bad held items")}
    api[f"{BASE}/item-category/34"] = {"names": names("Standard balls")}
    api[f"{BASE}/item-fling-effect/1"] = {
        "effect_entries": [{"effect": "Burns the target.", "language": {"name": "en"}}],
    }
    return api


class FakeResponse:
    def __init__(self, url, payload=None, status_code=200):
        self.url = url
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} for url: {self.url}", response=self)

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """Serves the miniature API and counts requests per URL."""

    def __init__(self, api):
        self.api = api
        self.calls = Counter()
        self.failures = {}

    def get(self, url, timeout=None):
        key = url.rstrip("/")
        self.calls[key] += 1
        if key in self.failures:
            failure = self.failures[key]
            if isinstance(failure, int):
                return FakeResponse(url, status_code=failure)
            raise failure
        if key not in self.api:
            return FakeResponse(url, status_code=404)
        return FakeResponse(url, self.api[key])


@pytest.fixture
def fake_session():
    return FakeSession(build_api())


@pytest.fixture
def client_config(tmp_path):
    return ClientConfig(cache_dir=tmp_path / "cache", calls_per_second=0, max_workers=4)


@pytest.fixture
def client(client_config, fake_session):
    return PokeAPIClient(config=client_config, session=fake_session)


# ---------------------------------------------------------------------------
# In-memory type provider for the aggregator
# ---------------------------------------------------------------------------


def resource(name, type_id):
    return NamedResource(name=name, url=f"{BASE}/type/{type_id}/")


class FakeTypeProvider:
    def __init__(self, types):
        self.types = list(types)
        self.by_name = {t.name: t for t in self.types}
        self.by_id = {t.id: t for t in self.types}
        self.list_calls = 0

    def list_all_types(self):
        self.list_calls += 1
        return list(self.types)

    def get_type(self, name):
        try:
            return self.by_name[name]
        except KeyError:
            raise ResourceNotFoundError(f"{BASE}/type/{name}") from None

    def follow_type(self, ref):
        try:
            return self.by_id[ref.id]
        except KeyError:
            raise ResourceNotFoundError(ref.url) from None


def elemental(type_id, name, display_name=None, **relations):
    return ElementalType(
        id=type_id,
        name=name,
        display_name=display_name or name.capitalize(),
        damage_relations=DamageRelations(**relations),
    )


@pytest.fixture
def make_provider():
    return FakeTypeProvider


@pytest.fixture
def fire_water_grass():
    fire, water, grass = resource("fire", 10), resource("water", 11), resource("grass", 12)
    return FakeTypeProvider(
        [
            elemental(
                10,
                "fire",
                no_damage_from=(grass,),
                double_damage_from=(water,),
            ),
            elemental(11, "water", half_damage_from=(fire, water)),
            elemental(12, "grass", double_damage_from=(fire,), half_damage_from=(water, grass)),
        ]
    )


@pytest.fixture
def make_type():
    return elemental


@pytest.fixture
def make_resource():
    return resource
