"""
PokeAPI client for dex-lookup.

Resolves the records the lookup commands print (Pokemon, species, moves,
abilities, items) and the elemental types the matchup engine consumes:

  - Raw payloads stay plain dicts; only elemental types are modelled
  - ``follow`` dereferences any ``{"name", "url"}`` resource reference
  - ``list_all_types`` enumerates the type catalog, following pagination,
    and fetches every type concurrently through the shared ThreadExecutor
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from configs.constants import Constants
from src.client.base import BaseClient, ClientConfig
from src.client.errors import CatalogFetchError, DexLookupError
from src.client.models import DamageRelations, ElementalType, NamedResource
from src.client.names import english_name


def normalize_query(text: str) -> str:
    """Turn user input such as ``"Mr Mime"`` into an API slug (``"mr-mime"``)."""
    return text.strip().replace(" ", "-").lower()


class PokeAPIClient(BaseClient):
    """
    Fetches and caches PokeAPI resources.

    Parameters
    ----------
    config : ClientConfig
        Client configuration.  Defaults to a ``.cache`` directory in the
        working directory if omitted.
    """

    def __init__(self, config: Optional[ClientConfig] = None, session=None) -> None:
        if config is None:
            config = ClientConfig(cache_dir=Path(Constants.DEFAULT_CACHE_DIR))
        super().__init__(config, session=session)

    # ------------------------------------------------------------------
    # PokeAPI-specific get(): relative paths and full URLs
    # ------------------------------------------------------------------

    def get(self, endpoint: str, use_cache: bool | None = None) -> Any:
        """
        Fetch *endpoint* from PokeAPI with disk caching and rate limiting.

        Parameters
        ----------
        endpoint : str
            Either a relative path (``"/pokemon/1"``) or a full URL.
        """
        if endpoint.startswith("http"):
            url = endpoint
        else:
            url = f"{Constants.POKEAPI_BASE_URL}{endpoint}"

        return self.get_json(url, use_cache=use_cache)

    def follow(self, resource: dict | NamedResource) -> dict:
        """Fetch the resource a ``{"name", "url"}`` reference points to."""
        url = resource.url if isinstance(resource, NamedResource) else resource["url"]
        return self.get(url)

    # ------------------------------------------------------------------
    # Record fetchers
    # ------------------------------------------------------------------

    def get_pokemon(self, name: str) -> dict:
        return self.get(f"/pokemon/{normalize_query(name)}")

    def get_ability(self, name: str) -> dict:
        return self.get(f"/ability/{normalize_query(name)}")

    def get_move(self, name: str) -> dict:
        return self.get(f"/move/{normalize_query(name)}")

    def get_item(self, name: str) -> dict:
        return self.get(f"/item/{normalize_query(name)}")

    # ------------------------------------------------------------------
    # Elemental types
    # ------------------------------------------------------------------

    @staticmethod
    def _to_elemental_type(data: dict) -> ElementalType:
        return ElementalType(
            id=data["id"],
            name=data["name"],
            display_name=english_name(data.get("names", [])),
            damage_relations=DamageRelations.from_api(data.get("damage_relations")),
        )

    def get_type(self, name: str) -> ElementalType:
        return self._to_elemental_type(self.get(f"/type/{normalize_query(name)}"))

    def get_type_by_id(self, type_id: int) -> ElementalType:
        return self._to_elemental_type(self.get(f"/type/{type_id}"))

    def follow_type(self, resource: dict | NamedResource) -> ElementalType:
        return self._to_elemental_type(self.follow(resource))

    def _type_references(self) -> list[dict]:
        refs: list[dict] = []
        page: Optional[str] = f"/type?limit={Constants.TYPE_LIST_LIMIT}"
        while page:
            data = self.get(page)
            refs.extend(data.get("results", []))
            page = data.get("next")
        return refs

    def list_all_types(self) -> list[ElementalType]:
        """
        Enumerate every elemental type the API knows, placeholders included.

        Raises
        ------
        CatalogFetchError
            Any failure while listing or fetching the types.
        """
        try:
            refs = self._type_references()
            types = self.executor.map(self.follow_type, refs)
        except (DexLookupError, KeyError, TypeError) as exc:
            raise CatalogFetchError(f"unable to enumerate elemental types - {exc}") from exc

        self.logger.debug(f"Type catalog: {len(types)} types")
        return types
