"""
Constants
"""

import os
from pathlib import Path


class Constants:
    """
    Constants configurations
    """

    POKEAPI_BASE_URL = "https://pokeapi.co/api/v2"
    USER_AGENT = "dex-lookup/1.0 (pokeapi-cli)"

    # PokeAPI keeps placeholder types ("unknown", "shadow") at ids >= 10000
    BASE_TYPE_ID_CUTOFF = 10000
    TYPE_LIST_LIMIT = 100

    DEFAULT_CACHE_DIR = ".cache"
    CONFIG_PATH = Path(
        os.environ.get(
            "DEX_LOOKUP_CONFIG",
            os.path.join(os.path.expanduser("~"), ".config", "dex-lookup", "config.json"),
        )
    )

    SEARCH_KINDS = ("pokemon", "ability", "move", "item", "type")
    ENGLISH = "en"
