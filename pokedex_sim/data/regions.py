"""National Dex ranges per region, used by the browsing endpoints."""

REGIONS = [
    {"name": "kanto", "generation": 1, "pokemon_range": {"start": 1, "end": 151}},
    {"name": "johto", "generation": 2, "pokemon_range": {"start": 152, "end": 251}},
    {"name": "hoenn", "generation": 3, "pokemon_range": {"start": 252, "end": 386}},
    {"name": "sinnoh", "generation": 4, "pokemon_range": {"start": 387, "end": 493}},
    {"name": "unova", "generation": 5, "pokemon_range": {"start": 494, "end": 649}},
    {"name": "kalos", "generation": 6, "pokemon_range": {"start": 650, "end": 721}},
    {"name": "alola", "generation": 7, "pokemon_range": {"start": 722, "end": 809}},
    {"name": "galar", "generation": 8, "pokemon_range": {"start": 810, "end": 898}},
]


def find_region(name: str) -> dict:
    slug = name.strip().lower()
    for region in REGIONS:
        if region["name"] == slug:
            return region
    raise KeyError(f"Region {name} not found")
