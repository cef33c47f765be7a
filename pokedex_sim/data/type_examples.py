"""Well-known species quoted as examples when recommending a type."""

from .type_chart import ElementalType

TYPE_EXAMPLES: dict[ElementalType, tuple[str, ...]] = {
    ElementalType.NORMAL: ("Snorlax", "Tauros", "Blissey"),
    ElementalType.FIRE: ("Charizard", "Arcanine", "Infernape"),
    ElementalType.WATER: ("Blastoise", "Gyarados", "Vaporeon"),
    ElementalType.ELECTRIC: ("Pikachu", "Jolteon", "Raikou"),
    ElementalType.GRASS: ("Venusaur", "Sceptile", "Torterra"),
    ElementalType.ICE: ("Lapras", "Glaceon", "Weavile"),
    ElementalType.FIGHTING: ("Machamp", "Lucario", "Hitmonlee"),
    ElementalType.POISON: ("Gengar", "Nidoking", "Crobat"),
    ElementalType.GROUND: ("Garchomp", "Excadrill", "Rhydon"),
    ElementalType.FLYING: ("Pidgeot", "Staraptor", "Aerodactyl"),
    ElementalType.PSYCHIC: ("Alakazam", "Espeon", "Mewtwo"),
    ElementalType.BUG: ("Scizor", "Heracross", "Volcarona"),
    ElementalType.ROCK: ("Tyranitar", "Golem", "Rhyperior"),
    ElementalType.GHOST: ("Gengar", "Mismagius", "Chandelure"),
    ElementalType.DRAGON: ("Dragonite", "Salamence", "Garchomp"),
    ElementalType.DARK: ("Umbreon", "Houndoom", "Hydreigon"),
    ElementalType.STEEL: ("Metagross", "Skarmory", "Lucario"),
    ElementalType.FAIRY: ("Gardevoir", "Sylveon", "Togekiss"),
}
