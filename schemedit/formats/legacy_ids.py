"""
Legacy block ID table.

Numeric block IDs from pre-1.13 ``.schematic`` files mapped to their
namespaced identifiers. Only the IDs below are known; everything else
falls back to stone.
"""

from schemedit.core.palette import AIR


LEGACY_FALLBACK = 'minecraft:stone'

LEGACY_BLOCK_NAMES = {
    0: AIR,
    1: 'minecraft:stone',
    2: 'minecraft:grass_block',
    3: 'minecraft:dirt',
    4: 'minecraft:cobblestone',
    5: 'minecraft:oak_planks',
    6: 'minecraft:oak_sapling',
    7: 'minecraft:bedrock',
    8: 'minecraft:water',
    9: 'minecraft:water',
    10: 'minecraft:lava',
    11: 'minecraft:lava',
    12: 'minecraft:sand',
    13: 'minecraft:gravel',
    14: 'minecraft:gold_ore',
    15: 'minecraft:iron_ore',
    16: 'minecraft:coal_ore',
    17: 'minecraft:oak_log',
    18: 'minecraft:oak_leaves',
}


def legacy_block_name(block_id: int, data: int = 0) -> str:
    """
    Convert a legacy numeric block ID to a namespaced identifier.

    ``data`` is accepted for callers that have it, but the table does
    not distinguish metadata variants.
    """
    return LEGACY_BLOCK_NAMES.get(block_id, LEGACY_FALLBACK)
