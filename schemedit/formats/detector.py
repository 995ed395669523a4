"""
Schematic layout detection.

Inspects a parsed NBT tree once and names the block data layout it
holds, so each decoder can assume its own shape.
"""

import logging
from enum import Enum
from typing import NamedTuple

from nbtlib import ByteArray, Compound, List

from schemedit.formats import nbt
from schemedit.formats.errors import FormatDetectionError


logger = logging.getLogger(__name__)


class SchematicFormat(Enum):
    """Block data layouts understood by the codec."""
    LEGACY = "legacy"
    MODERN_PALETTE = "modern_palette"
    HYBRID_PALETTE_DATA = "hybrid_palette_data"
    HYBRID_POSITIONAL = "hybrid_positional"


class Detection(NamedTuple):
    """Detected layout and the compound that holds its fields."""
    format: SchematicFormat
    body: Compound


def unwrap_schematic(root: Compound) -> Compound:
    """Descend into a ``Schematic`` child compound if there is one."""
    inner = nbt.get_compound(root, 'Schematic')
    return inner if inner is not None else root


def _is_positional_blocks(blocks) -> bool:
    if isinstance(blocks, Compound):
        return all(isinstance(entry, Compound) for entry in blocks.values())
    if isinstance(blocks, List):
        return all(isinstance(entry, Compound) for entry in blocks)
    return False


def detect_format(root: Compound) -> Detection:
    """
    Decide which decoder applies to a ``.schem`` NBT tree.

    Args:
        root: Parsed root compound

    Returns:
        Detection of (format, body compound)

    Raises:
        FormatDetectionError: If no known block data layout is present
    """
    body = unwrap_schematic(root)

    if (nbt.get_compound(body, 'Palette') is not None and
            isinstance(nbt.get_tag(body, 'BlockData'), ByteArray)):
        detected = SchematicFormat.MODERN_PALETTE
    else:
        blocks = nbt.get_tag(body, 'Blocks')
        if (isinstance(blocks, Compound) and
                nbt.has_key(blocks, 'Palette') and nbt.has_key(blocks, 'Data')):
            detected = SchematicFormat.HYBRID_PALETTE_DATA
        elif _is_positional_blocks(blocks):
            detected = SchematicFormat.HYBRID_POSITIONAL
        else:
            raise FormatDetectionError("no recognizable block data format")

    logger.debug("Detected schematic layout: %s", detected.name)
    return Detection(detected, body)
