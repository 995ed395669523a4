"""
SchemEdit - WorldEdit Schematic Codec
=====================================

Reads and writes Minecraft block structures in the WorldEdit formats:
- Legacy MCEdit/WorldEdit .schematic (numeric block IDs)
- Sponge .schem Version 2 (palette + varint block data)
- Sponge .schem Version 3 (nested Blocks compound)

Author: SchemEdit Team
Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "SchemEdit Team"
__license__ = "MIT"

from schemedit.core.voxel_model import SchematicDocument, VoxelEntry
from schemedit.core.palette import BlockPalette

__all__ = ['SchematicDocument', 'VoxelEntry', 'BlockPalette', '__version__']
