"""
SchemEdit Core Module
=====================

Core data structures for schematic documents.
"""

from schemedit.core.voxel_model import SchematicDocument, VoxelEntry, Origin, OriginalFormat
from schemedit.core.palette import BlockPalette, AIR

__all__ = ['SchematicDocument', 'VoxelEntry', 'Origin', 'OriginalFormat', 'BlockPalette', 'AIR']
