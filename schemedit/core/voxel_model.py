"""
SchematicDocument - Core Voxel Data Structure
=============================================

In-memory representation of a schematic: a cuboid volume holding a
sparse list of non-air block entries, plus the metadata needed to
write it back out (origin offset, palette, source format).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Set, Tuple

from schemedit.core.palette import AIR


class Origin(NamedTuple):
    """WorldEdit paste offset of a schematic."""
    x: int = 0
    y: int = 0
    z: int = 0


class OriginalFormat(str, Enum):
    """On-disk layout a document was decoded from."""
    LEGACY_INDEXED = "legacy-indexed"
    MODERN_PALETTE = "modern-palette"
    HYBRID_NESTED = "hybrid-nested"
    CREATED_EMPTY = "created-empty"


@dataclass
class VoxelEntry:
    """A single non-air block."""
    x: int
    y: int
    z: int
    block_type: str
    block_data: int = 0
    properties: Dict[str, str] = field(default_factory=dict)

    @property
    def position(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'x': self.x,
            'y': self.y,
            'z': self.z,
            'blockType': self.block_type,
            'blockData': self.block_data,
            'properties': dict(self.properties),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VoxelEntry':
        return cls(
            x=int(data['x']),
            y=int(data['y']),
            z=int(data['z']),
            block_type=str(data.get('blockType', 'minecraft:stone')),
            block_data=int(data.get('blockData', 0)),
            properties={str(k): str(v) for k, v in (data.get('properties') or {}).items()},
        )


@dataclass
class SchematicDocument:
    """
    A decoded (or freshly created) schematic.

    Attributes:
        width, height, length: Volume dimensions along x, y and z
        origin: WorldEdit offset of the volume
        blocks: Non-air block entries; absence of an entry means air
        block_palette: Distinct block types used, in first-seen order
        total_blocks: Number of entries
        original_format: Layout the document was decoded from
        name: Display name, used by callers for file names
    """

    MAX_CREATE_DIMENSION = 1000

    width: int
    height: int
    length: int
    origin: Origin = Origin()
    blocks: List[VoxelEntry] = field(default_factory=list)
    block_palette: List[str] = field(default_factory=list)
    total_blocks: int = 0
    original_format: OriginalFormat = OriginalFormat.CREATED_EMPTY
    name: str = "Untitled"

    @classmethod
    def from_entries(cls, width: int, height: int, length: int,
                     entries: Iterable[VoxelEntry],
                     origin: Tuple[int, int, int] = (0, 0, 0),
                     original_format: OriginalFormat = OriginalFormat.CREATED_EMPTY,
                     name: str = "Untitled") -> 'SchematicDocument':
        """
        Build a document from decoded entries, deriving palette and count.

        Args:
            width, height, length: Volume dimensions
            entries: Non-air block entries
            origin: Offset of the volume
            original_format: Source layout tag
            name: Display name

        Returns:
            New SchematicDocument instance
        """
        document = cls(
            width=width,
            height=height,
            length=length,
            origin=Origin(*origin),
            blocks=list(entries),
            original_format=original_format,
            name=name,
        )
        document.refresh_palette()
        return document

    @classmethod
    def create_empty(cls, width: int, height: int, length: int,
                     name: str = "New Model") -> 'SchematicDocument':
        """
        Factory method to create a new empty document.

        Raises:
            ValueError: If a dimension is outside 1..MAX_CREATE_DIMENSION
        """
        for dimension in (width, height, length):
            if not 0 < dimension <= cls.MAX_CREATE_DIMENSION:
                raise ValueError(
                    f"Invalid dimensions. Must be between 1 and {cls.MAX_CREATE_DIMENSION}."
                )
        return cls(width=int(width), height=int(height), length=int(length), name=name)

    @property
    def size(self) -> Tuple[int, int, int]:
        return (self.width, self.height, self.length)

    @property
    def volume(self) -> int:
        return self.width * self.height * self.length

    @property
    def bounds(self) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
        """Inclusive corners of the volume."""
        return ((0, 0, 0), (self.width - 1, self.height - 1, self.length - 1))

    def is_valid_position(self, x: int, y: int, z: int) -> bool:
        """Check if coordinates are within the document bounds."""
        return (0 <= x < self.width and
                0 <= y < self.height and
                0 <= z < self.length)

    def refresh_palette(self):
        """Recompute ``block_palette`` and ``total_blocks`` from the entries."""
        palette = []
        seen = set()
        for entry in self.blocks:
            if entry.block_type not in seen:
                seen.add(entry.block_type)
                palette.append(entry.block_type)
        self.block_palette = palette
        self.total_blocks = len(self.blocks)

    def get_block(self, x: int, y: int, z: int) -> VoxelEntry:
        """Get the entry at a position, or an air entry if there is none."""
        for entry in self.blocks:
            if entry.x == x and entry.y == y and entry.z == z:
                return entry
        return VoxelEntry(x, y, z, AIR)

    def set_block(self, x: int, y: int, z: int, block_type: Optional[str],
                  block_data: int = 0, properties: Optional[Dict[str, str]] = None):
        """
        Place a block, replacing whatever was at the position.

        Setting air (or an empty type) removes the entry.

        Raises:
            ValueError: If the coordinates are outside the volume
        """
        if not self.is_valid_position(x, y, z):
            raise ValueError("Coordinates out of bounds")

        self.blocks = [entry for entry in self.blocks
                       if not (entry.x == x and entry.y == y and entry.z == z)]

        if block_type and block_type != AIR:
            self.blocks.append(VoxelEntry(x, y, z, block_type, block_data,
                                          dict(properties or {})))
            if block_type not in self.block_palette:
                self.block_palette.append(block_type)

        self.total_blocks = len(self.blocks)

    def remove_block(self, x: int, y: int, z: int):
        """Remove the block at a position, leaving air."""
        self.set_block(x, y, z, AIR)

    def clear(self):
        """Remove all blocks."""
        self.blocks = []
        self.block_palette = []
        self.total_blocks = 0

    def entry_set(self) -> Set[Tuple[int, int, int, str]]:
        """Return the entries as a set of (x, y, z, block_type) tuples."""
        return {(e.x, e.y, e.z, e.block_type) for e in self.blocks}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the document to a dictionary."""
        return {
            'name': self.name,
            'width': self.width,
            'height': self.height,
            'length': self.length,
            'origin': {'x': self.origin.x, 'y': self.origin.y, 'z': self.origin.z},
            'blocks': [entry.to_dict() for entry in self.blocks],
            'blockPalette': list(self.block_palette),
            'totalBlocks': self.total_blocks,
            'originalFormat': self.original_format.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SchematicDocument':
        """Deserialize a document from a dictionary."""
        origin = data.get('origin') or {}
        blocks = [VoxelEntry.from_dict(block) for block in data.get('blocks', [])]
        return cls(
            width=int(data['width']),
            height=int(data['height']),
            length=int(data['length']),
            origin=Origin(int(origin.get('x', 0)), int(origin.get('y', 0)), int(origin.get('z', 0))),
            blocks=blocks,
            block_palette=list(data.get('blockPalette', [])),
            total_blocks=int(data.get('totalBlocks', len(blocks))),
            original_format=OriginalFormat(data.get('originalFormat', OriginalFormat.CREATED_EMPTY.value)),
            name=data.get('name', 'Untitled'),
        )
