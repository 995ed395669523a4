"""
BlockPalette - Block Type Palette Management
============================================

Maps namespaced block identifiers (``minecraft:stone``) to the small
integer indices stored in schematic block data.

Index 0 is always reserved for air.
"""

from typing import Dict, Iterable, Iterator, List, Mapping, Optional


AIR = "minecraft:air"


def build_palette(entries: Iterable) -> List[str]:
    """
    Build an ordered palette from voxel entries.

    Args:
        entries: Objects exposing a ``block_type`` attribute

    Returns:
        List starting with air, followed by every distinct non-air
        block type in first-occurrence order
    """
    palette = [AIR]
    seen = {AIR}
    for entry in entries:
        block_type = entry.block_type
        if block_type not in seen:
            seen.add(block_type)
            palette.append(block_type)
    return palette


def index_of(palette: List[str], identifier: str) -> Optional[int]:
    """Return the index of ``identifier`` in ``palette``, or None if absent."""
    try:
        return palette.index(identifier)
    except ValueError:
        return None


def resolve(palette_by_index: Mapping[int, str], index: int) -> str:
    """Resolve a palette index to its identifier; unknown indices are air."""
    return palette_by_index.get(index, AIR)


class BlockPalette:
    """
    Ordered, index-addressable set of block identifiers.

    Built either from scratch for encoding (contiguous indices assigned
    in insertion order) or from a decoded ``Palette`` compound, whose
    indices may have gaps.
    """

    def __init__(self, identifiers: Iterable[str] = ()):
        """Initialize with air at index 0, then ``identifiers`` in order."""
        self._by_index: Dict[int, str] = {0: AIR}
        self._by_name: Dict[str, int] = {AIR: 0}
        for identifier in identifiers:
            self.add(identifier)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, int]) -> 'BlockPalette':
        """
        Create a palette from an identifier -> index mapping.

        This is the shape of the ``Palette`` compound in ``.schem`` files.
        When two identifiers claim the same index the last one wins.
        """
        palette = cls()
        palette._by_index.clear()
        palette._by_name.clear()
        for identifier, index in mapping.items():
            palette._by_index[int(index)] = str(identifier)
            palette._by_name[str(identifier)] = int(index)
        return palette

    def add(self, identifier: str) -> int:
        """
        Add an identifier if not present.

        Returns:
            Index of the identifier
        """
        if identifier in self._by_name:
            return self._by_name[identifier]

        index = max(self._by_index, default=-1) + 1
        self._by_index[index] = identifier
        self._by_name[identifier] = index
        return index

    def index_of(self, identifier: str) -> Optional[int]:
        """Get the index for an identifier, or None if it is not in the palette."""
        return self._by_name.get(identifier)

    def resolve(self, index: int) -> str:
        """Get the identifier for an index. Unknown indices resolve to air."""
        return resolve(self._by_index, index)

    def to_nbt_mapping(self) -> Dict[str, int]:
        """Return the identifier -> index mapping, ordered by index."""
        return {self._by_index[i]: i for i in sorted(self._by_index)}

    def __len__(self) -> int:
        return len(self._by_index)

    def __iter__(self) -> Iterator[str]:
        for index in sorted(self._by_index):
            yield self._by_index[index]

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._by_name

    def __repr__(self) -> str:
        return f"BlockPalette({list(self)!r})"
