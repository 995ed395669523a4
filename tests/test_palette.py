"""Tests for block palettes."""

from schemedit.core.palette import AIR, BlockPalette, build_palette, index_of, resolve
from schemedit.core.voxel_model import VoxelEntry


class TestBuildPalette:
    """Test cases for build_palette."""

    def test_air_first(self) -> None:
        """Air is index 0 even with no entries."""
        assert build_palette([]) == [AIR]

    def test_first_occurrence_order(self) -> None:
        """Distinct types appear in the order they are first seen."""
        entries = [
            VoxelEntry(0, 0, 0, 'minecraft:dirt'),
            VoxelEntry(1, 0, 0, 'minecraft:stone'),
            VoxelEntry(2, 0, 0, 'minecraft:dirt'),
        ]
        assert build_palette(entries) == [AIR, 'minecraft:dirt', 'minecraft:stone']

    def test_air_entries_not_duplicated(self) -> None:
        """Air entries never get a second slot."""
        palette = build_palette([VoxelEntry(0, 0, 0, AIR), VoxelEntry(1, 0, 0, 'minecraft:sand')])
        assert palette == [AIR, 'minecraft:sand']
        assert index_of(palette, AIR) == 0


class TestLookups:
    """Test cases for index_of and resolve."""

    def test_index_of_missing(self) -> None:
        """Unknown identifiers have no index."""
        assert index_of([AIR, 'minecraft:stone'], 'minecraft:dirt') is None

    def test_resolve_unknown_is_air(self) -> None:
        """Unknown indices resolve to air."""
        assert resolve({0: AIR, 1: 'minecraft:stone'}, 1) == 'minecraft:stone'
        assert resolve({0: AIR, 1: 'minecraft:stone'}, 99) == AIR


class TestBlockPalette:
    """Test cases for BlockPalette."""

    def test_sequential_indices(self) -> None:
        """Adding identifiers assigns sequential indices after air."""
        palette = BlockPalette()
        assert palette.add('minecraft:stone') == 1
        assert palette.add('minecraft:dirt') == 2
        assert palette.add('minecraft:stone') == 1
        assert len(palette) == 3

    def test_air_is_zero(self) -> None:
        """Air always maps to index 0."""
        palette = BlockPalette(['minecraft:stone', AIR])
        assert palette.index_of(AIR) == 0
        assert palette.resolve(0) == AIR
        assert list(palette) == [AIR, 'minecraft:stone']

    def test_from_mapping_with_gaps(self) -> None:
        """Decoded palettes keep their own indices."""
        palette = BlockPalette.from_mapping({'minecraft:stone': 5, 'minecraft:air': 2})
        assert palette.resolve(5) == 'minecraft:stone'
        assert palette.resolve(2) == AIR
        assert palette.resolve(0) == AIR
        assert palette.index_of('minecraft:stone') == 5

    def test_to_nbt_mapping(self) -> None:
        """Mapping is identifier -> index, ordered by index."""
        palette = BlockPalette(['minecraft:glass'])
        assert palette.to_nbt_mapping() == {AIR: 0, 'minecraft:glass': 1}
        assert 'minecraft:glass' in palette
