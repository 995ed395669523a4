"""Tests for SchematicDocument."""

import pytest

from schemedit.core.palette import AIR
from schemedit.core.voxel_model import Origin, OriginalFormat, SchematicDocument, VoxelEntry


class TestCreateEmpty:
    """Test cases for SchematicDocument.create_empty."""

    def test_create_empty(self) -> None:
        """A new document has no blocks and a zero origin."""
        document = SchematicDocument.create_empty(4, 5, 6, name="Tower")
        assert document.size == (4, 5, 6)
        assert document.origin == Origin(0, 0, 0)
        assert document.total_blocks == 0
        assert document.original_format == OriginalFormat.CREATED_EMPTY
        assert document.name == "Tower"

    @pytest.mark.parametrize("size", [(0, 1, 1), (1, -2, 1), (1, 1, 1001)])
    def test_invalid_dimensions(self, size) -> None:
        """Dimensions must be between 1 and 1000."""
        with pytest.raises(ValueError):
            SchematicDocument.create_empty(*size)


class TestEditing:
    """Test cases for block editing."""

    def test_set_and_get_block(self) -> None:
        """A placed block can be read back."""
        document = SchematicDocument.create_empty(3, 3, 3)
        document.set_block(1, 2, 0, 'minecraft:stone', 0, {'variant': 'smooth'})

        block = document.get_block(1, 2, 0)
        assert block.block_type == 'minecraft:stone'
        assert block.properties == {'variant': 'smooth'}
        assert document.total_blocks == 1
        assert document.block_palette == ['minecraft:stone']

    def test_set_replaces(self) -> None:
        """Setting a position twice keeps one entry."""
        document = SchematicDocument.create_empty(2, 2, 2)
        document.set_block(0, 0, 0, 'minecraft:stone')
        document.set_block(0, 0, 0, 'minecraft:dirt')
        assert document.total_blocks == 1
        assert document.get_block(0, 0, 0).block_type == 'minecraft:dirt'

    def test_air_removes(self) -> None:
        """Setting air removes the entry."""
        document = SchematicDocument.create_empty(2, 2, 2)
        document.set_block(1, 1, 1, 'minecraft:stone')
        document.remove_block(1, 1, 1)
        assert document.total_blocks == 0
        assert document.get_block(1, 1, 1).block_type == AIR

    def test_out_of_bounds(self) -> None:
        """Coordinates outside the volume are rejected."""
        document = SchematicDocument.create_empty(2, 2, 2)
        with pytest.raises(ValueError):
            document.set_block(2, 0, 0, 'minecraft:stone')

    def test_clear(self) -> None:
        """clear removes blocks and palette."""
        document = SchematicDocument.create_empty(2, 2, 2)
        document.set_block(0, 1, 0, 'minecraft:stone')
        document.clear()
        assert document.blocks == []
        assert document.block_palette == []
        assert document.total_blocks == 0

    def test_bounds(self) -> None:
        """Bounds are inclusive corners."""
        document = SchematicDocument.create_empty(2, 3, 4)
        assert document.bounds == ((0, 0, 0), (1, 2, 3))


class TestSerialization:
    """Test cases for dictionary conversion."""

    def test_from_entries_derives_palette(self) -> None:
        """Palette and count follow the entries."""
        document = SchematicDocument.from_entries(2, 1, 1, [
            VoxelEntry(0, 0, 0, 'minecraft:sand'),
            VoxelEntry(1, 0, 0, 'minecraft:sand'),
        ])
        assert document.block_palette == ['minecraft:sand']
        assert document.total_blocks == 2

    def test_dict_round_trip(self) -> None:
        """to_dict output restores an equal document."""
        document = SchematicDocument.from_entries(
            3, 2, 1, [VoxelEntry(2, 1, 0, 'minecraft:glass', 3, {'a': 'b'})],
            origin=(5, -6, 7), original_format=OriginalFormat.MODERN_PALETTE, name="Hut",
        )
        data = document.to_dict()

        assert data['origin'] == {'x': 5, 'y': -6, 'z': 7}
        assert data['blocks'][0]['blockType'] == 'minecraft:glass'
        assert data['originalFormat'] == 'modern-palette'
        assert SchematicDocument.from_dict(data) == document
