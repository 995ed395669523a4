"""Tests for FormatManager."""

import pytest

from schemedit.core.voxel_model import OriginalFormat, SchematicDocument
from schemedit.formats import FormatManager, UnsupportedFormatError
from schemedit.formats import nbt

from nbt_builders import legacy_tree


@pytest.fixture
def manager():
    return FormatManager()


@pytest.fixture
def document():
    document = SchematicDocument.create_empty(3, 2, 3, name="Watch Tower")
    document.set_block(0, 0, 0, 'minecraft:stone')
    document.set_block(2, 1, 2, 'minecraft:glass')
    return document


class TestImport:
    """Test cases for importing."""

    def test_import_bytes_names_document(self, manager) -> None:
        """The document is named after the file stem."""
        data = nbt.dump_bytes(legacy_tree(1, 1, 1, [1]))
        document = manager.import_bytes(data, 'ruins.schematic')
        assert document.name == 'ruins'
        assert document.original_format == OriginalFormat.LEGACY_INDEXED

    def test_extension_case_ignored(self, manager, document) -> None:
        """Upper-case extensions are routed like lower-case ones."""
        data = manager.export_bytes(document)
        assert manager.import_bytes(data, 'TOWER.SCHEM').entry_set() == document.entry_set()

    def test_unsupported_import(self, manager) -> None:
        """Unknown extensions are rejected before decoding."""
        with pytest.raises(UnsupportedFormatError):
            manager.import_bytes(b'', 'model.vox')

    def test_file_round_trip(self, manager, document, tmp_path) -> None:
        """export_file output imports back unchanged."""
        path = tmp_path / "tower.schem"
        manager.export_file(str(path), document)

        loaded = manager.import_file(str(path))
        assert loaded.name == 'tower'
        assert loaded.size == document.size
        assert loaded.entry_set() == document.entry_set()


class TestExport:
    """Test cases for exporting."""

    def test_unsupported_export(self, manager, document, tmp_path) -> None:
        """Legacy files are never written."""
        with pytest.raises(UnsupportedFormatError):
            manager.export_file(str(tmp_path / "tower.schematic"), document)
        assert not (tmp_path / "tower.schematic").exists()

    def test_export_filename(self) -> None:
        """Non-alphanumeric characters become underscores."""
        assert FormatManager.export_filename("Watch Tower #2") == "Watch_Tower__2.schem"
        assert FormatManager.export_filename("") == "schematic.schem"

    def test_capabilities(self, manager) -> None:
        """Both schematic kinds import, only .schem exports."""
        assert manager.can_import('a.schem')
        assert manager.can_import('a.schematic')
        assert not manager.can_import('a.obj')
        assert manager.can_export('a.schem')
        assert not manager.can_export('a.schematic')
