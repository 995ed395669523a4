"""Tests for the command line entry point."""

import pytest

from main import main
from schemedit.formats import FormatManager
from schemedit.formats import nbt

from nbt_builders import legacy_tree


@pytest.fixture
def legacy_file(tmp_path):
    path = tmp_path / "house.schematic"
    path.write_bytes(nbt.dump_bytes(legacy_tree(2, 1, 2, [1, 0, 0, 2])))
    return path


class TestCommands:
    """Test cases for the info, convert and roundtrip commands."""

    def test_info(self, legacy_file, capsys) -> None:
        """info prints format, size and palette counts."""
        assert main(['info', str(legacy_file), '--palette']) == 0

        out = capsys.readouterr().out
        assert 'legacy-indexed' in out
        assert '2x1x2' in out
        assert 'minecraft:grass_block: 1' in out

    def test_convert(self, legacy_file, tmp_path, capsys) -> None:
        """convert writes a .schem with the same blocks."""
        output = tmp_path / "house.schem"
        assert main(['convert', str(legacy_file), str(output)]) == 0
        assert 'Wrote' in capsys.readouterr().out

        manager = FormatManager()
        converted = manager.import_file(str(output))
        assert converted.entry_set() == manager.import_file(str(legacy_file)).entry_set()

    def test_roundtrip(self, legacy_file, capsys) -> None:
        """roundtrip reports success for a well-formed file."""
        assert main(['roundtrip', str(legacy_file)]) == 0
        assert capsys.readouterr().out.startswith('OK:')


class TestErrors:
    """Test cases for failures."""

    def test_garbage_file(self, tmp_path, capsys) -> None:
        """Undecodable input exits with status 1."""
        path = tmp_path / "broken.schem"
        path.write_bytes(b'not a schematic')
        assert main(['info', str(path)]) == 1
        assert capsys.readouterr().err.startswith('Error:')

    def test_missing_file(self, tmp_path, capsys) -> None:
        """A missing file is reported rather than raised."""
        assert main(['info', str(tmp_path / "nope.schem")]) == 1
        assert 'not found' in capsys.readouterr().err

    def test_unsupported_output(self, legacy_file, tmp_path) -> None:
        """convert refuses non-.schem outputs."""
        assert main(['convert', str(legacy_file), str(tmp_path / "out.obj")]) == 1
