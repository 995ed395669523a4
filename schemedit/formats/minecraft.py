"""
Minecraft Format Handlers
=========================

Support for WorldEdit schematic formats:
- .schematic (MCEdit/WorldEdit classic format, numeric block IDs)
- .schem Version 2 (Sponge palette + varint BlockData)
- .schem Version 3 (nested Schematic -> Blocks compound)
- positional block lists (Blocks entries with Pos/State + BlockStates)

Exports always write Sponge Version 3.

Uses nbtlib for NBT tags and numpy for flat block arrays.
"""

import logging
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
from nbtlib import ByteArray, Compound, Int, IntArray, List as NbtList, Short

from schemedit.core.palette import AIR, BlockPalette, build_palette
from schemedit.core.varint import decode_varints, encode_varints
from schemedit.core.voxel_model import OriginalFormat, SchematicDocument, VoxelEntry
from schemedit.formats import nbt
from schemedit.formats.detector import SchematicFormat, detect_format, unwrap_schematic
from schemedit.formats.errors import UnsupportedFormatError
from schemedit.formats.legacy_ids import legacy_block_name


logger = logging.getLogger(__name__)

# Reads one palette index at a cursor; None when the stream is exhausted
IndexReader = Callable[[int], Optional[Tuple[int, int]]]


def _list_reader(values: Sequence[int]) -> IndexReader:
    size = len(values)

    def read(cursor: int) -> Optional[Tuple[int, int]]:
        if cursor >= size:
            return None
        return values[cursor], cursor + 1

    return read


def _volume(dimensions: Tuple[int, int, int]) -> int:
    width, height, length = dimensions
    return width * height * length


def _to_short(value: int) -> int:
    """Wrap an integer into the signed 16-bit range used by Short tags."""
    return ((value + 0x8000) & 0xFFFF) - 0x8000


class MinecraftSchematic:
    """
    Handler for WorldEdit schematic files.

    Decoding accepts every layout listed in the module docstring and
    tolerates damaged block data (missing or truncated streams and
    unknown palette indices become air). Encoding produces Sponge
    Version 3 files.
    """

    SCHEMATIC_VERSION = 3
    DATA_VERSION = 2975  # Minecraft 1.19.2
    BYTE_PALETTE_LIMIT = 256
    FALLBACK_BLOCK = 'minecraft:stone'

    EXTENSIONS = ('.schem', '.schematic')

    _DECODERS = {
        SchematicFormat.LEGACY: '_decode_legacy',
        SchematicFormat.MODERN_PALETTE: '_decode_modern',
        SchematicFormat.HYBRID_PALETTE_DATA: '_decode_hybrid_palette',
        SchematicFormat.HYBRID_POSITIONAL: '_decode_hybrid_positional',
    }

    @classmethod
    def load(cls, filepath: str) -> SchematicDocument:
        """
        Load a schematic file.

        Args:
            filepath: Path to a .schem or .schematic file

        Returns:
            Decoded SchematicDocument named after the file
        """
        path = Path(filepath)
        document = cls.decode(path.read_bytes(), path.suffix)
        document.name = path.stem
        return document

    @classmethod
    def save(cls, filepath: str, document: SchematicDocument):
        """
        Save a document as a Sponge Version 3 .schem file.

        Args:
            filepath: Output file path
            document: Document to save
        """
        ext = Path(filepath).suffix.lower()
        if ext != '.schem':
            raise UnsupportedFormatError(f"Unsupported schematic export format: {ext}")
        Path(filepath).write_bytes(cls.encode(document))

    @classmethod
    def decode(cls, data: bytes, extension: str = '.schem') -> SchematicDocument:
        """
        Decode a schematic buffer.

        Args:
            data: File contents, GZIP-compressed or raw NBT
            extension: File extension deciding the route; .schematic files
                always use the legacy decoder

        Returns:
            New SchematicDocument

        Raises:
            NbtParseError: If the buffer is not NBT
            FormatDetectionError: If a .schem tree has no known block layout
            UnsupportedFormatError: If the extension is not a schematic one
        """
        ext = extension.lower()
        if ext and not ext.startswith('.'):
            ext = '.' + ext

        if ext == '.schematic':
            root = nbt.load_bytes(data)
            document = cls._decode_legacy(unwrap_schematic(root))
        elif ext == '.schem':
            document = cls.decode_tree(nbt.load_bytes(data))
        else:
            raise UnsupportedFormatError(f"Unsupported schematic format: {extension}")

        logger.info("Decoded %s schematic: %dx%dx%d, %d blocks, %d block types",
                    document.original_format.value, document.width, document.height,
                    document.length, document.total_blocks, len(document.block_palette))
        return document

    @classmethod
    def decode_tree(cls, root: Compound) -> SchematicDocument:
        """Detect the layout of a parsed .schem tree and decode it."""
        detection = detect_format(root)
        decoder = getattr(cls, cls._DECODERS[detection.format])
        return decoder(detection.body)

    @classmethod
    def _read_dimensions(cls, body: Compound) -> Tuple[int, int, int]:
        dimensions = []
        for key in ('Width', 'Height', 'Length'):
            value = nbt.get_int(body, key)
            if value is None:
                logger.warning("Schematic has no %s, treating it as 0", key)
                value = 0
            # Stored as signed shorts, meant as unsigned
            if value < 0:
                value &= 0xFFFF
            dimensions.append(value)
        return tuple(dimensions)

    @classmethod
    def _read_offset(cls, body: Compound) -> Tuple[int, int, int]:
        offset = nbt.get_int_array(body, 'Offset')
        if offset is None or len(offset) < 3:
            logger.debug("Missing or malformed Offset, using (0, 0, 0)")
            return (0, 0, 0)
        return (offset[0], offset[1], offset[2])

    @classmethod
    def _read_palette(cls, palette_tag: Optional[Compound]) -> BlockPalette:
        mapping = {}
        for name, index in (palette_tag or {}).items():
            if isinstance(index, nbt.INTEGER_TAGS):
                mapping[str(name)] = int(index)
            else:
                logger.warning("Ignoring palette entry %r with non-integer index", name)
        return BlockPalette.from_mapping(mapping)

    @staticmethod
    def _iter_positions(width: int, height: int, length: int) -> Iterator[Tuple[int, int, int]]:
        """Yield (x, y, z) in schematic storage order: y outer, z middle, x inner."""
        for y in range(height):
            for z in range(length):
                for x in range(width):
                    yield x, y, z

    @classmethod
    def _decode_indexed(cls, dimensions: Tuple[int, int, int], palette: BlockPalette,
                        read_index: IndexReader) -> List[VoxelEntry]:
        """
        Walk the volume reading one palette index per position.

        A single cursor runs across the whole volume. Once the stream is
        exhausted the remaining positions stay air.
        """
        width, height, length = dimensions
        entries = []
        cursor = 0
        for x, y, z in cls._iter_positions(width, height, length):
            result = read_index(cursor)
            if result is None:
                logger.warning("Block data ended early at (%d, %d, %d); "
                               "remaining positions are air", x, y, z)
                break
            index, cursor = result
            block_type = palette.resolve(index)
            if block_type != AIR:
                entries.append(VoxelEntry(x, y, z, block_type))
        return entries

    @classmethod
    def _decode_legacy(cls, body: Compound) -> SchematicDocument:
        """Decode a classic .schematic with numeric Blocks/Data arrays."""
        width, height, length = cls._read_dimensions(body)

        raw_blocks = nbt.get_byte_array(body, 'Blocks')
        if raw_blocks is not None:
            blocks = np.frombuffer(raw_blocks, dtype=np.uint8).astype(np.int32)
        else:
            block_list = nbt.get_int_array(body, 'Blocks') or []
            blocks = np.array(block_list, dtype=np.int32)

        add_blocks = nbt.get_byte_array(body, 'AddBlocks')
        if add_blocks:
            nibbles = np.frombuffer(add_blocks, dtype=np.uint8).astype(np.int32)
            expanded = np.zeros(len(nibbles) * 2, dtype=np.int32)
            expanded[0::2] = (nibbles >> 4) & 0xF
            expanded[1::2] = nibbles & 0xF
            count = min(len(blocks), len(expanded))
            blocks[:count] += expanded[:count] << 8

        raw_data = nbt.get_byte_array(body, 'Data')
        if raw_data is None:
            logger.debug("Legacy schematic has no Data array, using metadata 0")
            raw_data = b''
        data = np.zeros(len(blocks), dtype=np.int32)
        meta = np.frombuffer(raw_data, dtype=np.uint8)[:len(blocks)]
        data[:len(meta)] = meta

        volume = width * height * length
        layer = width * length
        entries = []
        for i in np.flatnonzero(blocks[:volume]):
            block_id = int(blocks[i])
            block_data = int(data[i])
            y = int(i) // layer
            remainder = int(i) % layer
            z = remainder // width
            x = remainder % width
            entries.append(VoxelEntry(x, y, z, legacy_block_name(block_id, block_data),
                                      block_data=block_data))

        return SchematicDocument.from_entries(
            width, height, length, entries,
            original_format=OriginalFormat.LEGACY_INDEXED,
        )

    @classmethod
    def _decode_modern(cls, body: Compound) -> SchematicDocument:
        """Decode a Sponge Version 2 layout: Palette + varint BlockData."""
        dimensions = cls._read_dimensions(body)
        palette = cls._read_palette(nbt.get_compound(body, 'Palette'))
        block_data = nbt.get_byte_array(body, 'BlockData') or b''

        indices = decode_varints(block_data, _volume(dimensions))
        entries = cls._decode_indexed(dimensions, palette, _list_reader(indices))
        return SchematicDocument.from_entries(
            *dimensions, entries,
            origin=cls._read_offset(body),
            original_format=OriginalFormat.MODERN_PALETTE,
        )

    @classmethod
    def _decode_hybrid_palette(cls, body: Compound) -> SchematicDocument:
        """
        Decode a nested Blocks compound with Palette and Data.

        Data holds one byte per position while the palette fits in a
        byte; larger palettes are read as a varint stream.
        """
        dimensions = cls._read_dimensions(body)
        blocks = nbt.get_compound(body, 'Blocks')
        palette = cls._read_palette(nbt.get_compound(blocks, 'Palette'))

        raw = nbt.get_byte_array(blocks, 'Data')
        if raw is not None:
            if len(palette) > cls.BYTE_PALETTE_LIMIT:
                reader = _list_reader(decode_varints(raw, _volume(dimensions)))
            else:
                reader = _list_reader(raw)
        else:
            indices = nbt.get_int_array(blocks, 'Data')
            if indices is None:
                logger.warning("Blocks.Data has an unexpected tag type; volume is empty")
                indices = []
            reader = _list_reader(indices)

        entries = cls._decode_indexed(dimensions, palette, reader)
        return SchematicDocument.from_entries(
            *dimensions, entries,
            origin=cls._read_offset(body),
            original_format=OriginalFormat.HYBRID_NESTED,
        )

    @classmethod
    def _decode_hybrid_positional(cls, body: Compound) -> SchematicDocument:
        """
        Decode a Blocks collection of per-block compounds.

        Each entry has a Pos triple and a State index into the sibling
        BlockStates list. Broken entries are skipped.
        """
        width, height, length = cls._read_dimensions(body)
        blocks = nbt.get_tag(body, 'Blocks')
        items = list(blocks.items()) if isinstance(blocks, Compound) else list(enumerate(blocks))

        state_names = []
        for state in nbt.get_list(body, 'BlockStates') or []:
            state_names.append(nbt.get_string(state, 'Name') or cls.FALLBACK_BLOCK)

        positions = []
        for key, entry in items:
            pos = nbt.get_int_array(entry, 'Pos')
            state = nbt.get_int(entry, 'State')
            if pos is None or len(pos) < 3 or state is None:
                logger.warning("Skipping malformed block entry %r (missing Pos or State)", key)
                continue
            x, y, z = pos[0], pos[1], pos[2]
            if min(x, y, z) < 0:
                logger.warning("Skipping block entry %r at negative position %s", key, pos[:3])
                continue
            if 0 <= state < len(state_names):
                block_type = state_names[state]
            else:
                block_type = cls.FALLBACK_BLOCK
            if block_type == AIR:
                continue
            positions.append((x, y, z, block_type))

        if not (width and height and length) and positions:
            width = max(width, max(p[0] for p in positions) + 1)
            height = max(height, max(p[1] for p in positions) + 1)
            length = max(length, max(p[2] for p in positions) + 1)
            logger.debug("Inferred dimensions %dx%dx%d from block positions", width, height, length)

        entries = []
        for x, y, z, block_type in positions:
            if x >= width or y >= height or z >= length:
                logger.warning("Skipping block at (%d, %d, %d) outside %dx%dx%d volume",
                               x, y, z, width, height, length)
                continue
            entries.append(VoxelEntry(x, y, z, block_type))

        return SchematicDocument.from_entries(
            width, height, length, entries,
            origin=cls._read_offset(body),
            original_format=OriginalFormat.HYBRID_NESTED,
        )

    @classmethod
    def build_palette(cls, document: SchematicDocument) -> BlockPalette:
        """
        Build the export palette for a document.

        Uses the document's own palette when present, otherwise the
        block types of its entries. Air is always index 0 and every
        entry's type is guaranteed a slot.
        """
        if document.block_palette:
            palette = BlockPalette(document.block_palette)
        else:
            palette = BlockPalette(build_palette(document.blocks)[1:])
        for entry in document.blocks:
            palette.add(entry.block_type)
        return palette

    @classmethod
    def encode_block_data(cls, document: SchematicDocument,
                          palette: BlockPalette) -> bytes:
        """
        Encode the document volume as Blocks.Data bytes.

        One byte per position while the palette fits in a byte,
        otherwise a varint stream in the same order.
        """
        width, height, length = document.size
        volume = np.zeros(width * height * length, dtype=np.int32)

        for entry in document.blocks:
            if not document.is_valid_position(entry.x, entry.y, entry.z):
                logger.warning("Dropping block %s at (%d, %d, %d) outside the volume",
                               entry.block_type, entry.x, entry.y, entry.z)
                continue
            index = palette.index_of(entry.block_type)
            if index is None:
                continue
            volume[entry.y * width * length + entry.z * width + entry.x] = index

        if len(palette) <= cls.BYTE_PALETTE_LIMIT:
            return volume.astype(np.uint8).tobytes()
        return encode_varints(volume.tolist())

    @classmethod
    def build_tree(cls, document: SchematicDocument) -> Compound:
        """Build the Version 3 NBT tree for a document."""
        palette = cls.build_palette(document)
        data = cls.encode_block_data(document, palette)
        origin = document.origin

        blocks = Compound({
            'Palette': Compound({name: Int(index)
                                 for name, index in palette.to_nbt_mapping().items()}),
            'Data': ByteArray(np.frombuffer(data, dtype=np.int8).copy()),
            'BlockEntities': NbtList[Compound](),
        })

        return Compound({
            'Schematic': Compound({
                'Version': Int(cls.SCHEMATIC_VERSION),
                'DataVersion': Int(cls.DATA_VERSION),
                'Width': Short(_to_short(document.width)),
                'Height': Short(_to_short(document.height)),
                'Length': Short(_to_short(document.length)),
                'Offset': IntArray([origin[0], origin[1], origin[2]]),
                'Blocks': blocks,
            })
        })

    @classmethod
    def encode(cls, document: SchematicDocument) -> bytes:
        """
        Encode a document as a GZIP-compressed Version 3 .schem buffer.

        Args:
            document: Document to encode

        Returns:
            Compressed file contents
        """
        tree = cls.build_tree(document)
        data = nbt.dump_bytes(tree)
        logger.info("Encoded schematic %r: %dx%dx%d, %d blocks, %d bytes",
                    document.name, document.width, document.height, document.length,
                    len(document.blocks), len(data))
        return data
