"""
SchemEdit Formats Module
========================

Schematic file readers and writers, routed by file extension.
"""

import re
from pathlib import Path

from schemedit.core.voxel_model import SchematicDocument
from schemedit.formats.errors import (FormatDetectionError, NbtParseError,
                                      SchematicError, StructuralError,
                                      UnsupportedFormatError)
from schemedit.formats.detector import SchematicFormat, detect_format
from schemedit.formats.minecraft import MinecraftSchematic


class FormatManager:
    """
    Centralized file format manager.

    Handles importing and exporting schematic documents by extension.
    """

    # Supported import formats
    IMPORT_FORMATS = {
        '.schem': ('WorldEdit Schematic', MinecraftSchematic),
        '.schematic': ('Legacy MCEdit Schematic', MinecraftSchematic),
    }

    # Supported export formats
    EXPORT_FORMATS = {
        '.schem': ('WorldEdit Schematic', MinecraftSchematic),
    }

    def import_bytes(self, data: bytes, filename: str) -> SchematicDocument:
        """
        Import a schematic from an in-memory buffer.

        Args:
            data: File contents
            filename: Original file name; its extension selects the decoder

        Returns:
            Decoded SchematicDocument

        Raises:
            UnsupportedFormatError: If the file format is not supported
            StructuralError: If the buffer cannot be decoded
        """
        path = Path(filename)
        ext = path.suffix.lower()

        if ext not in self.IMPORT_FORMATS:
            raise UnsupportedFormatError(f"Unsupported import format: {ext or filename}")

        _, handler_class = self.IMPORT_FORMATS[ext]
        document = handler_class.decode(data, ext)
        document.name = path.stem
        return document

    def import_file(self, filepath: str) -> SchematicDocument:
        """
        Import a schematic from a file.

        Raises:
            UnsupportedFormatError: If the file format is not supported
            StructuralError: If the file cannot be decoded
            OSError: If the file cannot be read
        """
        return self.import_bytes(Path(filepath).read_bytes(), filepath)

    def export_bytes(self, document: SchematicDocument, ext: str = '.schem') -> bytes:
        """Encode a document for the given export extension."""
        if ext not in self.EXPORT_FORMATS:
            raise UnsupportedFormatError(f"Unsupported export format: {ext}")

        _, handler_class = self.EXPORT_FORMATS[ext]
        return handler_class.encode(document)

    def export_file(self, filepath: str, document: SchematicDocument):
        """
        Export a document to a file.

        Raises:
            UnsupportedFormatError: If the file format is not supported
            OSError: If the file cannot be written
        """
        ext = Path(filepath).suffix.lower()
        Path(filepath).write_bytes(self.export_bytes(document, ext))

    @staticmethod
    def export_filename(name: str) -> str:
        """Build a download file name from a document name."""
        return re.sub(r'[^a-zA-Z0-9]', '_', name or 'schematic') + '.schem'

    def can_import(self, filepath: str) -> bool:
        """Check if a file can be imported."""
        ext = Path(filepath).suffix.lower()
        return ext in self.IMPORT_FORMATS

    def can_export(self, filepath: str) -> bool:
        """Check if a file can be exported to the given format."""
        ext = Path(filepath).suffix.lower()
        return ext in self.EXPORT_FORMATS


__all__ = [
    'FormatManager',
    'MinecraftSchematic',
    'SchematicFormat',
    'detect_format',
    'SchematicError',
    'StructuralError',
    'NbtParseError',
    'FormatDetectionError',
    'UnsupportedFormatError',
]
