"""
Schematic codec exceptions.

Only structural failures are raised. Damaged block data inside an
otherwise readable file degrades to air instead.
"""


class SchematicError(ValueError):
    """Base class for schematic import/export failures."""

    stage = "schematic"

    def __init__(self, message: str, stage: str = None):
        if stage is not None:
            self.stage = stage
        super().__init__(message)


class StructuralError(SchematicError):
    """The input cannot be read as a schematic at all."""


class NbtParseError(StructuralError):
    """Neither the GZIP-decompressed nor the raw buffer parses as NBT."""

    stage = "nbt"


class FormatDetectionError(StructuralError):
    """The NBT tree holds no block data layout this codec understands."""

    stage = "detect"


class UnsupportedFormatError(SchematicError):
    """The file extension is not routed to any codec."""

    stage = "route"
