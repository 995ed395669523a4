#!/usr/bin/env python3
"""
SchemEdit - WorldEdit Schematic Tool
====================================

Main entry point for the SchemEdit command line.
Inspects, converts and round-trip checks WorldEdit schematic files.

Usage:
    python main.py info FILE
    python main.py convert INPUT OUTPUT
    python main.py roundtrip FILE
"""

import sys
import argparse
import logging
from pathlib import Path

# Add the project root to path if needed
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from schemedit import __version__
from schemedit.formats import FormatManager, MinecraftSchematic, SchematicError


logger = logging.getLogger("schemedit")


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='SchemEdit - WorldEdit Schematic Tool',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Supported formats:
  Import: .schem (Sponge v2/v3), .schematic (legacy)
  Export: .schem (Sponge v3)

Examples:
  %(prog)s info castle.schem              Show dimensions and palette
  %(prog)s convert old.schematic new.schem Convert a legacy file
  %(prog)s roundtrip castle.schem         Check decode/encode/decode
        """
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log progress information'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    info = subparsers.add_parser('info', help='Print schematic summary')
    info.add_argument('file', help='Schematic file to inspect')
    info.add_argument('--palette', action='store_true',
                      help='List every block type in the palette')

    convert = subparsers.add_parser('convert', help='Convert a schematic to .schem v3')
    convert.add_argument('input', help='Schematic file to read')
    convert.add_argument('output', help='.schem file to write')

    roundtrip = subparsers.add_parser('roundtrip',
                                      help='Verify a file survives decode/encode/decode')
    roundtrip.add_argument('file', help='Schematic file to check')

    return parser.parse_args(argv)


def setup_logging(args):
    """Configure root logging from the command line flags."""
    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def cmd_info(manager: FormatManager, args) -> int:
    document = manager.import_file(args.file)
    origin = document.origin

    print(f"File:       {args.file}")
    print(f"Format:     {document.original_format.value}")
    print(f"Dimensions: {document.width}x{document.height}x{document.length}")
    print(f"Origin:     {origin.x}, {origin.y}, {origin.z}")
    print(f"Blocks:     {document.total_blocks}/{document.volume}")
    print(f"Palette:    {len(document.block_palette)} block types")

    if args.palette:
        counts = {}
        for entry in document.blocks:
            counts[entry.block_type] = counts.get(entry.block_type, 0) + 1
        for block_type in document.block_palette:
            print(f"  - {block_type}: {counts.get(block_type, 0)}")
    return 0


def cmd_convert(manager: FormatManager, args) -> int:
    document = manager.import_file(args.input)
    manager.export_file(args.output, document)
    print(f"Wrote {args.output} ({document.total_blocks} blocks)")
    return 0


def cmd_roundtrip(manager: FormatManager, args) -> int:
    document = manager.import_file(args.file)
    decoded = MinecraftSchematic.decode(MinecraftSchematic.encode(document), '.schem')

    same_size = decoded.size == document.size and decoded.origin == document.origin
    same_blocks = decoded.entry_set() == document.entry_set()
    if same_size and same_blocks:
        print(f"OK: {document.total_blocks} blocks survive the round trip")
        return 0

    missing = len(document.entry_set() - decoded.entry_set())
    extra = len(decoded.entry_set() - document.entry_set())
    print(f"MISMATCH: dimensions/origin equal: {same_size}, "
          f"{missing} blocks lost, {extra} blocks added")
    return 1


COMMANDS = {
    'info': cmd_info,
    'convert': cmd_convert,
    'roundtrip': cmd_roundtrip,
}


def main(argv=None):
    """Main application entry point."""
    args = parse_arguments(argv)
    setup_logging(args)

    manager = FormatManager()
    try:
        return COMMANDS[args.command](manager, args)
    except SchematicError as e:
        logger.debug("Command failed at stage %s", e.stage, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
