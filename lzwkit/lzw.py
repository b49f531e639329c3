from argparse import ArgumentParser, Namespace
from pathlib import Path
import sys

from colorama import Fore, Style

from lzwkit.common.codecs.lzw import FIRST_CODE, LZWDecoder, LZWEncoder, LZWError, MAX_CODE, pack_codes, unpack_codes

EXTENSION = ".lzw"


def _styles(args: Namespace) -> tuple[str, str, str]:
    if args.no_color:
        return "", "", ""
    return f"{Fore.GREEN}{Style.BRIGHT}", f"{Fore.RED}{Style.BRIGHT}", Style.RESET_ALL


def _reduction(original: int, compressed: int) -> float:
    if original == 0:
        return 0.0
    return (1 - compressed / original) * 100


def default_output(inpath: Path, decompress: bool) -> Path:
    """Picks the output path for an input file.

    Args:
        inpath: Input file path.
        decompress: True when decompressing.

    Returns:
        Path: INFILE.lzw when compressing; INFILE with .lzw stripped (or
        INFILE.stem + .bin) when decompressing.
    """
    if not decompress:
        return inpath.with_name(inpath.name + EXTENSION)
    if inpath.suffix == EXTENSION:
        return inpath.with_suffix("")
    return inpath.with_name(inpath.stem + ".bin")


def read_slice(inpath: Path, start: int | None = None, length: int | None = None) -> bytes:
    """Reads a file, optionally cutting out part of it.

    Args:
        inpath: Input file path.
        start: Byte offset to start from.
        length: Number of bytes to keep after start.

    Returns:
        bytes: The selected bytes.
    """
    data = inpath.read_bytes()
    if start is not None:
        data = data[start:]
        if length is not None:
            data = data[:length]
    return data


def check_slice(parser: ArgumentParser, infile: str, start: int | None, length: int | None) -> None:
    """Rejects --start/--length values that do not fit inside the input file."""
    if length is not None and start is None:
        parser.error('--length requires --start')

    if start is not None:
        size = Path(infile).stat().st_size
        if length is None:
            length = size - start
        if start < 0 or length < 0 or start + length > size:
            parser.error(f'{start:X} + {length:X} is greater than the size of the file.')


def compress_file(inpath: Path, outpath: Path, args: Namespace) -> int:
    """Compresses one file and reports the result.

    Returns:
        int: Exit status.
    """
    green, red, reset = _styles(args)

    encoder = LZWEncoder()
    try:
        uncompressed = inpath.read_bytes()
        codes = encoder.encode(uncompressed)
        compressed = pack_codes(codes)
        outpath.write_bytes(compressed)
    except OSError as e:
        print(f"{red}✗ {inpath}: {e}{reset}")
        return 1

    print(f"{green}✓ Done!{reset}    {len(uncompressed):,} bytes -> {len(compressed):,} bytes "
          f"({_reduction(len(uncompressed), len(compressed)):.2f}% reduction), {inpath} to {outpath}")
    if args.verbose:
        learned = encoder.next_code - FIRST_CODE
        print(f"  {len(codes):,} codes, {learned:,} learned entries"
              f"{', dictionary full' if encoder.next_code > MAX_CODE else ''}")
    return 0


def decompress_file(inpath: Path, outpath: Path, args: Namespace) -> int:
    """Decompresses one file and reports the result.

    The output file is only written when the whole stream decodes.

    Returns:
        int: Exit status.
    """
    green, red, reset = _styles(args)

    decoder = LZWDecoder()
    try:
        compressed = read_slice(inpath, getattr(args, "start", None), getattr(args, "length", None))
        uncompressed = decoder.decode(unpack_codes(compressed))
        outpath.write_bytes(uncompressed)
    except (LZWError, OSError) as e:
        print(f"{red}✗ {inpath}: {e}{reset}")
        return 1

    print(f"{green}✓ Done!{reset}    {len(compressed):,} bytes -> {len(uncompressed):,} bytes, {inpath} to {outpath}")
    if args.verbose:
        print(f"  {len(compressed) // 2:,} codes, dictionary size {decoder.next_code:,}"
              f"{', dictionary full' if decoder.next_code > MAX_CODE else ''}")
    return 0


def start_compress(args: Namespace) -> int:
    """Starts compression with command line args.

    Args:
        args: Command line arguments namespace.
    """
    inpath = Path(args.infile)
    outpath = Path(args.output) if args.output else default_output(inpath, False)
    return compress_file(inpath, outpath, args)


def start_decompress(args: Namespace) -> int:
    """Starts decompression with command line args.

    Args:
        args: Command line arguments namespace.
    """
    inpath = Path(args.infile)
    outpath = Path(args.output) if args.output else default_output(inpath, True)
    return decompress_file(inpath, outpath, args)


def start_auto(args: Namespace) -> int:
    """Compresses or decompresses each file depending on its extension.

    Every file is attempted even if an earlier one fails.

    Args:
        args: Command line arguments namespace.

    Returns:
        int: 1 if any file failed, otherwise 0.
    """
    status = 0
    for infile in args.infiles:
        inpath = Path(infile)
        decompress = inpath.suffix == EXTENSION
        outpath = default_output(inpath, decompress)
        if decompress:
            status |= decompress_file(inpath, outpath, args)
        else:
            status |= compress_file(inpath, outpath, args)
    return status


def build_argparser() -> ArgumentParser:
    # Create the main parser
    parser = ArgumentParser(description='16-bit LZW Compressor / Decompressor')

    # Options shared by every mode
    common = ArgumentParser(add_help=False)
    common.add_argument('-v', '--verbose', action='store_true', help='Print dictionary statistics')
    common.add_argument('-n', '--no-color', action='store_true', help='Disable coloured output')

    # Create subparsers for each mode
    subparsers = parser.add_subparsers(title='Modes', help='Select a mode')

    compress_parser = subparsers.add_parser('compress', parents=[common], help='Compress a file')
    compress_parser.add_argument('-o', '--output', type=str, default=None,
                                 help=f'Output filename (defaults to INFILE{EXTENSION})')
    compress_parser.add_argument('infile', type=str, help='Input filename')
    compress_parser.set_defaults(func=start_compress)

    decompress_parser = subparsers.add_parser('decompress', parents=[common], help='Decompress a file')
    decompress_parser.add_argument('-s', '--start', type=lambda x: int(x, base=0), default=None,
                                   help='Start offset in the input file')
    decompress_parser.add_argument('-l', '--length', type=lambda x: int(x, base=0), default=None,
                                   help='Length of the code stream (requires start offset)')
    decompress_parser.add_argument('-o', '--output', type=str, default=None,
                                   help=f'Output filename (defaults to INFILE without {EXTENSION})')
    decompress_parser.add_argument('infile', type=str, help=f'Input filename (*{EXTENSION})')
    decompress_parser.set_defaults(func=start_decompress)

    auto_parser = subparsers.add_parser('auto', parents=[common],
                                        help=f'Decompress *{EXTENSION} files, compress everything else')
    auto_parser.add_argument('infiles', type=str, nargs='+', help='Input filenames')
    auto_parser.set_defaults(func=start_auto)

    return parser


def validate_args(parser: ArgumentParser, args: Namespace) -> None:
    """Checks input files exist and that --start/--length fit inside them."""
    infiles = args.infiles if hasattr(args, 'infiles') else [args.infile]
    for infile in infiles:
        if not Path(infile).is_file():
            parser.error(f'{infile} does not exist.')

    if hasattr(args, 'start'):
        check_slice(parser, args.infile, args.start, args.length)


def main(argv: list[str]) -> int:
    """Main entry point for the program."""
    # Make the parser
    parser = build_argparser()
    # Parse the arguments
    args = parser.parse_args(argv)
    # Run the command
    if "func" not in args:
        parser.print_help()
        return 1
    validate_args(parser, args)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
