from argparse import ArgumentParser, Namespace
from pathlib import Path
import sys

from colorama import Fore, Style

from lzwkit.common.codecs.lzw import LZWError
from lzwkit.common.models.code_stream import CodeStream
from lzwkit.lzw import check_slice, read_slice


def start_dump(args: Namespace) -> int:
    """Prints a listing of every code in an LZW file.

    Args:
        args: Command line arguments namespace.
    """
    red, reset = ("", "") if args.no_color else (f"{Fore.RED}{Style.BRIGHT}", Style.RESET_ALL)
    try:
        stream = CodeStream(data=read_slice(Path(args.infile), args.start, args.length))
    except (LZWError, OSError) as e:
        print(f"{red}✗ {args.infile}: {e}{reset}")
        return 1

    print(f"{args.infile}: {len(stream)} codes")
    return 0 if stream.print_listing(color=not args.no_color) else 1


def main(argv: list[str]) -> int:
    """Main entry point for the program."""
    parser = ArgumentParser(description='List the codes in an LZW code stream')
    parser.add_argument('-s', '--start', type=lambda x: int(x, base=0), default=None,
                        help='Start offset in the input file')
    parser.add_argument('-l', '--length', type=lambda x: int(x, base=0), default=None,
                        help='Length of the code stream (requires start offset)')
    parser.add_argument('-n', '--no-color', action='store_true', help='Disable coloured output')
    parser.add_argument('infile', type=str, help='Input filename (*.lzw)')

    # Parse the arguments
    args = parser.parse_args(argv)

    if not Path(args.infile).is_file():
        parser.error(f'{args.infile} does not exist.')
    check_slice(parser, args.infile, args.start, args.length)

    return start_dump(args)


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
