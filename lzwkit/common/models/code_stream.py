from typing import Iterator

from colorama import Fore, Style

from lzwkit.common.codecs.lzw import FIRST_CODE, MAX_CODE, LZWDecoder, LZWError, pack_codes, unpack_codes


class CodeStream:
    """A raw stream of 16-bit LZW codes.

    Attributes:
        codes: List of code values.
    """
    def __init__(self, **kwargs):
        """Builds the stream from wire bytes (data=) or a list of codes (codes=).

        Raises:
            ValueError: If both data and codes are given, or a code does not fit in 16 bits.
        """
        if "data" in kwargs and "codes" in kwargs:
            raise ValueError("Pass either data or codes, not both")
        if "data" in kwargs:
            self.codes = unpack_codes(kwargs["data"])
        else:
            self.codes = list(kwargs.get("codes", []))
            for code in self.codes:
                if not 0 <= code <= MAX_CODE:
                    raise ValueError(f"Code {code:X} does not fit in 16 bits")

    def __len__(self) -> int:
        return len(self.codes)

    def encode(self) -> bytes:
        return pack_codes(self.codes)

    def entries(self) -> Iterator[tuple[int, int, str, bytes]]:
        """Yields (position, code, kind, entry) for each code in the stream.

        kind is "lit" for a root code, "new" for the deferred entry and
        "ref" for any other learned code.
        """
        for position, code, entry, deferred in LZWDecoder().iter_entries(self.codes):
            if deferred:
                kind = "new"
            elif code < FIRST_CODE:
                kind = "lit"
            else:
                kind = "ref"
            yield position, code, kind, entry

    def print_listing(self, color: bool = True) -> bool:
        """Prints one line per code, stopping at the first bad code.

        Returns:
            bool: True if the whole stream decoded.
        """
        red = f"{Fore.RED}{Style.BRIGHT}" if color else ""
        dim = Style.DIM if color else ""
        reset = Style.RESET_ALL if color else ""
        try:
            for position, code, kind, entry in self.entries():
                print(f"{position:8} {code:04X} {dim}{kind}{reset} {entry.hex(' ').upper()}")
        except LZWError as e:
            print(f"{red}✗ {e}{reset}")
            return False
        return True
