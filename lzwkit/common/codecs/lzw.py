"""Compresses and Decompresses data with fixed-width 16-bit LZW."""

from typing import Iterator

from bitstring import Bits, BitStream, ConstBitStream

CODE_WIDTH = 16
FIRST_CODE = 256
MAX_CODE = (1 << CODE_WIDTH) - 1


class LZWError(ValueError):
    """Base class for malformed LZW code streams."""


class BadCodeError(LZWError):
    """Raised when a code is neither in the dictionary nor the next code to be assigned.

    Attributes:
        code: The offending code value.
        position: Index of the code within the code stream.
        next_code: The next code the decoder would have assigned.
    """
    def __init__(self, code: int, position: int, next_code: int) -> None:
        super().__init__(f"Bad code {code:04X} at position {position} (next code {next_code:04X})")
        self.code = code
        self.position = position
        self.next_code = next_code


class TruncatedStreamError(LZWError):
    """Raised when a code stream does not hold a whole number of codes."""
    def __init__(self, length: int) -> None:
        super().__init__(f"Code stream length {length} is not a multiple of {CODE_WIDTH // 8}")
        self.length = length


class LZWEncoder:
    """Greedy longest-match LZW encoder.

    Attributes:
        dictionary: Mapping of byte sequences to codes.
        next_code: Code that will be given to the next new sequence.
    """
    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Restores the dictionary to the 256 single byte roots."""
        self.dictionary = {bytes([i]): i for i in range(FIRST_CODE)}
        self.next_code = FIRST_CODE

    def encode(self, inbuf: bytes) -> list[int]:
        """Encodes a buffer into a list of codes.

        Args:
            inbuf: Input bytes to compress.

        Returns:
            list[int]: Codes in the order they are emitted.
        """
        self.reset()
        codes = []
        prev = b''

        for byte in inbuf:
            cur = bytes([byte])
            candidate = prev + cur
            if candidate in self.dictionary:
                prev = candidate
                continue

            codes.append(self.dictionary[prev])
            if self.next_code <= MAX_CODE:
                self.dictionary[candidate] = self.next_code
                self.next_code += 1
            prev = cur

        if prev:
            codes.append(self.dictionary[prev])

        return codes


class LZWDecoder:
    """LZW decoder that rebuilds the encoder's dictionary one step behind it.

    Attributes:
        dictionary: List of byte sequences, indexed by code.
    """
    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Restores the dictionary to the 256 single byte roots."""
        self.dictionary = [bytes([i]) for i in range(FIRST_CODE)]

    @property
    def next_code(self) -> int:
        """Code that the next dictionary entry will be given."""
        return len(self.dictionary)

    def iter_entries(self, codes: list[int]) -> Iterator[tuple[int, int, bytes, bool]]:
        """Walks a code stream, growing the dictionary as it goes.

        Args:
            codes: Codes to decode.

        Yields:
            tuple[int, int, bytes, bool]: Position, code, decoded entry and
            whether the entry was the deferred one (not yet in the dictionary).

        Raises:
            BadCodeError: If a code cannot be resolved.
        """
        self.reset()
        prev = None

        for position, code in enumerate(codes):
            deferred = False
            if prev is None:
                # Only the roots can appear first
                if code >= FIRST_CODE:
                    raise BadCodeError(code, position, self.next_code)
                entry = self.dictionary[code]
            elif code < self.next_code:
                entry = self.dictionary[code]
            elif code == self.next_code:
                entry = prev + prev[:1]
                deferred = True
            else:
                raise BadCodeError(code, position, self.next_code)

            yield position, code, entry, deferred

            if prev is not None and self.next_code <= MAX_CODE:
                self.dictionary.append(prev + entry[:1])
            prev = entry

    def decode(self, codes: list[int]) -> bytes:
        """Decodes a list of codes back into the original bytes.

        Args:
            codes: Codes produced by LZWEncoder.

        Returns:
            bytes: Decompressed bytes.

        Raises:
            BadCodeError: If the code stream is corrupt.
        """
        outbuf = bytearray()
        for _, _, entry, _ in self.iter_entries(codes):
            outbuf.extend(entry)
        return bytes(outbuf)


def pack_codes(codes: list[int]) -> bytes:
    """Packs codes as 16-bit big-endian words."""
    stream = BitStream()
    for code in codes:
        stream.append(Bits(uint=code, length=CODE_WIDTH))
    return stream.tobytes()


def unpack_codes(data: bytes) -> list[int]:
    """Unpacks 16-bit big-endian words into a list of codes.

    Raises:
        TruncatedStreamError: If data ends part way through a code.
    """
    if len(data) % (CODE_WIDTH // 8):
        raise TruncatedStreamError(len(data))

    stream = ConstBitStream(data)
    return [stream.read(f'uint:{CODE_WIDTH}') for _ in range(len(stream) // CODE_WIDTH)]


def compress(inbuf: bytes) -> bytes:
    """Compresses data using LZW encoding.

    Args:
      inbuf: Input bytes to compress.

    Returns:
      bytes: Code stream of 16-bit big-endian codes.
    """
    return pack_codes(LZWEncoder().encode(inbuf))


def decompress(inbuf: bytes) -> bytes:
    """Decompresses an LZW code stream.

    Args:
      inbuf: Code stream produced by compress.

    Returns:
      bytes: Decompressed bytes.

    Raises:
      TruncatedStreamError: If the stream length is odd.
      BadCodeError: If the stream holds a code that cannot be resolved.
    """
    return LZWDecoder().decode(unpack_codes(inbuf))
