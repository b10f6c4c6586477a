"""
IPS patch decoding and application.

An IPS file starts with the magic number "PATCH" (50 41 54 43 48),
followed by a series of records and an end-of-file marker "EOF" (45 4f 46).
All numerical values are unsigned and stored big-endian.
"""
from io import BytesIO
from dataclasses import dataclass

import logging
log = logging.getLogger()

from ..errors import InvalidFormat

IPS_MAGIC = b"PATCH"
IPS_EOF = b"EOF"

OFFSET_WIDTH = 3
SIZE_WIDTH = 2
RLE_LENGTH_WIDTH = 2

class PatchBuffer:
    """
    Offset-addressable byte storage which grows on demand. Writes past the
    current end expand the buffer, and any gap this opens is zero-filled.
    The buffer never shrinks.
    """
    def __init__(self, data=b""):
        self.data = bytearray(data)

    def __len__(self):
        return len(self.data)

    def ensure_capacity(self, min_length):
        """
        Grow the buffer to exactly `min_length` bytes if it is shorter. Existing content is kept in the low range.
        """
        cur_length = len(self.data)
        if cur_length < min_length:
            log.debug(f"Expanding buffer from 0x{cur_length:x} "
                      f"to 0x{min_length:x} bytes")
            self.data.extend(bytes(min_length - cur_length))

    def write_run(self, offset, value, count):
        """
        Fill `count` bytes starting at `offset` with `value`.
        """
        assert offset >= 0 and count >= 0
        self.ensure_capacity(offset + count)
        self.data[offset:offset + count] = bytes([value]) * count

    def write_slice(self, offset, data):
        """
        Copy `data` verbatim to `offset`.
        """
        assert offset >= 0
        self.ensure_capacity(offset + len(data))
        self.data[offset:offset + len(data)] = data

    def snapshot(self):
        return bytes(self.data)

@dataclass(frozen=True)
class LiteralRecord:
    """
    Regular records consist of a three-byte offset followed by a two-byte length of the payload and the payload itself.
    """
    offset: int
    payload: bytes

    def __len__(self):
        return len(self.payload)

    def apply_to(self, buffer):
        buffer.write_slice(self.offset, self.payload)

    def __str__(self):
        return f"0x{self.offset:06x}: literal, {len(self)} bytes"

@dataclass(frozen=True)
class RunLengthRecord:
    """
    RLE records have their length field set to zero; in place of a payload there is a two-byte length of the run followed by a single byte indicating the value to be written.
    """
    offset: int
    length: int
    value: int

    def __len__(self):
        return self.length

    def apply_to(self, buffer):
        buffer.write_run(self.offset, self.value, self.length)

    def __str__(self):
        return f"0x{self.offset:06x}: rle, {self.length} x 0x{self.value:02x}"

class IPSPatcher:
    @classmethod
    def _as_stream(cls, patch):
        if isinstance(patch, (bytes, bytearray)):
            return BytesIO(patch)
        return patch

    @classmethod
    def verify_format(cls, stream):
        """
        Consume the magic number from `stream`, raising `InvalidFormat` if it is missing or wrong.
        """
        header = stream.read(len(IPS_MAGIC))
        if len(header) < len(IPS_MAGIC):
            raise InvalidFormat(f"Invalid IPS file: truncated header "
                                f"({len(header)} bytes)")
        if header != IPS_MAGIC:
            raise InvalidFormat(f"Invalid IPS file: bad magic {header!r}")

    @classmethod
    def _read_records(cls, stream):
        # Running out of data mid-record is not an error: numeric fields are
        # decoded from whatever bytes remain and short payloads are written
        # as they are.
        while True:
            tag = stream.read(OFFSET_WIDTH)
            if len(tag) < OFFSET_WIDTH or tag == IPS_EOF:
                return

            offset = int.from_bytes(tag, "big")
            size = int.from_bytes(stream.read(SIZE_WIDTH), "big")

            if size == 0:
                length = int.from_bytes(stream.read(RLE_LENGTH_WIDTH), "big")
                value = stream.read(1)
                if len(value) == 0:
                    log.warning(f"RLE record at 0x{offset:06x} has no fill "
                                f"value, stopping")
                    return
                yield RunLengthRecord(offset, length, value[0])
            else:
                payload = stream.read(size)
                if len(payload) < size:
                    log.warning(f"Record at 0x{offset:06x} truncated: "
                                f"{len(payload)} of {size} bytes")
                yield LiteralRecord(offset, payload)

    @classmethod
    def records(cls, patch):
        """
        Decode the records of `patch` (bytes or a binary stream) in order.
        """
        stream = cls._as_stream(patch)
        cls.verify_format(stream)
        yield from cls._read_records(stream)

    @classmethod
    def apply(cls, buffer, patch):
        """
        Apply every record of `patch` to `buffer`, in stream order. The magic is checked before any record is decoded, so a bad patch leaves `buffer` untouched.
        Returns the number of records applied.
        """
        stream = cls._as_stream(patch)
        cls.verify_format(stream)

        n = 0
        for record in cls._read_records(stream):
            log.debug(f"Applying {record}")
            record.apply_to(buffer)
            n += 1

        log.debug(f"Applied {n} records, buffer is 0x{len(buffer):x} bytes")
        return n

    @classmethod
    def describe(cls, patch):
        return "\n".join(str(record) for record in cls.records(patch))
