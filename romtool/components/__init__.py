import csv
import functools
from pathlib import Path
from dataclasses import dataclass

import logging
log = logging.getLogger()

from ..errors import HeaderNotFound
from ..utils import ByteUtils

HEADER_MAP = Path(__file__).parent.parent / "etc" / "snes_header_map.csv"

# Internal header locations, tried in order
LOROM_HEADER = 0x7FC0
HIROM_HEADER = 0xFFC0
EXHIROM_HEADER = 0x40FFC0
HEADER_OFFSETS = (LOROM_HEADER, HIROM_HEADER, EXHIROM_HEADER)

COPIER_HEADER_SIZE = 0x200
BANK_SIZE = 0x8000

@dataclass(repr=True, init=True)
class MemoryStructure:
    """
    A contiguous stretch of byte data in a ROM image, with some metadata associated with it for tracking.
    """
    addr: int
    length: int
    name: str
    descr: str

    @dataclass
    class Payload:
        """
        Tracks where and what data should be written from a "patch".
        The >> method does the actual splicing of data into a byte stream.
        """
        addr: int
        payload: bytes

        def __rshift__(self, bindata):
            """
            Syntactic sugar to have the payload data be inserted into a byte stream.
            i.e.
            rom = struct @ b"\xff\xff" >> rom
            """
            bindata = bytearray(bindata)
            bindata[self.addr:self.addr + len(self.payload)] = self.payload
            return bytes(bindata)

    def __matmul__(self, bindata):
        """
        Syntactic sugar for `patch`.
        """
        return self.patch(bindata)

    def patch(self, data):
        """
        Create the `Payload` object, to be deployed with >>.
        """
        assert len(data) == self.length, f"0x{self.addr:x}+{self.length}"
        return self.Payload(addr=self.addr, payload=data)

    def __lshift__(self, bindata):
        """
        Raw byte reader.
        """
        assert 0 <= self.addr < len(bindata)
        log.debug(f"{self.name}: Reading 0x{self.length:x} bytes of data "
                  f"starting at 0x{self.addr:x}")
        return bytes(bindata[self.addr:self.addr+self.length])

class SNESHeader(MemoryStructure):
    """
    Structure representing a standard SNES header. It is used to identify the cartridge by Nintendo and manufacturers.
    NOTE: this is not the 0x200 byte "header" attached to the rom image by copiers, but an internal memory block at a specific address in all SNES images, holding metadata in a specific format.
    """
    HEADER_LENGTH = 32

    def __init__(self, addr=LOROM_HEADER):
        super().__init__(addr, self.HEADER_LENGTH,
                         name=f"snes_header_{addr:x}",
                         descr=f"Internal SNES header at 0x{addr:x}")
        self._unpack_schema = self._generate_schema()

    @classmethod
    @functools.lru_cache(maxsize=None)
    def _generate_schema(cls, header_map=HEADER_MAP):
        with open(header_map, "r") as fin:
            return {int(addr, base=16): (int(size), descr)
                    for addr, size, descr in csv.reader(fin.readlines())}

    def field(self, name):
        """
        Get the MemoryStructure for a single named header field, addressed absolutely within the ROM image.
        """
        for addr, (size, descr) in self._unpack_schema.items():
            if descr == name:
                return MemoryStructure(self.addr + addr, size, descr, descr)
        raise KeyError(name)

    def fits(self, bindata):
        return len(bindata) >= self.addr + self.length

    def read(self, bindata):
        decode_tbl = {}
        for addr, (size, descr) in self._unpack_schema.items():
            decode_tbl[descr] = \
                MemoryStructure(self.addr + addr, size, descr, descr) << bindata
        return decode_tbl

    def decode(self, bindata):
        """
        Like `read`, but with multi-byte numeric fields converted to integers.
        """
        decoded = {}
        for descr, raw in self.read(bindata).items():
            if descr == "title":
                decoded[descr] = raw
            elif len(raw) == 2:
                decoded[descr] = ByteUtils.as_uint_16(raw)
            else:
                decoded[descr] = ByteUtils.as_uint_8(raw)
        return decoded

    def is_valid(self, bindata):
        """
        A header is accepted if its title is printable ASCII and the checksum and its complement add up to 0xFFFF.
        """
        if not self.fits(bindata):
            return False
        hdr = self.decode(bindata)
        if any(b < 32 or b > 126 for b in hdr["title"]):
            return False
        return hdr["checksum"] + hdr["checksum_complement"] == 0xFFFF

    @classmethod
    def locate(cls, bindata):
        for offset in HEADER_OFFSETS:
            header = cls(offset)
            if header.is_valid(bindata):
                log.debug(f"Found valid header at 0x{offset:x}")
                return header
        raise HeaderNotFound("ROM does not contain valid header.")

    def format(self, bindata):
        hdr = self.decode(bindata)
        return "\n".join([
            f"Size: {len(bindata)} (size % 32KB: {len(bindata) % BANK_SIZE})",
            f"Name: {hdr['title'].decode('ascii')}",
            f"Mode: {hdr['map_mode']:02x}",
            f"Chipset: {hdr['chipset']:02x}",
            f"ROM size: {hdr['rom_size']:02x} ({1 << hdr['rom_size']} KB)",
            f"RAM size: {hdr['ram_size']:02x} ({1 << hdr['ram_size']} KB)",
            f"Country: {hdr['country']:02x}",
            f"Developer: {hdr['developer']:02x}",
            f"Version: {hdr['version']:02x}",
            f"Checksum Complement: {hdr['checksum_complement']:04x}",
            f"Checksum: {hdr['checksum']:04x}",
        ])

def has_copier_header(bindata):
    return len(bindata) % 1024 == COPIER_HEADER_SIZE

def strip_copier_header(bindata):
    if len(bindata) < COPIER_HEADER_SIZE:
        raise ValueError(f"Image is too small to have a copier header "
                         f"({len(bindata)} bytes)")
    return bytes(bindata[COPIER_HEADER_SIZE:])

from .checksum import *
