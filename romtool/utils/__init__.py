import struct
import hashlib
import logging
log = logging.getLogger()

class ByteUtils:
    @classmethod
    def as_uint_8(cls, data):
        return int(data[0])

    @classmethod
    def as_uint_16(cls, data):
        return struct.unpack("<H", data)[0]

def sha1_hex(data):
    hsh = hashlib.new("sha1")
    hsh.update(data)
    return hsh.hexdigest()

from .ips_patcher import (
    IPSPatcher,
    PatchBuffer,
    LiteralRecord,
    RunLengthRecord
)
