import logging
log = logging.getLogger()

from .errors import RomToolError, InvalidFormat, HeaderNotFound
from .components import (
    MemoryStructure,
    SNESHeader,
    compute_checksum,
    fix_checksum,
    has_copier_header,
    strip_copier_header
)
from .utils import sha1_hex
from .utils.ips_patcher import (
    IPSPatcher,
    PatchBuffer,
    LiteralRecord,
    RunLengthRecord
)
