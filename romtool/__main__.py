import sys
import fire

from . import (
    RomToolError,
    IPSPatcher,
    PatchBuffer,
    SNESHeader,
    fix_checksum,
    has_copier_header,
    strip_copier_header,
    sha1_hex
)
from .io import read_file, write_file, output_path, open_patch

import logging
logging.basicConfig(level=logging.INFO)
log = logging.getLogger()

class RomTool:
    """
    Utilities for SNES ROM images.
    """
    # Paths go through str(): fire turns numeric-looking arguments into ints,
    # which open() reads as file descriptors.
    def __init__(self, verbose=False):
        if verbose:
            log.setLevel(logging.DEBUG)

    def del_header(self, rom):
        """
        Delete the 512 byte copier header, writing ROM-no-header.
        """
        rom = str(rom)
        romdata = read_file(rom)
        log.info(f"Deleting header: {rom} ({sha1_hex(romdata)})")
        write_file(output_path(rom, "no-header"), strip_copier_header(romdata))

    def info(self, rom):
        """
        Display the internal header of ROM.
        """
        rom = str(rom)
        romdata = read_file(rom)
        if has_copier_header(romdata):
            log.warning(f"{rom} appears to have a copier header, "
                        f"use del_header first")
        return SNESHeader.locate(romdata).format(romdata)

    def ips(self, rom, *patches):
        """
        Apply IPS patches to ROM in the given order, writing ROM-patched.
        """
        if len(patches) == 0:
            raise ValueError("Give patch files as arguments.")

        rom, patches = str(rom), [str(patch) for patch in patches]
        romdata = read_file(rom)
        log.info(f"Patching ROM: {rom} ({sha1_hex(romdata)})")

        buffer = PatchBuffer(romdata)
        for patch in patches:
            IPSPatcher.apply(buffer, open_patch(patch))

        write_file(output_path(rom, "patched"), buffer.snapshot())

    def ips_info(self, patch):
        """
        List the records of an IPS patch without applying it.
        """
        return IPSPatcher.describe(read_file(str(patch)))

    def fix_checksum(self, rom, offset=None):
        """
        Recompute the header checksum and complement, writing ROM-fixed.
        """
        rom = str(rom)
        romdata = read_file(rom)
        log.info(f"Fixing checksum: {rom} ({sha1_hex(romdata)})")
        header = SNESHeader(offset) if offset is not None else None
        write_file(output_path(rom, "fixed"), fix_checksum(romdata, header))

    def sha1(self, filename):
        """
        Calculate the SHA-1 of a file.
        """
        return sha1_hex(read_file(str(filename)))

def main(argv=None):
    try:
        fire.Fire(RomTool, command=argv, name="romtool")
    except (RomToolError, ValueError, OSError) as e:
        log.error(str(e))
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
