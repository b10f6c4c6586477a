"""
SNES internal checksum computation.
"""
import logging
log = logging.getLogger()

__all__ = ["compute_checksum", "fix_checksum"]

def _mirror_sum(bindata):
    # The cartridge maps the part above the largest power of two repeatedly
    # until it fills the next power of two, so that part is summed that many
    # times. Returns the sum and the mirrored length.
    mask = 1 << (len(bindata).bit_length() - 1)
    total, span = sum(bindata[:mask]), mask

    rest = bindata[mask:]
    if len(rest) > 0:
        part, part_span = _mirror_sum(rest)
        while part_span < mask:
            part_span += part_span
            part += part
        total += part
        span = mask + mask

    return total & 0xFFFF, span

def compute_checksum(bindata):
    if len(bindata) == 0:
        return 0
    return _mirror_sum(bindata)[0]

def fix_checksum(bindata, header=None):
    """
    Recompute the checksum and complement of `bindata`, returning the updated image. If `header` is not given, it is located first.
    """
    from . import SNESHeader
    header = header or SNESHeader.locate(bindata)
    if not header.fits(bindata):
        raise ValueError(f"Image is too small for a header at "
                         f"0x{header.addr:x} ({len(bindata)} bytes)")

    complement = header.field("checksum_complement")
    checksum = header.field("checksum")

    # The checksum is defined over the image with these two placeholders.
    bindata = complement @ b"\xff\xff" >> bindata
    bindata = checksum @ b"\x00\x00" >> bindata

    value = compute_checksum(bindata)
    log.info(f"Computed checksum 0x{value:04x} "
             f"(complement 0x{value ^ 0xFFFF:04x})")

    bindata = complement @ (value ^ 0xFFFF).to_bytes(2, byteorder="little") \
                         >> bindata
    return checksum @ value.to_bytes(2, byteorder="little") >> bindata
