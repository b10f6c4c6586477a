"""Unit tests for SNES checksum computation."""

import pytest

from builders import build_rom
from romtool.components import (
    HIROM_HEADER,
    LOROM_HEADER,
    SNESHeader,
    compute_checksum,
    fix_checksum,
)


class TestComputeChecksum:
    """Tests for compute_checksum()."""

    def test_empty(self):
        assert compute_checksum(b"") == 0

    def test_power_of_two_size(self):
        assert compute_checksum(bytes([1, 2, 3, 4])) == 10

    def test_wraps_to_16_bits(self):
        assert compute_checksum(b"\xff" * 0x200) == 0xFE00

    def test_remainder_is_mirrored(self):
        """The 2-byte tail of a 6-byte image is counted twice."""
        assert compute_checksum(b"\x01" * 6) == 8

    def test_odd_remainder_is_mirrored(self):
        """1 + 2 + ... : 3 bytes above the 4-byte base mirror to fill 4 bytes."""
        assert compute_checksum(bytes([1, 2, 3])) == 1 + 2 + 3 + 3
        assert compute_checksum(b"\x01" * 7) == 8

    def test_three_quarter_size(self):
        """A 12-byte image mirrors its 4-byte tail to fill 8 bytes."""
        assert compute_checksum(b"\x01" * 12) == 16


class TestFixChecksum:
    """Tests for fix_checksum()."""

    def test_fixed_header_is_valid(self, lorom):
        rom = bytearray(lorom)
        rom[0x100:0x110] = b"\x12" * 16
        fixed = fix_checksum(bytes(rom))

        hdr = SNESHeader.locate(fixed).decode(fixed)
        assert hdr["checksum"] + hdr["checksum_complement"] == 0xFFFF
        assert hdr["checksum"] == compute_checksum(fixed)

    def test_only_checksum_fields_change(self, lorom):
        rom = bytearray(lorom)
        rom[0] = 0x80
        fixed = fix_checksum(bytes(rom))
        assert len(fixed) == len(rom)
        assert fixed[: LOROM_HEADER + 0x1C] == bytes(rom[: LOROM_HEADER + 0x1C])
        assert fixed[LOROM_HEADER + 0x20 :] == bytes(rom[LOROM_HEADER + 0x20 :])

    def test_idempotent(self, hirom):
        once = fix_checksum(hirom)
        assert fix_checksum(once) == once

    def test_explicit_header(self, hirom):
        fixed = fix_checksum(hirom, SNESHeader(HIROM_HEADER))
        assert SNESHeader(HIROM_HEADER).is_valid(fixed)

    def test_explicit_header_out_of_range(self):
        with pytest.raises(ValueError):
            fix_checksum(build_rom(), SNESHeader(HIROM_HEADER))
