"""Shared pytest fixtures for ROM images."""

import pytest

from builders import build_rom


@pytest.fixture
def lorom():
    """A 32 KB LoROM image with a valid header."""
    return build_rom()


@pytest.fixture
def hirom():
    """A 64 KB HiROM image; the LoROM location holds no valid header."""
    return build_rom(size=0x10000, header_offset=0xFFC0, title=b"HIROM GAME")


@pytest.fixture
def rom_file(tmp_path, lorom):
    """Write the LoROM image to disk."""
    path = tmp_path / "game.sfc"
    path.write_bytes(lorom)
    return path
