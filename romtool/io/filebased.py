import logging
log = logging.getLogger()

from io import BytesIO

from ..utils import sha1_hex

def read_file(fname):
    with open(fname, "rb") as fin:
        return fin.read()

def write_file(fname, data):
    log.info(f"Writing result file: {fname} ({sha1_hex(data)})")
    with open(fname, "wb") as fout:
        fout.write(data)

def output_path(fname, suffix):
    """
    Results are written next to the input, e.g. `game.sfc` -> `game.sfc-patched`.
    """
    return f"{fname}-{suffix}"

def open_patch(fname):
    """
    Load a patch file fully and wrap it in a sequential reader.
    """
    data = read_file(fname)
    log.info(f"Applying patch: {fname} ({sha1_hex(data)})")
    return BytesIO(data)
