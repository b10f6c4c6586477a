"""
Exceptions raised by romtool. Everything a caller is expected to handle derives
from `RomToolError`.
"""

class RomToolError(Exception):
    pass

class InvalidFormat(RomToolError, ValueError):
    """
    The patch stream does not start with the IPS magic, or is too short to
    hold it. Raised before anything has been written to the target buffer.
    """
    pass

class HeaderNotFound(RomToolError, ValueError):
    """
    None of the known header locations holds a valid internal SNES header.
    """
    pass
