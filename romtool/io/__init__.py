from .filebased import (
    read_file,
    write_file,
    output_path,
    open_patch
)
