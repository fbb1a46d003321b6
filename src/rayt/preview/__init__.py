"""Image output.

Components:
    export: PNG writing via Pillow and backup of a previous output file
"""

from rayt.preview.export import backup_existing, save_png, save_png_from_array

__all__ = [
    "save_png",
    "save_png_from_array",
    "backup_existing",
]
