"""Entry points used by the command line and other callers."""

import os

from .errors import BootImageIOError
from .image import BootImage


def _is_path(obj):
    return isinstance(obj, (str, bytes, os.PathLike))


def read_boot_image(source, page_size=None, check_magic=True):
    """Read a boot image from a file path or a seekable binary stream."""
    if not _is_path(source):
        return BootImage.read_from(source, page_size, check_magic)

    try:
        f = open(source, 'rb')
    except OSError as e:
        raise BootImageIOError(f"Failed to open boot image '{os.fsdecode(source)}'") from e
    with f:
        return BootImage.read_from(f, page_size, check_magic)


def insert_section(image, section, data):
    """Replace a section of `image`, returning its previous data."""
    return image.insert_section(section, data)


def section_offset_and_size(image, section):
    return image.section_location(section)


def _write_to_destination(destination, write):
    if not _is_path(destination):
        return write(destination)

    try:
        f = open(destination, 'wb')
    except OSError as e:
        raise BootImageIOError(f"Failed to create '{os.fsdecode(destination)}'") from e
    with f:
        return write(f)


def write_boot_image(image, destination, aligned=True):
    """Write `image` to a file path or stream, page-aligned unless `aligned` is False."""
    return _write_to_destination(destination, lambda f: image.write_to(f, aligned=aligned))


def write_section(image, section, destination):
    """Write the raw data of one section to a file path or stream."""
    return _write_to_destination(destination, lambda f: image.write_section_to(section, f))
