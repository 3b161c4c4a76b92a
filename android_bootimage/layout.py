"""
Section offsets within a boot image.

Every section starts on a page boundary. The offset of a section is the sum
of the page-rounded sizes of all sections before it, zero-size sections
included (they round to zero pages).
"""

from .errors import NoPageSizeError
from .sections import SECTIONS, section_size


def size_in_pages(size, page_size):
    """Number of pages needed to hold `size` bytes."""
    return (size + page_size - 1) // page_size


def align_size(size, page_size):
    """Round `size` up to the next page boundary."""
    return size_in_pages(size, page_size) * page_size


def section_offset(header, page_size, section):
    """Byte offset of `section`, laid out with `page_size` byte pages."""
    if page_size == 0:
        raise NoPageSizeError(header)

    pages = 0
    for preceding in SECTIONS:
        if preceding is section:
            break
        pages += size_in_pages(section_size(header, preceding), page_size)
    return pages * page_size


def section_location(header, page_size, section):
    """Return (offset, size) of `section` in bytes."""
    return section_offset(header, page_size, section), section_size(header, section)


def image_layout(header, page_size):
    """Return (section, offset, size) for every section, in on-disk order."""
    return [(section,) + section_location(header, page_size, section) for section in SECTIONS]
