"""Read, modify and write Android boot images, including the Samsung variant."""

from .api import (
    insert_section,
    read_boot_image,
    section_offset_and_size,
    write_boot_image,
    write_section,
)
from .errors import (
    BadHeaderError,
    BadMagicError,
    BootImageError,
    BootImageIOError,
    NoPageSizeError,
)
from .header import BOOT_MAGIC, HEADER_SIZE, Header
from .image import BootImage, read_section_from
from .layout import image_layout, section_location, section_offset, size_in_pages
from .sections import SECTIONS, Section, present_sections, section_size

__version__ = '0.1.0'
