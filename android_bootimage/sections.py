"""The sections of a boot image, in the order they appear on disk."""

import enum

from .header import HEADER_SIZE


class Section(enum.Enum):
    HEADER = 'header'
    KERNEL = 'kernel'
    RAMDISK = 'ramdisk'
    SECOND = 'second'
    DEVICE_TREE = 'device_tree'

    def __str__(self):
        return self.value


# On-disk order. Never reorder this.
SECTIONS = (
    Section.HEADER,
    Section.KERNEL,
    Section.RAMDISK,
    Section.SECOND,
    Section.DEVICE_TREE,
)

SIZE_FIELDS = {
    Section.KERNEL: 'kernel_size',
    Section.RAMDISK: 'ramdisk_size',
    Section.SECOND: 'second_size',
    Section.DEVICE_TREE: 'device_tree_size',
}


def section_size(header, section):
    """Size of `section` in bytes, as declared by `header`."""
    if section is Section.HEADER:
        return HEADER_SIZE
    return getattr(header, SIZE_FIELDS[section])


def present_sections(header):
    """Sections with a non-zero size, in on-disk order."""
    return [section for section in SECTIONS if section_size(header, section) > 0]
