"""In-memory boot image: a header plus the kernel, ramdisk, second and device tree."""

import io

from .errors import BadHeaderError, BadMagicError, BootImageIOError, NoPageSizeError
from .header import Header, read_exact
from .layout import align_size, section_location
from .sections import SECTIONS, SIZE_FIELDS, Section


def read_section_from(source, header, section, page_size=None):
    """
    Read one section from a seekable `source`, located with `header`.

    `page_size` overrides the header's page size when given.
    """
    if page_size is None:
        page_size = header.page_size
    offset, size = section_location(header, page_size, section)
    try:
        source.seek(offset, io.SEEK_SET)
    except OSError as e:
        raise BootImageIOError(f"Failed to seek to offset 0x{offset:x}", section) from e
    return read_exact(source, size, section)


def _write(target, data, section):
    try:
        target.write(data)
    except OSError as e:
        raise BootImageIOError(f"Failed to write {len(data)} bytes", section) from e
    return len(data)


class BootImage:
    """
    A boot image held in memory.

    The section sizes in the header always match the lengths of the section
    buffers. Sections are only changed through the insert_* methods, which
    keep the header in sync and return whatever they replaced.
    """

    def __init__(self):
        self._header = Header.default()
        self._sections = {section: b'' for section in SIZE_FIELDS}

    def insert_header(self, new_header, check_magic=True):
        """
        Replace the header, returning the old one.

        The section sizes of the new header are overwritten with the lengths
        of the sections currently held by this image. Raises BadMagicError or
        NoPageSizeError without changing anything if the header is rejected.
        """
        if check_magic and not new_header.has_valid_magic():
            raise BadMagicError(new_header)
        if new_header.page_size == 0:
            raise NoPageSizeError(new_header)

        old_header, self._header = self._header, new_header.copy()
        self._update_all_sizes()
        return old_header

    def insert_section(self, section, data):
        """Replace the data of a non-header section, returning the old data."""
        if section not in SIZE_FIELDS:
            raise ValueError(f"Cannot insert data into the '{section}' section")
        # memoryview() rejects ints, which bytes() would turn into zero-filled buffers.
        data = bytes(memoryview(data))
        old_data, self._sections[section] = self._sections[section], data
        setattr(self._header, SIZE_FIELDS[section], len(data))
        return old_data

    def insert_kernel(self, kernel):
        return self.insert_section(Section.KERNEL, kernel)

    def insert_ramdisk(self, ramdisk):
        return self.insert_section(Section.RAMDISK, ramdisk)

    def insert_second(self, second):
        return self.insert_section(Section.SECOND, second)

    def insert_device_tree(self, device_tree):
        return self.insert_section(Section.DEVICE_TREE, device_tree)

    def _update_all_sizes(self):
        for section, field in SIZE_FIELDS.items():
            setattr(self._header, field, len(self._sections[section]))

    @property
    def header(self):
        """A copy of the header. Use insert_header() to change it."""
        return self._header.copy()

    @property
    def page_size(self):
        return self._header.page_size

    @property
    def kernel(self):
        return self._sections[Section.KERNEL]

    @property
    def ramdisk(self):
        return self._sections[Section.RAMDISK]

    @property
    def second(self):
        return self._sections[Section.SECOND]

    @property
    def device_tree(self):
        return self._sections[Section.DEVICE_TREE]

    def section(self, section):
        """Raw bytes of `section`. The header section is returned serialized."""
        if section is Section.HEADER:
            return self._header.pack()
        return self._sections[section]

    def section_location(self, section):
        """Return (offset, size) of `section` in bytes."""
        return section_location(self._header, self.page_size, section)

    def section_offset(self, section):
        return self.section_location(section)[0]

    @classmethod
    def read_from(cls, source, page_size=None, check_magic=True):
        """
        Read a boot image from a seekable `source`.

        As some boot images have their page size set to 0, an override
        `page_size` can be supplied. Every section is located by seeking to
        its calculated offset, so padding between sections is never read.
        """
        header = Header.read_from(source)
        if page_size is not None:
            header.page_size = page_size

        boot_image = cls()
        try:
            boot_image.insert_header(header, check_magic=check_magic)
        except (BadMagicError, NoPageSizeError) as e:
            raise BadHeaderError(e) from e

        # Inserting the header reset its sizes, so locate sections with the one read from disk.
        for section in SECTIONS[1:]:
            boot_image.insert_section(section, read_section_from(source, header, section))
        return boot_image

    def write_header_to(self, target):
        return self._header.write_to(target)

    def write_section_to(self, section, target):
        """Write the raw data of `section` to `target`, returning the amount of bytes written."""
        if section is Section.HEADER:
            return self.write_header_to(target)
        return _write(target, self._sections[section], section)

    def write_to(self, target, aligned=False):
        """
        Write the whole image to `target`, returning the amount of bytes written.

        Sections are written back to back unless `aligned` is set, in which
        case each section is zero-padded up to the next page boundary.
        """
        written = 0
        for section in SECTIONS:
            size = self.write_section_to(section, target)
            written += size
            if aligned:
                padding = align_size(size, self.page_size) - size
                written += _write(target, bytes(padding), section)
        return written

    def __repr__(self):
        sizes = ', '.join(f"{section}={len(data)}" for section, data in self._sections.items())
        return f"BootImage(page_size={self.page_size}, {sizes})"
