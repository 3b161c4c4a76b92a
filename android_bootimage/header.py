"""
Boot image header codec.

The header is a fixed 616 byte record at the very start of the image. All
integers are little-endian unsigned 32-bit values:

    magic(8) + kernel_size(4) + kernel_load_address(4) + ramdisk_size(4) +
    ramdisk_load_address(4) + second_size(4) + second_load_address(4) +
    device_tree_size(4) + reserved(4) + kernel_tags_address(4) +
    page_size(4) + product_name(24) + boot_arguments(512) + unique_id(32)
"""

import struct

from .errors import BootImageIOError

BOOT_MAGIC = b'ANDROID!'
BOOT_MAGIC_SIZE = 8
BOOT_NAME_SIZE = 24
BOOT_ARGS_SIZE = 512
BOOT_ID_SIZE = 32

HEADER_FORMAT = '<%ds10I%ds%ds%ds' % (BOOT_MAGIC_SIZE, BOOT_NAME_SIZE, BOOT_ARGS_SIZE, BOOT_ID_SIZE)
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)

# Defaults for images that are built from scratch
DEFAULT_PAGE_SIZE = 2048
DEFAULT_KERNEL_LOAD_ADDRESS = 0x10008000
DEFAULT_RAMDISK_LOAD_ADDRESS = 0x11000000
DEFAULT_SECOND_LOAD_ADDRESS = 0x100f0000
DEFAULT_RESERVED = 0x02000000
DEFAULT_KERNEL_TAGS_ADDRESS = 0x10000100

# Field names in on-disk order, matching HEADER_FORMAT.
FIELDS = (
    'magic',
    'kernel_size',
    'kernel_load_address',
    'ramdisk_size',
    'ramdisk_load_address',
    'second_size',
    'second_load_address',
    'device_tree_size',
    'reserved',
    'kernel_tags_address',
    'page_size',
    'product_name',
    'boot_arguments',
    'unique_id',
)

_FIXED_WIDTHS = {
    'magic': BOOT_MAGIC_SIZE,
    'product_name': BOOT_NAME_SIZE,
    'boot_arguments': BOOT_ARGS_SIZE,
    'unique_id': BOOT_ID_SIZE,
}


def read_exact(source, size, section=None):
    """Read exactly `size` bytes from `source`, raising BootImageIOError otherwise."""
    chunks = []
    remaining = size
    while remaining > 0:
        try:
            chunk = source.read(remaining)
        except OSError as e:
            raise BootImageIOError(f"Failed to read {size} bytes", section) from e
        if chunk is None:
            raise BootImageIOError("Stream has no data available (non-blocking)", section)
        if not chunk:
            raise BootImageIOError(
                f"Unexpected end of stream, read {size - remaining} of {size} bytes", section)
        chunks.append(chunk)
        remaining -= len(chunk)
    return b''.join(chunks)


class Header:
    """Boot image header, as found at offset 0 of the image."""

    def __init__(self):
        self.magic = bytes(BOOT_MAGIC_SIZE)
        self.kernel_size = 0
        self.kernel_load_address = 0
        self.ramdisk_size = 0
        self.ramdisk_load_address = 0
        self.second_size = 0
        self.second_load_address = 0
        self.device_tree_size = 0
        # Opaque, passed through unchanged
        self.reserved = 0
        self.kernel_tags_address = 0
        self.page_size = 0
        self.product_name = bytes(BOOT_NAME_SIZE)
        self.boot_arguments = bytes(BOOT_ARGS_SIZE)
        self.unique_id = bytes(BOOT_ID_SIZE)

    @classmethod
    def default(cls):
        """Header for an empty image, with the magic and conventional addresses set."""
        header = cls()
        header.magic = BOOT_MAGIC
        header.kernel_load_address = DEFAULT_KERNEL_LOAD_ADDRESS
        header.ramdisk_load_address = DEFAULT_RAMDISK_LOAD_ADDRESS
        header.second_load_address = DEFAULT_SECOND_LOAD_ADDRESS
        header.reserved = DEFAULT_RESERVED
        header.kernel_tags_address = DEFAULT_KERNEL_TAGS_ADDRESS
        header.page_size = DEFAULT_PAGE_SIZE
        return header

    @classmethod
    def parse(cls, data):
        """
        Parse a header from exactly HEADER_SIZE bytes.

        The magic is not checked here, use has_valid_magic() for that.
        """
        if len(data) != HEADER_SIZE:
            raise ValueError(f"Boot image header must be {HEADER_SIZE} bytes, got {len(data)}")

        header = cls()
        for name, value in zip(FIELDS, struct.unpack(HEADER_FORMAT, data)):
            setattr(header, name, value)
        return header

    @classmethod
    def read_from(cls, source):
        """Read and parse a header from the current position of `source`."""
        return cls.parse(read_exact(source, HEADER_SIZE, 'header'))

    def pack(self):
        """Serialize the header back into its HEADER_SIZE bytes."""
        for name, width in _FIXED_WIDTHS.items():
            if len(getattr(self, name)) > width:
                raise ValueError(f"Header field '{name}' is larger than {width} bytes")
        return struct.pack(HEADER_FORMAT, *(getattr(self, name) for name in FIELDS))

    def write_to(self, target):
        """Write the serialized header to `target`, returning the amount of bytes written."""
        data = self.pack()
        try:
            target.write(data)
        except OSError as e:
            raise BootImageIOError("Failed to write header", 'header') from e
        return len(data)

    def has_valid_magic(self):
        return self.magic == BOOT_MAGIC

    def copy(self):
        header = Header()
        for name in FIELDS:
            setattr(header, name, getattr(self, name))
        return header

    @property
    def name(self):
        """Product name without the NUL padding."""
        return self.product_name.rstrip(b'\x00').decode('utf-8', errors='ignore')

    @property
    def cmdline(self):
        """Kernel command line without the NUL padding."""
        return self.boot_arguments.rstrip(b'\x00').decode('utf-8', errors='ignore')

    def boot_argument_chunks(self, chunk_size=32):
        return [self.boot_arguments[i:i + chunk_size]
                for i in range(0, len(self.boot_arguments), chunk_size)]

    def __eq__(self, other):
        if not isinstance(other, Header):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in FIELDS)

    def __repr__(self):
        return (f"Header(magic={self.magic!r}, kernel_size={self.kernel_size}, "
                f"ramdisk_size={self.ramdisk_size}, second_size={self.second_size}, "
                f"device_tree_size={self.device_tree_size}, page_size={self.page_size})")
