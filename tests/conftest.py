import struct

import pytest

from android_bootimage.header import HEADER_FORMAT


def make_header_bytes(kernel_size=0, ramdisk_size=0, second_size=0, device_tree_size=0,
                      page_size=2048, magic=b'ANDROID!', name=b'SM-T377A',
                      cmdline=b'console=ttySAC2,115200', unique_id=b'\x5a' * 32):
    return struct.pack(HEADER_FORMAT, magic,
                       kernel_size, 0x10008000,
                       ramdisk_size, 0x11000000,
                       second_size, 0x100f0000,
                       device_tree_size, 0x02000000,
                       0x10000100, page_size,
                       name, cmdline, unique_id)


def pad(data, page_size):
    return data + bytes(-len(data) % page_size)


def make_image_bytes(kernel=b'', ramdisk=b'', second=b'', device_tree=b'', page_size=2048,
                     header_page_size=None, magic=b'ANDROID!'):
    """Build an image laid out the way a bootloader expects it."""
    if header_page_size is None:
        header_page_size = page_size
    header = make_header_bytes(len(kernel), len(ramdisk), len(second), len(device_tree),
                               header_page_size, magic)
    return b''.join(pad(part, page_size) for part in (header, kernel, ramdisk, second, device_tree))


@pytest.fixture
def sections():
    return {
        'kernel': bytes(range(256)) * 20,
        'ramdisk': b'\x1f\x8b\x08' + b'r' * 3000,
        'second': b'',
        'device_tree': b'\xd0\x0d\xfe\xed' + b'd' * 2044,
    }


@pytest.fixture
def image_bytes(sections):
    return make_image_bytes(**sections)


@pytest.fixture
def image_file(tmp_path, image_bytes):
    path = tmp_path / 'boot.img'
    path.write_bytes(image_bytes)
    return path
