import io

import pytest

import android_bootimage
from android_bootimage import (
    BootImage,
    BootImageIOError,
    Section,
    insert_section,
    read_boot_image,
    section_offset_and_size,
    write_boot_image,
    write_section,
)


def test_read_boot_image_from_path(image_file, sections):
    image = read_boot_image(image_file)
    assert image.kernel == sections['kernel']

    image = read_boot_image(str(image_file), page_size=2048)
    assert image.ramdisk == sections['ramdisk']


def test_read_boot_image_from_stream(image_bytes, sections):
    image = read_boot_image(io.BytesIO(image_bytes))
    assert image.device_tree == sections['device_tree']


def test_read_boot_image_missing_file(tmp_path):
    with pytest.raises(BootImageIOError) as excinfo:
        read_boot_image(tmp_path / 'missing.img')
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_insert_section():
    image = BootImage()
    assert insert_section(image, Section.SECOND, b'second') == b''
    assert insert_section(image, Section.SECOND, b'2') == b'second'
    assert image.header.second_size == 1


def test_section_offset_and_size():
    image = BootImage()
    image.insert_kernel(b'k' * 5000)
    image.insert_ramdisk(b'r' * 10)

    assert section_offset_and_size(image, Section.RAMDISK) == (8192, 10)


def test_write_read_round_trip(tmp_path):
    image = BootImage()
    image.insert_kernel(b'\x00kernel' * 1000)
    image.insert_ramdisk(b'\x1f\x8b\x08ramdisk' * 300)
    image.insert_second(b'second')
    image.insert_device_tree(b'\xd0\x0d\xfe\xed' * 700)
    path = tmp_path / 'new-boot.img'

    written = write_boot_image(image, path)
    assert written == path.stat().st_size
    assert written % image.page_size == 0

    again = read_boot_image(path, page_size=image.page_size)
    assert again.kernel == image.kernel
    assert again.ramdisk == image.ramdisk
    assert again.second == image.second
    assert again.device_tree == image.device_tree
    assert again.header == image.header


def test_write_boot_image_unaligned():
    image = BootImage()
    image.insert_kernel(b'abc')
    out = io.BytesIO()

    assert write_boot_image(image, out, aligned=False) == 616 + 3


def test_write_section(tmp_path, image_file, sections):
    image = read_boot_image(image_file)
    path = tmp_path / 'kernel.img'

    assert write_section(image, Section.KERNEL, path) == len(sections['kernel'])
    assert path.read_bytes() == sections['kernel']


def test_write_section_bad_destination(tmp_path):
    with pytest.raises(BootImageIOError):
        write_section(BootImage(), Section.KERNEL, tmp_path / 'missing' / 'kernel.img')


def test_package_exports():
    assert android_bootimage.HEADER_SIZE == 616
    assert android_bootimage.BOOT_MAGIC == b'ANDROID!'
