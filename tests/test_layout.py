import pytest

from android_bootimage.errors import NoPageSizeError
from android_bootimage.header import Header
from android_bootimage.layout import (
    align_size,
    image_layout,
    section_location,
    section_offset,
    size_in_pages,
)
from android_bootimage.sections import SECTIONS, Section, section_size


def make_header(kernel=0, ramdisk=0, second=0, device_tree=0):
    header = Header.default()
    header.kernel_size = kernel
    header.ramdisk_size = ramdisk
    header.second_size = second
    header.device_tree_size = device_tree
    return header


def test_size_in_pages():
    assert size_in_pages(0, 2048) == 0
    assert size_in_pages(1, 2048) == 1
    assert size_in_pages(2048, 2048) == 1
    assert size_in_pages(2049, 2048) == 2
    assert size_in_pages(5000, 2048) == 3
    assert align_size(616, 2048) == 2048


@pytest.mark.parametrize('page_size', [1, 512, 2048, 4096, 16384])
def test_header_offset_is_zero(page_size):
    assert section_offset(make_header(100, 200, 300, 400), page_size, Section.HEADER) == 0


def test_kernel_page_alignment():
    header = make_header(kernel=5000, ramdisk=10)

    assert section_offset(header, 2048, Section.KERNEL) == 2048
    # One header page plus ceil(5000 / 2048) == 3 kernel pages.
    assert section_offset(header, 2048, Section.RAMDISK) == 1 * 2048 + 3 * 2048


def test_zero_size_sections_take_no_pages():
    header = make_header(kernel=2048, second=0, device_tree=1)

    ramdisk = section_offset(header, 2048, Section.RAMDISK)
    assert section_offset(header, 2048, Section.SECOND) == ramdisk
    assert section_offset(header, 2048, Section.DEVICE_TREE) == ramdisk


def test_small_page_size():
    # The header alone spans several pages when they are small.
    header = make_header(kernel=10)
    assert section_offset(header, 256, Section.KERNEL) == 768
    assert section_offset(header, 256, Section.RAMDISK) == 1024


@pytest.mark.parametrize('page_size', [256, 2048, 4096])
@pytest.mark.parametrize('sizes', [(0, 0, 0, 0), (5000, 1, 0, 4096), (1, 2, 3, 4), (8192, 0, 77, 0)])
def test_offsets_monotonic_and_aligned(page_size, sizes):
    header = make_header(*sizes)

    for previous, current in zip(SECTIONS, SECTIONS[1:]):
        start = section_offset(header, page_size, previous)
        offset = section_offset(header, page_size, current)
        assert offset >= start + section_size(header, previous)
        assert offset % page_size == 0


@pytest.mark.parametrize('section', SECTIONS)
def test_zero_page_size(section):
    header = make_header(kernel=10)
    with pytest.raises(NoPageSizeError) as excinfo:
        section_offset(header, 0, section)
    assert excinfo.value.header is header


def test_section_location():
    header = make_header(kernel=5000, ramdisk=10)
    assert section_location(header, 2048, Section.RAMDISK) == (8192, 10)
    assert section_location(header, 2048, Section.HEADER) == (0, 616)


def test_image_layout():
    header = make_header(kernel=5000, ramdisk=10, device_tree=3)
    assert image_layout(header, 2048) == [
        (Section.HEADER, 0, 616),
        (Section.KERNEL, 2048, 5000),
        (Section.RAMDISK, 8192, 10),
        (Section.SECOND, 10240, 0),
        (Section.DEVICE_TREE, 10240, 3),
    ]
