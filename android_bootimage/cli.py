"""
Command line for unpacking, listing and repacking boot images.

    android-bootimage unpack boot.img --unpack-all
    android-bootimage sections boot.img
    android-bootimage repack boot.img --kernel zImage -o new-boot.img
"""

import argparse
import os
import sys

from . import __version__
from .api import read_boot_image, write_boot_image
from .console import Console, human_size
from .errors import BootImageError
from .header import Header
from .image import read_section_from
from .sections import Section, present_sections

SECTION_NAMES = {
    Section.HEADER: 'Header',
    Section.KERNEL: 'Kernel',
    Section.RAMDISK: 'Ramdisk',
    Section.SECOND: 'Second Ramdisk',
    Section.DEVICE_TREE: 'Device Tree',
}

# (option destination, section, default path used by --unpack-all)
SECTION_OUTPUTS = (
    ('kernel', Section.KERNEL, 'boot/kernel.img'),
    ('ramdisk', Section.RAMDISK, 'boot/ramdisk.img'),
    ('second', Section.SECOND, 'boot/second.img'),
    ('tree', Section.DEVICE_TREE, 'boot/device_tree.img'),
)
DEFAULT_INFO_PATH = 'boot/bootimg.info'


def page_size_arg(value):
    try:
        page_size = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid page size: '{value}'")
    if page_size <= 0:
        raise argparse.ArgumentTypeError("page size must be larger than 0")
    return page_size


def read_header(source, check_magic, page_size, console):
    """Read the header from `source`, exiting on any problem."""
    if not check_magic:
        # Any following errors might be caused by this not being a boot image at all.
        console.warning("Skipping header magic check.")

    try:
        header = Header.read_from(source)
    except BootImageError as e:
        console.fatal("Failed to read boot image header.", e)

    if check_magic and not header.has_valid_magic():
        console.fatal(f"Bad header magic {header.magic!r}, expected 'ANDROID!'. "
                      "Use --no-magic-check to skip this check.")
    if page_size is not None:
        header.page_size = page_size
    if header.page_size == 0:
        console.fatal("The header does not have a page size set. Use --page-size to supply one.")
    return header


def create_parent_dir(path, console):
    parent = os.path.dirname(path)
    if not parent or os.path.exists(parent):
        return
    try:
        os.makedirs(parent, exist_ok=True)
    except OSError as e:
        console.warning(f"Could not create '{parent}' directory.", e)
    else:
        console.status('Created', f"directory '{parent}'.")


def write_info(header, path):
    """Save the header fields as key=value lines."""
    with open(path, 'w') as f:
        f.write(f"kernel_size={header.kernel_size}\n")
        f.write(f"kernel_addr=0x{header.kernel_load_address:08x}\n")
        f.write(f"ramdisk_size={header.ramdisk_size}\n")
        f.write(f"ramdisk_addr=0x{header.ramdisk_load_address:08x}\n")
        f.write(f"second_size={header.second_size}\n")
        f.write(f"second_addr=0x{header.second_load_address:08x}\n")
        f.write(f"dt_size={header.device_tree_size}\n")
        f.write(f"tags_addr=0x{header.kernel_tags_address:08x}\n")
        f.write(f"page_size={header.page_size}\n")
        f.write(f"name={header.name}\n")
        f.write(f"cmdline={header.cmdline}\n")
        f.write(f"id={header.unique_id.hex()}\n")


def main_unpack(args, console):
    try:
        input_file = open(args.input_file, 'rb')
    except OSError as e:
        console.fatal(f"Failed to open boot image file '{args.input_file}'.", e)

    with input_file:
        header = read_header(input_file, not args.no_magic_check, args.page_size, console)
        console.status('Parsed', 'header.')

        requested = False
        for dest, section, default_path in SECTION_OUTPUTS:
            output_path = getattr(args, dest) or (default_path if args.unpack_all else None)
            if output_path is None:
                continue
            requested = True

            try:
                data = read_section_from(input_file, header, section)
            except BootImageError as e:
                console.warning(f"Failed to read '{section}' section from boot image "
                                f"'{args.input_file}'.", e)
                continue

            create_parent_dir(output_path, console)
            try:
                with open(output_path, 'wb') as f:
                    f.write(data)
            except OSError as e:
                console.warning(f"Failed to write '{section}' section into '{output_path}'.", e)
            else:
                console.status('Unpacked', f"'{section}' section into '{output_path}'.")

    info_path = args.info or (DEFAULT_INFO_PATH if args.unpack_all else None)
    if info_path is not None:
        requested = True
        create_parent_dir(info_path, console)
        try:
            write_info(header, info_path)
        except OSError as e:
            console.warning(f"Failed to write boot image info into '{info_path}'.", e)
        else:
            console.status('Saved', f"boot image info into '{info_path}'.")

    if not requested:
        console.warning("No sections extracted, as no sections were requested to be extracted.")
    return 0


def print_sections(image):
    for section in present_sections(image.header):
        offset, size = image.section_location(section)
        print(f"0x{offset:08X} - {SECTION_NAMES[section]:<14} (size: {human_size(size)})")


def main_sections(args, console):
    try:
        image = read_boot_image(args.input_file, args.page_size, not args.no_magic_check)
    except BootImageError as e:
        console.fatal(f"Could not read boot image from '{args.input_file}'.", e)

    print_sections(image)
    return 0


def main_repack(args, console):
    try:
        image = read_boot_image(args.input_file, args.page_size, not args.no_magic_check)
    except BootImageError as e:
        console.fatal(f"Could not read boot image from '{args.input_file}'.", e)
    console.status('Parsed', f"boot image '{args.input_file}'.")

    for dest, section, _ in SECTION_OUTPUTS:
        path = getattr(args, dest)
        if path is None:
            continue
        try:
            with open(path, 'rb') as f:
                data = f.read()
        except OSError as e:
            console.fatal(f"Failed to read '{section}' section from '{path}'.", e)
        old = image.insert_section(section, data)
        console.status('Replaced', f"'{section}' section ({human_size(len(old))} -> "
                                   f"{human_size(len(data))}).")

    try:
        written = write_boot_image(image, args.output)
    except BootImageError as e:
        console.fatal(f"Failed to write boot image into '{args.output}'.", e)
    console.status('Wrote', f"'{args.output}' ({human_size(written)}).")
    return 0


def add_input_args(parser):
    parser.add_argument('input_file', metavar='INPUT_FILE',
                        help="The boot image, for example 'boot.img'")
    parser.add_argument('--no-magic-check', action='store_true',
                        help='Do not check if the magic signature is correct')
    parser.add_argument('--page-size', '-p', type=page_size_arg, metavar='PAGE_SIZE',
                        help='Use a custom page size. This may be required on some boot images.')


def add_section_args(parser, verb):
    parser.add_argument('--kernel', help=f'The file to {verb} the kernel')
    parser.add_argument('--ramdisk', help=f'The file to {verb} the ramdisk')
    parser.add_argument('--second', help=f'The file to {verb} the optional second file')
    parser.add_argument('--tree', help=f'The file to {verb} the device tree')


def create_parser():
    parser = argparse.ArgumentParser(prog='android-bootimage',
                                     description='Handle Android and Samsung boot images')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    unpack = subparsers.add_parser('unpack', help='Unpack sections of a boot image')
    add_input_args(unpack)
    unpack.add_argument('--unpack-all', '-a', action='store_true',
                        help="Unpack all sections to their default locations, "
                             "'boot/SECTION_NAME.img'")
    add_section_args(unpack, 'extract into')
    unpack.add_argument('--info', help='The file to save the header fields into')
    unpack.set_defaults(func=main_unpack)

    sections = subparsers.add_parser('sections', help='List the sections in a boot image')
    add_input_args(sections)
    sections.set_defaults(func=main_sections)

    repack = subparsers.add_parser('repack', help='Replace sections of a boot image')
    add_input_args(repack)
    add_section_args(repack, 'take')
    repack.add_argument('--output', '-o', required=True, help='Output boot image file')
    repack.set_defaults(func=main_repack)

    return parser


def main(argv=None):
    args = create_parser().parse_args(argv)
    return args.func(args, Console())


if __name__ == '__main__':
    sys.exit(main())
