"""Exceptions raised while handling boot images."""


class BootImageError(Exception):
    """Base class for every error raised by this package."""


class BadMagicError(BootImageError):
    """The header does not start with the 'ANDROID!' magic."""

    def __init__(self, header):
        super().__init__("The header does not contain the 'ANDROID!' magic.")
        self.header = header


class NoPageSizeError(BootImageError):
    """The page size is zero where offsets need to be calculated."""

    def __init__(self, header):
        super().__init__("The header does not have a page size set.")
        self.header = header


class BootImageIOError(BootImageError):
    """Reading, writing or seeking the underlying stream failed."""

    def __init__(self, message, section=None):
        if section is not None:
            message = f"{message} ('{section}' section)"
        super().__init__(message)
        self.section = section


class BadHeaderError(BootImageError):
    """The header of a boot image being read was rejected."""

    def __init__(self, cause):
        super().__init__("Could not parse the boot image header.")
        self.cause = cause

    @property
    def header(self):
        return self.cause.header
