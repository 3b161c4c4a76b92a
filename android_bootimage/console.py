"""Status and error reporting for the command line."""

import sys


def human_size(size):
    """Format a byte count with binary units, e.g. '2.50 KiB'."""
    if size < 1024:
        return f"{size} B"
    for unit in ('KiB', 'MiB', 'GiB'):
        size /= 1024
        if size < 1024:
            break
    return f"{size:.2f} {unit}"


class Console:
    """Prints status lines to stdout, warnings and errors to stderr."""

    def status(self, status, message):
        print(f"{status:>12} {message}")

    def _causes(self, error):
        while error is not None:
            print(f"caused by: {error}", file=sys.stderr)
            error = error.__cause__

    def warning(self, message, error=None):
        print(f"warning: {message}", file=sys.stderr)
        self._causes(error)

    def error(self, message, error=None):
        print(f"error: {message}", file=sys.stderr)
        self._causes(error)

    def fatal(self, message, error=None):
        self.error(message, error)
        sys.exit(1)
