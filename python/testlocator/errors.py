"""Exception types raised by the binary format readers."""


class TestLocatorError(Exception):
    """Base class for testlocator errors."""

    __test__ = False


class PeFormatError(TestLocatorError):
    """The file is not a PE image we can read."""


class PdbFormatError(TestLocatorError):
    """The file is not an MSF 7.00 program database we can read."""
