"""Exceptions raised by the parsers."""


class FileFormatError(Exception):
    """Exception raised when a file can not be parsed."""


class RecordError(FileFormatError):
    """Exception raised when a record is malformed, e.g. a distance matrix
    row with the wrong number of values."""
