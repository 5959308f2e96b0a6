"""Error types raised by the object codec and store"""


class ObjectError(Exception):
    """Base class for every failure the object layer reports."""


class NotFound(ObjectError):
    pass


class DecodeError(ObjectError):
    pass


class CompressionError(DecodeError):
    pass


class FormatError(ObjectError):
    pass


class TruncatedEntry(FormatError):
    pass


class CorruptObject(ObjectError):
    pass


class InvalidType(ObjectError):
    pass
