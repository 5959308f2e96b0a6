"""Parsing and building of the "<kind> <size>\\0" object header"""
from typing import NamedTuple, Tuple

from .errors import CorruptObject, FormatError


class Header(NamedTuple):
    kind: str
    size: int
    offset: int  # index of the first body byte


def parse_header(data: bytes) -> Header:
    nul = data.find(b'\x00')
    if nul == -1:
        raise FormatError('object header is missing its NUL terminator')
    prefix = data[:nul]
    kind, sep, size = prefix.partition(b' ')
    if not sep:
        raise FormatError(f'object header has no space: {prefix!r}')
    if not kind:
        raise FormatError('object header has an empty kind')
    # bytes.isdigit() only accepts ASCII digits, so signs and spaces fail here
    if not size.isdigit():
        raise FormatError(f'object header size is not a decimal integer: {size!r}')
    try:
        kind_str = kind.decode('ascii')
    except UnicodeDecodeError:
        raise FormatError(f'object header kind is not ASCII: {kind!r}') from None
    return Header(kind_str, int(size), nul + 1)


def build_header(kind: str, length: int) -> bytes:
    if not kind or not kind.isascii() or ' ' in kind or '\x00' in kind:
        raise FormatError(f'invalid object kind: {kind!r}')
    if length < 0:
        raise FormatError(f'negative content length: {length}')
    return f'{kind} {length}\x00'.encode('ascii')


def split_object(data: bytes) -> Tuple[Header, bytes]:
    """Parse the header of a decompressed object and return it with the body.

    Raises CorruptObject when the declared size disagrees with the number of
    bytes that actually follow the header.
    """
    header = parse_header(data)
    body = data[header.offset:]
    if header.size != len(body):
        raise CorruptObject(
            f'{header.kind} header declares {header.size} bytes, body has {len(body)}')
    return header, body
