"""zlib and sha1 wrappers used by the loose-object codec"""
import hashlib
import zlib

from .errors import CompressionError

DIGEST_SIZE = 20


def compress(data: bytes) -> bytes:
    try:
        return zlib.compress(data)
    except zlib.error as e:
        raise CompressionError(str(e)) from e


def decompress(data: bytes) -> bytes:
    try:
        return zlib.decompress(data)
    except zlib.error as e:
        raise CompressionError(f'malformed zlib stream: {e}') from e


def digest(data: bytes) -> bytes:
    return hashlib.sha1(data).digest()


def hexdigest(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()
