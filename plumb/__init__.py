"""plumb: plumbing for git-style loose objects"""
from .errors import (CompressionError, CorruptObject, DecodeError, FormatError,
                     InvalidType, NotFound, ObjectError, TruncatedEntry)
from .header import Header, build_header, parse_header
from .objects import ObjectReader, ObjectStore, ReaderState, StoredObject, hash_of
from .paths import ObjectPaths
from .tree import EntryKind, TreeEntry, build_entries, parse_entries

__version__ = '0.1.0'
