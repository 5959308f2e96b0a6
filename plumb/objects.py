"""Loose object storage: zlib-compressed "<kind> <size>\\0<content>" files"""
import enum
import logging
import os
import tempfile
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import List, Union

from .compression import compress, decompress, hexdigest
from .errors import CorruptObject, InvalidType
from .header import Header, build_header, split_object
from .paths import ObjectPaths
from .tree import TreeEntry, parse_entries

logger = logging.getLogger(__name__)

TEXT_KINDS = ('blob', 'commit')


def hash_of(kind: str, content: bytes) -> str:
    return hexdigest(build_header(kind, len(content)) + content)


@dataclass(frozen=True)
class StoredObject:
    oid: str
    kind: str
    size: int
    body: bytes


class ReaderState(enum.IntEnum):
    UNREAD = 0
    RAW_LOADED = 1
    DECOMPRESSED = 2
    HEADER_PARSED = 3
    RECORDS_PARSED = 4
    TREE_PARSED = 5


class ObjectReader:
    """Lazily decodes a single stored object.

    Every stage (raw bytes, decompressed bytes, parsed header, decoded
    records) is computed on first use and cached on the instance, so
    repeated calls never touch the filesystem again. Readers share nothing,
    and reading distinct objects from several threads needs no locking.
    """

    def __init__(self, paths: ObjectPaths, oid: str):
        self.paths = paths
        self.oid = oid
        self.state = ReaderState.UNREAD

    def _advance(self, state: ReaderState):
        self.state = max(self.state, state)

    @cached_property
    def raw(self) -> bytes:
        p = self.paths.locate(self.oid)
        data = p.read_bytes()
        logger.debug('read object %s (%d compressed bytes)', self.oid, len(data))
        self._advance(ReaderState.RAW_LOADED)
        return data

    @cached_property
    def data(self) -> bytes:
        data = decompress(self.raw)
        self._advance(ReaderState.DECOMPRESSED)
        return data

    def decode(self) -> bytes:
        return self.data

    @cached_property
    def _parsed(self):
        header, body = split_object(self.data)
        self._advance(ReaderState.HEADER_PARSED)
        return header, body

    @property
    def header(self) -> Header:
        return self._parsed[0]

    @property
    def kind(self) -> str:
        return self.header.kind

    @property
    def size(self) -> int:
        return self.header.size

    @property
    def body(self) -> bytes:
        return self._parsed[1]

    @cached_property
    def _records(self) -> List[Union[str, bytes]]:
        records = []
        for seg in self.data.split(b'\x00'):
            try:
                records.append(seg.decode('utf-8'))
            except UnicodeDecodeError:
                records.append(seg)
        self._advance(ReaderState.RECORDS_PARSED)
        return records

    def text_records(self) -> List[Union[str, bytes]]:
        """Split the whole object on NUL bytes.

        Record 0 is the header text ("blob 12"), the rest come from the body.
        Segments that are not valid UTF-8 are returned as bytes.
        """
        if self.kind not in TEXT_KINDS:
            raise InvalidType(f'{self.oid} is a {self.kind}, not a blob or commit')
        return list(self._records)

    @cached_property
    def _entries(self) -> List[TreeEntry]:
        entries = parse_entries(self.body)
        self._advance(ReaderState.TREE_PARSED)
        return entries

    def entries(self) -> List[TreeEntry]:
        if self.kind != 'tree':
            raise InvalidType(f'{self.oid} is a {self.kind}, not a tree')
        return list(self._entries)

    def verify(self):
        actual = hexdigest(self.data)
        if actual != self.oid:
            raise CorruptObject(f'object {self.oid} hashes to {actual}')

    def to_object(self) -> StoredObject:
        return StoredObject(self.oid, self.kind, self.size, self.body)


class ObjectStore:
    def __init__(self, objects_dir: Path):
        self.objects_dir = Path(objects_dir)
        self.paths = ObjectPaths(self.objects_dir)

    def exists(self, oid: str) -> bool:
        return self.paths.exists(oid)

    def open(self, oid: str) -> ObjectReader:
        return ObjectReader(self.paths, oid)

    def read(self, oid: str, verify: bool = False) -> StoredObject:
        reader = self.open(oid)
        if verify:
            reader.verify()
        return reader.to_object()

    def write(self, kind: str, content: bytes) -> str:
        store = build_header(kind, len(content)) + content
        oid = hexdigest(store)
        dest = self.paths.object_path(oid)
        if dest.exists():
            logger.debug('object %s already stored, skipped', oid)
            return oid
        dest.parent.mkdir(parents=True, exist_ok=True)
        # temp file in the shard dir, renamed into place
        fd, tmp = tempfile.mkstemp(dir=dest.parent, prefix='tmp_obj_')
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(compress(store))
            os.replace(tmp, dest)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        logger.debug('stored %s object %s (%d bytes)', kind, oid, len(content))
        return oid
