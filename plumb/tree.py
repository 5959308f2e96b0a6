"""Binary tree-object entries: (mode, name, 20-byte oid) records"""
import enum
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .compression import DIGEST_SIZE
from .errors import FormatError, TruncatedEntry


class EntryKind(enum.Enum):
    REGULAR_FILE = 'regular-file'
    EXECUTABLE = 'executable-file'
    DIRECTORY = 'directory'
    SYMLINK = 'symlink'
    SUBMODULE = 'submodule'
    OTHER = 'other'

    @classmethod
    def from_mode(cls, mode: int) -> 'EntryKind':
        return _KIND_BY_MODE.get(mode, cls.OTHER)

    @property
    def object_type(self) -> Optional[str]:
        """Type of the object the entry points at, None for unknown modes."""
        return _OBJECT_TYPE.get(self)


_KIND_BY_MODE = {
    100644: EntryKind.REGULAR_FILE,
    100755: EntryKind.EXECUTABLE,
    40000: EntryKind.DIRECTORY,
    120000: EntryKind.SYMLINK,
    160000: EntryKind.SUBMODULE,
}

_OBJECT_TYPE = {
    EntryKind.REGULAR_FILE: 'blob',
    EntryKind.EXECUTABLE: 'blob',
    EntryKind.SYMLINK: 'blob',
    EntryKind.DIRECTORY: 'tree',
    EntryKind.SUBMODULE: 'commit',
}


@dataclass(frozen=True)
class TreeEntry:
    mode: int
    name: str
    oid: str

    @property
    def kind(self) -> EntryKind:
        return EntryKind.from_mode(self.mode)

    @property
    def mode_text(self) -> str:
        """Mode as git writes it in a tree body, e.g. '100644' or '40000'."""
        return str(self.mode)


def _parse_mode(raw: bytes) -> int:
    if not raw.isdigit():
        raise FormatError(f'tree entry mode is not numeric: {raw!r}')
    return int(raw)


def parse_entries(body: bytes) -> List[TreeEntry]:
    entries = []
    pos, end = 0, len(body)
    while pos < end:
        sp = body.find(b' ', pos)
        if sp == -1:
            raise TruncatedEntry(f'tree entry at offset {pos} has no mode terminator')
        mode = _parse_mode(body[pos:sp])

        nul = body.find(b'\x00', sp + 1)
        if nul == -1:
            raise TruncatedEntry(f'tree entry at offset {pos} has no name terminator')
        name = body[sp + 1:nul].decode('utf-8', errors='surrogateescape')

        # the oid is raw binary and may itself contain space or NUL bytes
        start = nul + 1
        raw_oid = body[start:start + DIGEST_SIZE]
        if len(raw_oid) != DIGEST_SIZE:
            raise TruncatedEntry(
                f'tree entry {name!r} has {len(raw_oid)} of {DIGEST_SIZE} oid bytes')
        entries.append(TreeEntry(mode, name, raw_oid.hex()))
        pos = start + DIGEST_SIZE
    return entries


def build_entries(entries: Iterable[TreeEntry]) -> bytes:
    out = []
    for e in entries:
        if e.mode < 0:
            raise FormatError(f'tree entry {e.name!r} has a negative mode')
        if '\x00' in e.name:
            raise FormatError(f'tree entry name contains NUL: {e.name!r}')
        try:
            raw_oid = bytes.fromhex(e.oid)
        except ValueError:
            raise FormatError(f'tree entry {e.name!r} has a non-hex oid: {e.oid!r}') from None
        if len(raw_oid) != DIGEST_SIZE:
            raise FormatError(f'tree entry {e.name!r} oid is not {DIGEST_SIZE} bytes')
        out.append(e.mode_text.encode('ascii') + b' ')
        out.append(e.name.encode('utf-8', errors='surrogateescape') + b'\x00')
        out.append(raw_oid)
    return b''.join(out)
