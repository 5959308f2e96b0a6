"""Maps object hashes onto the sharded objects directory"""
from pathlib import Path

from .errors import FormatError, NotFound


class ObjectPaths:
    def __init__(self, objects_dir: Path):
        self.objects_dir = Path(objects_dir)

    def object_path(self, oid: str) -> Path:
        # objects/<first two hex chars>/<remaining 38>
        if len(oid) < 2:
            raise FormatError(f'object name too short: {oid!r}')
        return self.objects_dir / oid[:2] / oid[2:]

    def exists(self, oid: str) -> bool:
        return self.object_path(oid).is_file()

    def locate(self, oid: str) -> Path:
        p = self.object_path(oid)
        if not p.is_file():
            raise NotFound(f'no object {oid} at {p}')
        return p
