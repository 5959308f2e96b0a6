"""Locating the objects directory from options, environment and cwd"""
import os
from pathlib import Path
from typing import Mapping, Optional

GIT_DIR = '.git'
OBJECTS = 'objects'


def find_git_dir(start: Path) -> Optional[Path]:
    p = Path(start).resolve()
    for candidate in (p, *p.parents):
        if (candidate / GIT_DIR).is_dir():
            return candidate / GIT_DIR
    return None


def resolve_objects_dir(git_dir: Optional[str] = None,
                        environ: Optional[Mapping[str, str]] = None,
                        cwd: Optional[Path] = None) -> Path:
    """Pick the objects directory.

    Order: explicit git dir, $GIT_OBJECT_DIRECTORY, $GIT_DIR, the nearest
    enclosing .git directory, and finally ./.git/objects (created on write).
    """
    env = os.environ if environ is None else environ
    cwd = Path.cwd() if cwd is None else Path(cwd)
    if git_dir:
        return Path(git_dir) / OBJECTS
    if env.get('GIT_OBJECT_DIRECTORY'):
        return Path(env['GIT_OBJECT_DIRECTORY'])
    if env.get('GIT_DIR'):
        return Path(env['GIT_DIR']) / OBJECTS
    found = find_git_dir(cwd)
    if found is not None:
        return found / OBJECTS
    return cwd / GIT_DIR / OBJECTS
