"""Command-line interface for plumb"""
import argparse
import logging
import sys
from pathlib import Path

from .config import resolve_objects_dir
from .errors import InvalidType, ObjectError
from .objects import ObjectStore, hash_of

logger = logging.getLogger(__name__)

KINDS = ('blob', 'tree', 'commit')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='plumb', description='Read and write loose git objects.')
    parser.add_argument('--git-dir', help='repository directory (default: $GIT_DIR or nearest .git)')
    parser.add_argument('-v', '--verbose', action='count', default=0)
    sub = parser.add_subparsers(dest='cmd', required=True)

    p_show = sub.add_parser('show-object', help='show content, type or size of an object')
    what = p_show.add_mutually_exclusive_group(required=True)
    what.add_argument('-p', '--hash', action='store_const', const='content', dest='what',
                      help='pretty-print the object content')
    what.add_argument('-t', '--type', action='store_const', const='type', dest='what',
                      help='show the object type')
    what.add_argument('-s', '--size', action='store_const', const='size', dest='what',
                      help='show the object size')
    p_show.add_argument('oid', help='object hash')

    p_store = sub.add_parser('store-object', help='compute an object hash, optionally writing it')
    p_store.add_argument('-t', '--type', dest='kind', choices=KINDS, default='blob')
    p_store.add_argument('-w', '--write', action='store_true', help='write the object into the store')
    p_store.add_argument('file')
    return parser


def _setup_logging(verbose: int):
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr, format='%(levelname)s %(name)s: %(message)s')


def _write_record(record):
    if isinstance(record, bytes):
        sys.stdout.flush()
        sys.stdout.buffer.write(record + b'\n')
        sys.stdout.buffer.flush()
    else:
        print(record)


def show_object(store: ObjectStore, oid: str, what: str):
    reader = store.open(oid)
    if what == 'type':
        print(f'{reader.kind} object')
    elif what == 'size':
        print(reader.size)
    elif reader.kind == 'tree':
        for e in reader.entries():
            print(f'{e.mode:06d} {e.kind.object_type or "unknown"} {e.oid}\t{e.name}')
    elif reader.kind in ('blob', 'commit'):
        records = reader.text_records()
        _write_record(records[1] if len(records) > 1 else '')
    else:
        raise InvalidType(f'unknown object kind {reader.kind!r}')


def store_object(store: ObjectStore, path: str, kind: str, write: bool):
    content = Path(path).read_bytes()
    if write:
        oid = store.write(kind, content)
    else:
        oid = hash_of(kind, content)
    print(oid)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    store = ObjectStore(resolve_objects_dir(args.git_dir))
    logger.info('using objects directory %s', store.objects_dir)

    try:
        if args.cmd == 'show-object':
            show_object(store, args.oid, args.what)
            return 0
        if args.cmd == 'store-object':
            store_object(store, args.file, args.kind, args.write)
            return 0
    except ObjectError as e:
        print(f'fatal: {e}', file=sys.stderr)
        return 1
    except OSError as e:
        print(f'fatal: {e.strerror}: {e.filename}', file=sys.stderr)
        return 1

    parser.print_help()
    return 2


if __name__ == '__main__':
    raise SystemExit(main())
