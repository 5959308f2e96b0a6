import zlib

import pytest

from plumb.errors import CompressionError, CorruptObject, FormatError, InvalidType, NotFound
from plumb.objects import ObjectStore, ReaderState, hash_of
from plumb.tree import EntryKind, TreeEntry, build_entries

HOGE = 'c2684e0321eedff1890b7690c89726387d2af3ca'


def _plant(store, oid, data, raw=False):
    # put arbitrary bytes at the path an oid maps to
    p = store.paths.object_path(oid)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data if raw else zlib.compress(data))


def test_known_vector():
    assert hash_of('blob', b'hoge') == HOGE


def test_hash_depends_on_kind():
    assert hash_of('blob', b'hoge') != hash_of('commit', b'hoge')


@pytest.mark.parametrize('kind', ['blob', 'tree', 'commit'])
def test_round_trip(tmp_path, kind):
    store = ObjectStore(tmp_path)
    content = b'' if kind == 'tree' else b'some content\n'
    oid = store.write(kind, content)
    obj = store.read(oid, verify=True)
    assert obj.kind == kind
    assert obj.body == content
    assert obj.size == len(content)
    assert obj.oid == oid == hash_of(kind, content)


def test_write_layout_is_zlib_of_header_and_content(tmp_path):
    store = ObjectStore(tmp_path)
    oid = store.write('blob', b'hoge')
    assert oid == HOGE
    p = tmp_path / 'c2' / '684e0321eedff1890b7690c89726387d2af3ca'
    assert zlib.decompress(p.read_bytes()) == b'blob 4\x00hoge'
    assert [f.name for f in p.parent.iterdir()] == [p.name]


def test_write_uses_caller_kind(tmp_path):
    store = ObjectStore(tmp_path)
    body = build_entries([TreeEntry(100644, 'a.txt', HOGE)])
    oid = store.write('tree', body)
    data = zlib.decompress(store.paths.locate(oid).read_bytes())
    assert data.startswith(b'tree %d\x00' % len(body))
    assert store.open(oid).kind == 'tree'


def test_write_is_idempotent(tmp_path):
    store = ObjectStore(tmp_path)
    first = store.write('blob', b'hello')
    p = store.paths.locate(first)
    before = p.read_bytes()
    mtime = p.stat().st_mtime_ns
    assert store.write('blob', b'hello') == first
    assert p.read_bytes() == before
    assert p.stat().st_mtime_ns == mtime


def test_write_tolerates_existing_shard_dir(tmp_path):
    store = ObjectStore(tmp_path)
    (tmp_path / HOGE[:2]).mkdir()
    assert store.write('blob', b'hoge') == HOGE
    assert store.exists(HOGE)


def test_binary_blob(tmp_path):
    store = ObjectStore(tmp_path)
    content = bytes(range(256))
    oid = store.write('blob', content)
    reader = store.open(oid)
    assert reader.body == content
    records = reader.text_records()
    assert records[0] == 'blob 256'
    # body split on its single NUL byte; the tail is not valid UTF-8
    assert records[1] == ''
    assert isinstance(records[2], bytes)
    assert b''.join(r if isinstance(r, bytes) else r.encode() for r in records[1:]) == content[1:]


def test_commit_text_records(tmp_path):
    store = ObjectStore(tmp_path)
    content = b'tree ' + HOGE.encode() + b'\n\nmessage\n'
    reader = store.open(store.write('commit', content))
    assert reader.text_records() == ['commit %d' % len(content), content.decode()]


def test_reader_states_and_caching(tmp_path):
    store = ObjectStore(tmp_path)
    oid = store.write('tree', build_entries([TreeEntry(40000, 'dir', HOGE)]))
    reader = store.open(oid)
    assert reader.state is ReaderState.UNREAD
    reader.decode()
    assert reader.state is ReaderState.DECOMPRESSED
    assert reader.kind == 'tree'
    assert reader.state is ReaderState.HEADER_PARSED
    entries = reader.entries()
    assert reader.state is ReaderState.TREE_PARSED
    assert entries[0].kind is EntryKind.DIRECTORY

    # later calls are served from the cache, even with the file gone
    store.paths.locate(oid).unlink()
    assert reader.entries() == entries
    assert reader.size == reader.header.size


def test_entries_on_blob_is_invalid(tmp_path):
    store = ObjectStore(tmp_path)
    reader = store.open(store.write('blob', b'hoge'))
    with pytest.raises(InvalidType):
        reader.entries()


def test_text_records_on_tree_is_invalid(tmp_path):
    store = ObjectStore(tmp_path)
    reader = store.open(store.write('tree', b''))
    with pytest.raises(InvalidType):
        reader.text_records()


def test_missing_object(tmp_path):
    store = ObjectStore(tmp_path)
    assert not store.exists(HOGE)
    with pytest.raises(NotFound):
        store.read(HOGE)


def test_malformed_zlib(tmp_path):
    store = ObjectStore(tmp_path)
    _plant(store, HOGE, b'not zlib at all', raw=True)
    with pytest.raises(CompressionError):
        store.read(HOGE)


def test_declared_size_mismatch(tmp_path):
    store = ObjectStore(tmp_path)
    _plant(store, HOGE, b'blob 9\x00hoge')
    with pytest.raises(CorruptObject):
        store.open(HOGE).size


def test_malformed_header(tmp_path):
    store = ObjectStore(tmp_path)
    _plant(store, HOGE, b'blob4hoge')
    with pytest.raises(FormatError):
        store.open(HOGE).kind


def test_verify_detects_wrong_content(tmp_path):
    store = ObjectStore(tmp_path)
    _plant(store, HOGE, b'blob 4\x00fuga')
    assert store.read(HOGE).body == b'fuga'
    with pytest.raises(CorruptObject):
        store.read(HOGE, verify=True)
