import json
import pytest
from rooster.lib import serializer
from rooster.lib.entries import PasswordEntry
from rooster.lib.errors import FormatError


def record(**over):
    r = {'name': 'github', 'username': 'alice', 'password': 'p1', 'created_at': 100, 'updated_at': 200}
    r.update(over)
    return r


def doc(records, schema=3):
    return json.dumps({'schema': schema, 'passwords': records}).encode()


def test_encode_decode_roundtrip_is_field_exact():
    entries = [PasswordEntry('github', 'alice', 'p1', 100, 200), PasswordEntry('mail', '', 'pé✓', 5, 5)]
    back = serializer.decode(serializer.encode(entries))
    assert [e.to_record() for e in back] == [e.to_record() for e in entries]


def test_encode_is_schema_tagged():
    data = json.loads(serializer.encode([]))
    assert data == {'schema': 3, 'passwords': []}


def test_decode_rejects_other_schema_version():
    with pytest.raises(FormatError):
        serializer.decode(doc([record()], schema=2))


@pytest.mark.parametrize('data', [
    b'not json',
    b'\xff\xfe',
    b'[]',
    b'{"schema": 3}',
    b'{"schema": true, "passwords": []}',
    b'{"schema": 3, "passwords": [1]}',
    b'{"schema": 3, "schema": 3, "passwords": []}',
])
def test_decode_rejects_malformed_structure(data):
    with pytest.raises(FormatError):
        serializer.decode(data)


@pytest.mark.parametrize('bad', [
    {'name': ''},
    {'name': 7},
    {'username': None},
    {'password': 12},
    {'created_at': -1},
    {'created_at': '100'},
    {'updated_at': True},
    {'updated_at': 50},
    {'extra': 'field'},
])
def test_decode_rejects_bad_records(bad):
    with pytest.raises(FormatError):
        serializer.decode(doc([record(**bad)]))


def test_decode_rejects_missing_field():
    r = record(); del r['password']
    with pytest.raises(FormatError, match='password'):
        serializer.decode(doc([r]))


def test_decode_rejects_duplicate_names():
    with pytest.raises(FormatError, match='Duplicate'):
        serializer.decode(doc([record(), record(username='bob')]))


def test_decode_rejects_duplicate_keys_inside_record():
    data = b'{"schema":3,"passwords":[{"name":"a","name":"b","username":"","password":"","created_at":0,"updated_at":0}]}'
    with pytest.raises(FormatError):
        serializer.decode(data)


def test_parse_returns_raw_legacy_records():
    legacy = [{'app_name': 'github', 'password': 'p1', 'created': '2015-01-01T00:00:00', 'modified': '2015-01-01T00:00:00'}]
    assert serializer.parse(serializer.encode_records(legacy, 1), 1) == legacy
