import copy
import pickle
import pytest
from rooster.lib.secure import SecureBuffer


def test_repr_and_str_do_not_leak():
    buf = SecureBuffer.from_str('hunter2')
    assert 'hunter2' not in repr(buf)
    assert 'hunter2' not in str(buf)
    assert '7 bytes' in repr(buf)


def test_wipe_zeroes_and_empties():
    buf = SecureBuffer(b'secret')
    buf.wipe()
    assert buf.wiped
    assert buf.reveal() == b''
    assert len(buf) == 0


def test_copy_is_independent():
    buf = SecureBuffer(b'secret')
    other = buf.copy()
    assert other == buf and other is not buf
    buf.wipe()
    assert other.reveal() == b'secret'
    assert copy.deepcopy(other).reveal() == b'secret'


def test_replace_swaps_payload():
    buf = SecureBuffer(b'old')
    buf.replace(b'newer')
    assert buf.text() == 'newer'


def test_context_manager_wipes_on_exit_even_on_error():
    with pytest.raises(RuntimeError):
        with SecureBuffer(b'secret') as buf:
            raise RuntimeError('boom')
    assert buf.wiped


def test_equality_and_unhashable():
    assert SecureBuffer(b'a') == SecureBuffer(b'a')
    assert SecureBuffer(b'a') != SecureBuffer(b'b')
    with pytest.raises(TypeError):
        hash(SecureBuffer(b'a'))


def test_cannot_be_pickled():
    with pytest.raises(TypeError):
        pickle.dumps(SecureBuffer(b'secret'))
