import string
import pytest
from config.settings import PASSWORD_SYMBOLS
from rooster.lib.generate import generate_password


def test_default_password_has_every_class():
    pw = generate_password().text()
    assert len(pw) == 32
    assert any(c in string.ascii_lowercase for c in pw)
    assert any(c in string.ascii_uppercase for c in pw)
    assert any(c in string.digits for c in pw)
    assert any(c in PASSWORD_SYMBOLS for c in pw)


def test_alnum_password_has_no_symbols():
    for _ in range(20):
        pw = generate_password(16, alnum=True).text()
        assert len(pw) == 16
        assert pw.isalnum()


def test_short_lengths_are_allowed():
    assert len(generate_password(1)) == 1
    assert len(generate_password(2, alnum=True)) == 2


def test_passwords_differ():
    assert generate_password() != generate_password()


@pytest.mark.parametrize('length', [0, -3])
def test_invalid_length(length):
    with pytest.raises(ValueError):
        generate_password(length)
