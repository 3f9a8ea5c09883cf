import json
import pytest
from rooster.cli.handlers import COMMANDS, CommandArgs, command_from_name
from rooster.lib.entries import PasswordEntry
from rooster.lib.secure import SecureBuffer
from rooster.lib.store import PasswordStore, StoreState

EXPECTED = {'get', 'add', 'delete', 'generate', 'regenerate', 'list', 'export',
            'change-master-password', 'rename', 'change', 'search'}


class FakeConsole:
    def __init__(self, *secrets, confirm=True):
        self.secrets = list(secrets)
        self.out, self.err = [], []
        self._confirm = confirm

    def echo(self, msg):
        self.out.append(msg)

    def error(self, msg):
        self.err.append(msg)

    def prompt_secret(self, msg):
        return SecureBuffer.from_str(self.secrets.pop(0))

    def confirm(self, msg):
        return self._confirm

    @property
    def text(self):
        return '\n'.join(self.out)


@pytest.fixture
def store():
    s = PasswordStore(b's' * 32, SecureBuffer(b'k' * 32), state=StoreState.LOADED)
    s.add(PasswordEntry('github', 'alice', 'p1'))
    s.state = StoreState.LOADED
    return s


def run(name, store, *free, ui=None, **opts):
    ui = ui or FakeConsole()
    code = COMMANDS[name].execute(CommandArgs(list(free), **opts), store, ui)
    return code, ui


def test_registry_has_every_command():
    assert set(COMMANDS) == EXPECTED
    assert command_from_name('nope') is None
    for name, cmd in COMMANDS.items():
        assert cmd.name == name
        assert 'Usage:' in cmd.help()
    assert 'clear text' in COMMANDS['export'].help()


def test_get(store):
    code, ui = run('get', store, 'github')
    assert code == 0 and 'alice' in ui.text and 'p1' in ui.text
    assert not store.needs_sync


def test_get_missing_reports_name(store):
    code, ui = run('get', store, 'gitlab')
    assert code == 1 and 'gitlab' in ui.err[0]


def test_missing_arguments(store):
    code, ui = run('add', store, 'only-app')
    assert code == 1 and 'missing' in ui.err[0]


def test_add(store):
    code, _ = run('add', store, 'mail', 'bob', ui=FakeConsole('s3cret'))
    assert code == 0
    assert store.get('mail').password.text() == 's3cret'
    assert store.needs_sync


def test_add_duplicate_does_not_prompt(store):
    ui = FakeConsole()
    code, ui = run('add', store, 'github', 'bob', ui=ui)
    assert code == 1 and 'github' in ui.err[0]


def test_delete(store):
    code, ui = run('delete', store, 'github')
    assert code == 0 and 'github' not in store
    code, ui = run('delete', store, 'github')
    assert code == 1


def test_generate(store):
    code, ui = run('generate', store, 'mail', 'bob', alnum=True, length=16)
    assert code == 0
    password = store.get('mail').password.text()
    assert len(password) == 16 and password.isalnum()
    assert password in ui.text


def test_regenerate(store):
    created = store.get('github').created_at
    code, ui = run('regenerate', store, 'github', length=20)
    e = store.get('github')
    assert code == 0 and len(e.password) == 20 and e.password.text() != 'p1'
    assert e.created_at == created


def test_list_and_search(store):
    store.add(PasswordEntry('mail', 'bob', 'x'))
    code, ui = run('list', store)
    assert code == 0 and 'github' in ui.text and 'mail' in ui.text
    assert 'p1' not in ui.text
    code, ui = run('search', store, 'BOB')
    assert code == 0 and 'mail' in ui.text and 'github' not in ui.text
    code, ui = run('search', store, 'zzz')
    assert code == 0 and 'No app' in ui.text


def test_list_empty():
    s = PasswordStore(b's' * 32, SecureBuffer(b'k' * 32))
    code, ui = run('list', s)
    assert code == 0 and 'No passwords' in ui.text


def test_export_dumps_cleartext_json(store):
    code, ui = run('export', store)
    assert code == 0
    data = json.loads(ui.text)
    assert data['passwords'][0]['password'] == 'p1'
    assert 'NOT encrypted' in ui.err[0]


def test_rename(store):
    code, _ = run('rename', store, 'github', 'gitlab')
    assert code == 0 and store.list() == [('gitlab', 'alice')]


def test_change(store):
    code, _ = run('change', store, 'github', ui=FakeConsole('p2'))
    assert code == 0 and store.get('github').password.text() == 'p2'


def test_change_missing_does_not_prompt(store):
    code, ui = run('change', store, 'nope', ui=FakeConsole())
    assert code == 1


def test_change_master_password(store):
    code, _ = run('change-master-password', store, ui=FakeConsole('new', 'new'))
    assert code == 0 and store.needs_sync
    data = store.to_bytes()
    assert PasswordStore.from_input(SecureBuffer(b'new'), data).get('github').password.text() == 'p1'


def test_change_master_password_mismatch(store):
    code, ui = run('change-master-password', store, ui=FakeConsole('new', 'other'))
    assert code == 1 and not store.needs_sync
