from click.testing import CliRunner
from rooster.cli.commands import cli


def test_unknown_command():
    r = CliRunner().invoke(cli, ['frobnicate'])
    assert r.exit_code != 0
    assert 'frobnicate' in r.output


def test_missing_argument_is_usage_error():
    r = CliRunner().invoke(cli, ['get'])
    assert r.exit_code == 2


def test_no_home_and_no_env(monkeypatch):
    monkeypatch.delenv('ROOSTER_FILE', raising=False)
    monkeypatch.setattr('rooster.cli.commands._home', lambda: None)
    r = CliRunner().invoke(cli, ['list'])
    assert r.exit_code == 1
    assert 'ROOSTER_FILE' in r.output
