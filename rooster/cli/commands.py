"""CLI commands implemented with click.

click only parses arguments and talks to the terminal; every command is
handed to the matching handler in `handlers.COMMANDS` through `run_command`.
"""
from __future__ import annotations
import os, logging, click
from pathlib import Path
from config.settings import DEFAULT_PASSWORD_LENGTH, ROOSTER_FILE_ENV_VAR, ConfigError, resolve_store_path, resolve_log_level
from rooster import __version__
from rooster.lib.secure import SecureBuffer
from .handlers import COMMANDS, CommandArgs
from .runner import run_command


class ClickConsole:
	def echo(self, msg: str):
		click.echo(msg)

	def error(self, msg: str):
		click.echo(msg, err=True)

	def prompt_secret(self, msg: str) -> SecureBuffer:
		return SecureBuffer.from_str(click.prompt(msg, hide_input=True, prompt_suffix=' ', err=True))

	def confirm(self, msg: str) -> bool:
		return click.confirm(msg, err=True)


def _help(name: str) -> str:
	# \b keeps click from re-wrapping the usage blocks
	return '\n\n'.join('\b\n' + p for p in COMMANDS[name].help().split('\n\n'))


def _home() -> Path | None:
	try:
		return Path.home()
	except RuntimeError:
		return None


@click.group(epilog=f'You may override the password file path with the ${ROOSTER_FILE_ENV_VAR} environment variable.')
@click.option('-a', '--alnum', is_flag=True, help='Only use alpha numeric (a-z, A-Z, 0-9) in generated passwords.')
@click.option('-l', '--length', type=click.IntRange(min=1), default=DEFAULT_PASSWORD_LENGTH, show_default=True, help='Length of generated passwords.')
@click.version_option(__version__, '-v', '--version', prog_name='rooster')
@click.pass_context
def cli(ctx, alnum, length):
	"""Rooster, the simple password manager for geeks."""
	logging.basicConfig(level=resolve_log_level(), format='%(levelname)s %(name)s: %(message)s')
	try:
		path = resolve_store_path(os.environ, _home())
	except ConfigError as e:
		click.echo(f'Woops, I could not determine where your password file is. {e}.', err=True)
		ctx.exit(1)
	ctx.obj = {'path': path, 'alnum': alnum, 'length': length}


def _dispatch(ctx, name: str, *free: str):
	obj = ctx.obj
	args = CommandArgs(list(free), alnum=obj['alnum'], length=obj['length'])
	ctx.exit(run_command(COMMANDS[name], args, obj['path'], ClickConsole()))


@cli.command('get', help=_help('get'))
@click.argument('app_name')
@click.pass_context
def get(ctx, app_name):
	_dispatch(ctx, 'get', app_name)

@cli.command('add', help=_help('add'))
@click.argument('app_name')
@click.argument('username')
@click.pass_context
def add(ctx, app_name, username):
	_dispatch(ctx, 'add', app_name, username)

@cli.command('delete', help=_help('delete'))
@click.argument('app_name')
@click.pass_context
def delete(ctx, app_name):
	_dispatch(ctx, 'delete', app_name)

@cli.command('generate', help=_help('generate'))
@click.argument('app_name')
@click.argument('username')
@click.pass_context
def generate(ctx, app_name, username):
	_dispatch(ctx, 'generate', app_name, username)

@cli.command('regenerate', help=_help('regenerate'))
@click.argument('app_name')
@click.pass_context
def regenerate(ctx, app_name):
	_dispatch(ctx, 'regenerate', app_name)

@cli.command('list', help=_help('list'))
@click.pass_context
def list_entries(ctx):
	_dispatch(ctx, 'list')

@cli.command('export', help=_help('export'))
@click.pass_context
def export(ctx):
	_dispatch(ctx, 'export')

@cli.command('change-master-password', help=_help('change-master-password'))
@click.pass_context
def change_master_password(ctx):
	_dispatch(ctx, 'change-master-password')

@cli.command('rename', help=_help('rename'))
@click.argument('old_name')
@click.argument('new_name')
@click.pass_context
def rename(ctx, old_name, new_name):
	_dispatch(ctx, 'rename', old_name, new_name)

@cli.command('change', help=_help('change'))
@click.argument('app_name')
@click.pass_context
def change(ctx, app_name):
	_dispatch(ctx, 'change', app_name)

@cli.command('search', help=_help('search'))
@click.argument('query')
@click.pass_context
def search(ctx, query):
	_dispatch(ctx, 'search', query)
