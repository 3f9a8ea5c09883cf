"""Command handlers and the registry the CLI dispatches through.

Each handler takes the parsed arguments, the open store and a console, and
returns an exit code. Handlers never touch the file; the runner syncs the
store afterwards if it changed.
"""
from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Dict, List
from config.settings import DEFAULT_PASSWORD_LENGTH
from rooster.lib.entries import PasswordEntry
from rooster.lib.errors import DuplicateNameError, InvalidNameError, NotFoundError
from rooster.lib.generate import generate_password
from rooster.lib.secure import SecureBuffer
from rooster.lib.store import PasswordStore, check_name


@dataclass
class CommandArgs:
	free: List[str] = field(default_factory=list)
	alnum: bool = False
	length: int = DEFAULT_PASSWORD_LENGTH


class Command:
	name = ''
	summary = ''
	usage: tuple = ()
	example = ''
	nargs = 0

	def help(self) -> str:
		lines = [self.summary, '', 'Usage:'] + [f'    rooster {u}' for u in self.usage]
		if self.example:
			lines += ['', 'Example:', f'    rooster {self.example}']
		return '\n'.join(lines)

	def execute(self, args: CommandArgs, store: PasswordStore, ui) -> int:
		if len(args.free) < self.nargs:
			ui.error(f'Woops, some arguments are missing here. For help, try:\n    rooster {self.name} --help')
			return 1
		try:
			return self.run(args, store, ui)
		except (NotFoundError, DuplicateNameError, InvalidNameError) as e:
			ui.error(f'Woops! {e}.')
			return 1

	def run(self, args: CommandArgs, store: PasswordStore, ui) -> int:
		raise NotImplementedError


def _show_entry(ui, entry: PasswordEntry):
	ui.echo(f'Username: {entry.username}')
	ui.echo(f'Password: {entry.password.text()}')


class GetCommand(Command):
	name, summary, nargs = 'get', 'Retrieve a password', 1
	usage, example = ('get <app_name>',), 'get youtube'

	def run(self, args, store, ui):
		_show_entry(ui, store.get(args.free[0]))
		return 0


class AddCommand(Command):
	name, summary, nargs = 'add', 'Add a new password manually', 2
	usage, example = ('add <app_name> <username>',), 'add youtube me@example.com'

	def run(self, args, store, ui):
		app, username = args.free[0], args.free[1]
		check_name(app)
		if app in store:
			raise DuplicateNameError(app)
		password = ui.prompt_secret(f'What password do you want for {app}?')
		store.add(PasswordEntry(app, username, password))
		ui.echo(f'Done! The password for {app} has been added.')
		return 0


class DeleteCommand(Command):
	name, summary, nargs = 'delete', 'Delete a password', 1
	usage, example = ('delete <app_name>',), 'delete youtube'

	def run(self, args, store, ui):
		entry = store.delete(args.free[0])
		entry.wipe()
		ui.echo(f'Done! The password for {entry.name} has been deleted.')
		return 0


class GenerateCommand(Command):
	name, summary, nargs = 'generate', 'Generate a password', 2
	usage, example = ('generate <app_name> <username>', '--alnum --length 16 generate <app_name> <username>'), 'generate youtube me@example.com'

	def run(self, args, store, ui):
		app, username = args.free[0], args.free[1]
		check_name(app)
		if app in store:
			raise DuplicateNameError(app)
		entry = PasswordEntry(app, username, generate_password(args.length, args.alnum))
		store.add(entry)
		ui.echo(f'Done! A password for {app} has been generated.')
		_show_entry(ui, entry)
		return 0


class RegenerateCommand(Command):
	name, summary, nargs = 'regenerate', 'Re-generate a previously existing password', 1
	usage, example = ('regenerate <app_name>',), 'regenerate youtube'

	def run(self, args, store, ui):
		def regenerate(entry: PasswordEntry) -> PasswordEntry:
			entry.password.wipe()
			entry.password = generate_password(args.length, args.alnum)
			return entry
		entry = store.change_password(args.free[0], regenerate)
		ui.echo(f'Done! The password for {entry.name} has been regenerated.')
		_show_entry(ui, entry)
		return 0


class ListCommand(Command):
	name, summary = 'list', 'List all apps and usernames'
	usage = ('list',)

	def run(self, args, store, ui):
		rows = store.list()
		if not rows:
			ui.echo('No passwords on record yet. Add one with `rooster add <app> <username>`.')
			return 0
		width = max(len(name) for name, _ in rows)
		for name, username in rows:
			ui.echo(f'{name.ljust(width)}  {username}')
		return 0


class ExportCommand(Command):
	name, summary = 'export', 'Dump all passwords in unencrypted JSON'
	usage = ('export > passwords.json',)

	def help(self) -> str:
		return super().help() + '\n\nWARNING: the output contains every password in clear text.'

	def run(self, args, store, ui):
		ui.error('Warning: the export below is NOT encrypted.')
		ui.echo(json.dumps({'passwords': store.export()}, indent=2))
		return 0


class ChangeMasterPasswordCommand(Command):
	name, summary = 'change-master-password', 'Change your master password'
	usage = ('change-master-password',)

	def run(self, args, store, ui):
		with ui.prompt_secret('Type your new master password:') as first, \
			ui.prompt_secret('Type it again:') as second:
			if first != second:
				ui.error("Woops, the passwords don't match. Your master password was not changed.")
				return 1
			store.change_master_password(first)
		ui.echo('Done! Your master password has been changed.')
		return 0


class RenameCommand(Command):
	name, summary, nargs = 'rename', 'Rename the app for a password', 2
	usage, example = ('rename <old_name> <new_name>',), 'rename youtube Youtube'

	def run(self, args, store, ui):
		old, new = args.free[0], args.free[1]
		store.rename(old, new)
		ui.echo(f'Done! {old} has been renamed to {new}.')
		return 0


class ChangeCommand(Command):
	name, summary, nargs = 'change', 'Change a password manually', 1
	usage, example = ('change <app_name>',), 'change youtube'

	def run(self, args, store, ui):
		app = args.free[0]
		store.get(app)
		password: SecureBuffer = ui.prompt_secret(f'What is the new password for {app}?')

		def change(entry: PasswordEntry) -> PasswordEntry:
			entry.password.wipe()
			entry.password = password
			return entry
		store.change_password(app, change)
		ui.echo(f'Done! The password for {app} has been changed.')
		return 0


class SearchCommand(Command):
	name, summary, nargs = 'search', 'Search for a specific password', 1
	usage, example = ('search <query>',), 'search tube'

	def run(self, args, store, ui):
		hits = store.search(args.free[0])
		if not hits:
			ui.echo(f'No app or username matches {args.free[0]!r}.')
			return 0
		width = max(len(e.name) for e in hits)
		for e in hits:
			ui.echo(f'{e.name.ljust(width)}  {e.username}')
		return 0


COMMANDS: Dict[str, Command] = {c.name: c for c in (
	GetCommand(), AddCommand(), DeleteCommand(), GenerateCommand(), RegenerateCommand(),
	ListCommand(), ExportCommand(), ChangeMasterPasswordCommand(), RenameCommand(),
	ChangeCommand(), SearchCommand(),
)}


def command_from_name(name: str) -> Command | None:
	return COMMANDS.get(name)
