"""Run one command against the password file: open, unlock, execute, sync.

Everything environment-specific (file path, prompts, output) is passed in,
so the pipeline can be driven by click or by tests alike.
"""
from __future__ import annotations
import logging
from pathlib import Path
from rooster.lib.errors import AuthenticationError, FormatError, StoreError
from rooster.lib.secure import SecureBuffer
from rooster.lib.storage import StoreFile
from rooster.lib.store import load
from .handlers import Command, CommandArgs

log = logging.getLogger(__name__)

LOAD_FAILURE_HINT = """I could not open the Rooster file. This could be because:
- your master password is wrong,
- your Rooster file is corrupted,
- your version of Rooster is outdated.
Try upgrading to the latest version of Rooster."""


def ask_new_master_password(ui) -> SecureBuffer | None:
	ui.echo('In order to keep your passwords safe & secure, we encrypt them using a Master Password.')
	ui.echo('The stronger it is, the better your passwords are protected.')
	first = ui.prompt_secret('What would you like it to be?')
	with ui.prompt_secret('Type it again:') as second:
		if first != second:
			first.wipe()
			return None
	return first


def run_command(command: Command, args: CommandArgs, path: Path, ui) -> int:
	storefile = StoreFile(path)
	try:
		data = storefile.read()
	except OSError as e:
		ui.error(f"I can't read your password file at {path} (reason: {e.strerror or e}).")
		return 1
	if data:
		master = ui.prompt_secret('Type your master password:')
	else:
		if not storefile.exists() and not ui.confirm("I can't find your password file. Would you like to create one now?"):
			ui.error("I can't go on without a password file, sorry.")
			return 1
		master = ask_new_master_password(ui)
		if master is None:
			ui.error("Woops, the passwords don't match. No password file was created.")
			return 1
		try:
			path.parent.mkdir(parents=True, exist_ok=True)
		except OSError as e:
			master.wipe()
			ui.error(f'I could not create the directory for {path} (reason: {e.strerror or e}).')
			return 1

	try:
		store = load(master, data)
	except (AuthenticationError, FormatError) as e:
		log.info('Failed to open %s: %s', path, type(e).__name__)
		ui.error(LOAD_FAILURE_HINT)
		return 1
	except StoreError as e:
		ui.error(f'Woops, I could not open your password file (reason: {e}).')
		return 1
	finally:
		master.wipe()

	with store:
		code = command.execute(args, store, ui)
		if code != 0 or not store.needs_sync:
			return code
		try:
			store.sync(storefile.writer())
		except StoreError as e:
			ui.error(f'I could not save the password file (reason: {e}).')
			return 1
	return 0
