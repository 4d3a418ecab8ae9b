"""CLI commands implemented with click.

Every command opens the table file, performs one operation and, for
mutations, saves the table straight away.
"""
from __future__ import annotations
import os, click
from pathlib import Path
from config.settings import DEFAULT_STORE_PATH, GENERATOR_DEFAULT_LENGTH
from passtool.lib.crypto import CryptoError
from passtool.lib.generator import generate_password
from passtool.lib.store import PassTable, Metadata, AlreadyExists, TableError, StorageError

def store_path() -> Path:
	# Resolved per call so tests can point PASSTOOL_PATH elsewhere
	env_path = os.environ.get('PASSTOOL_PATH')
	return Path(env_path) if env_path else DEFAULT_STORE_PATH

def fail(e: Exception):
	click.echo(f'Error: {e}')
	raise SystemExit(1)

def open_table() -> PassTable:
	try:
		return PassTable.open(store_path())
	except StorageError as e:
		fail(e)

def save_table(table: PassTable):
	try:
		table.save(store_path())
	except StorageError as e:
		fail(e)

@click.group()
def cli():
	"""passtool: passphrase-protected password table"""

@cli.command()
@click.option('--force', is_flag=True, help='Overwrite an existing table file.')
def init(force):
	"""Create an empty password table."""
	path = store_path()
	if path.exists() and not force:
		fail(StorageError(f'{path} already exists (use --force to recreate)'))
	save_table(PassTable())
	click.echo(f'Table created at {path}.')

@cli.command()
@click.argument('name')
@click.option('--description', default='', help='Free-text description.')
@click.option('--app', 'apps', multiple=True, help='Affiliated application (repeatable).')
@click.option('--generate', is_flag=True, help='Generate the password instead of prompting.')
@click.option('--length', default=GENERATOR_DEFAULT_LENGTH, show_default=True, help='Generated password length.')
@click.option('--no-letters', is_flag=True)
@click.option('--no-digits', is_flag=True)
@click.option('--special', is_flag=True, help='Include punctuation in generated passwords.')
@click.option('--key', prompt=True, hide_input=True, confirmation_prompt=True, help='Passphrase protecting this entry.')
def add(name, description, apps, generate, length, no_letters, no_digits, special, key):
	"""Add a password under NAME."""
	table = open_table()
	if generate:
		try:
			password = generate_password(length, letters=not no_letters, digits=not no_digits, special=special)
		except ValueError as e:
			fail(e)
	else:
		password = click.prompt('Password', hide_input=True)
	try:
		table.add_password(name, password, key, Metadata(description, set(apps)))
	except (TableError, CryptoError) as e:
		fail(e)
	save_table(table)
	click.echo(f'Added "{name}".')
	if generate:
		click.echo(password)

@cli.command()
@click.argument('name')
@click.option('--key', prompt=True, hide_input=True)
def get(name, key):
	"""Print the password stored under NAME."""
	table = open_table()
	try:
		click.echo(table.get_password(name, key))
	except TableError as e:
		fail(e)

@cli.command('list')
def list_entries():
	"""List entries with their description and apps (no passphrase needed)."""
	table = open_table()
	for name in table.sorted_names():
		meta = table.get_metadata(name)
		apps = ', '.join(sorted(meta.apps)) or '-'
		click.echo(f"{name}: {meta.description or '-'} [{apps}]")

@cli.command()
@click.argument('name')
@click.option('--description', default=None, help='New description (kept if omitted).')
@click.option('--app', 'apps', multiple=True, help='Replace affiliated apps (repeatable).')
def describe(name, description, apps):
	"""Update the metadata of NAME; the password is untouched."""
	table = open_table()
	try:
		current = table.get_metadata(name)
		table.update_metadata(name, Metadata(
			current.description if description is None else description,
			set(apps) if apps else set(current.apps)
		))
	except TableError as e:
		fail(e)
	save_table(table)
	click.echo(f'Updated "{name}".')

@cli.command()
@click.argument('old')
@click.argument('new')
@click.option('--key', prompt=True, hide_input=True)
def rename(old, new, key):
	"""Rename OLD to NEW (decrypts with the key and re-adds)."""
	table = open_table()
	try:
		if table.contains(new):
			raise AlreadyExists(new)
		password = table.get_password(old, key)
		meta = table.get_metadata(old)
		table.remove(old)
		table.add_password(new, password, key, meta)
	except (TableError, CryptoError) as e:
		fail(e)
	save_table(table)
	click.echo(f'Renamed "{old}" to "{new}".')

@cli.command()
@click.argument('name')
def remove(name):
	"""Remove NAME from the table."""
	table = open_table()
	try:
		table.remove(name)
	except TableError as e:
		fail(e)
	save_table(table)
	click.echo(f'Removed "{name}".')

@cli.command('generate')
@click.option('--length', default=GENERATOR_DEFAULT_LENGTH, show_default=True)
@click.option('--no-letters', is_flag=True)
@click.option('--no-digits', is_flag=True)
@click.option('--special', is_flag=True)
def generate_cmd(length, no_letters, no_digits, special):
	"""Print a random password."""
	try:
		click.echo(generate_password(length, letters=not no_letters, digits=not no_digits, special=special))
	except ValueError as e:
		fail(e)
