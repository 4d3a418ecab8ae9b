import logging
from click.testing import CliRunner
from passtool.cli.commands import cli
from passtool.main import configure_logging

def test_cli_help():
	r = CliRunner().invoke(cli, ['--help'])
	assert r.exit_code == 0
	for cmd in ('init', 'add', 'get', 'list', 'describe', 'rename', 'remove', 'generate'):
		assert cmd in r.output

def test_configure_logging(monkeypatch):
	calls = {}
	monkeypatch.setattr(logging, 'basicConfig', lambda **kw: calls.update(kw))
	configure_logging('DEBUG')
	assert calls['level'] == logging.DEBUG
	configure_logging('nonsense')
	assert calls['level'] == logging.WARNING
