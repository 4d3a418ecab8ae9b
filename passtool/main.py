"""Program entry point (CLI dispatcher).

Configures logging once, then hands over to the click group.
"""
from __future__ import annotations
import logging
from config.settings import LOG_LEVEL, LOG_FORMAT
from passtool.cli.commands import cli

def configure_logging(level: str = LOG_LEVEL) -> None:
	numeric = logging.getLevelName(level.upper())
	if not isinstance(numeric, int):
		numeric = logging.WARNING
	logging.basicConfig(level=numeric, format=LOG_FORMAT)

def main():  # pragma: no cover - thin wrapper
	configure_logging()
	cli()

if __name__ == '__main__':  # pragma: no cover
	main()
