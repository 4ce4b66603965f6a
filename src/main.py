"""Main entry point for task-cli.

Configures logging from the environment, then runs exactly one command.
"""
from cli import cli
from config import log_file, log_level
from logging_setup import setup_logging


def main():
    setup_logging(console_level=log_level(), log_file=log_file())
    cli(prog_name='task-cli')

if __name__ == "__main__":
    main()
