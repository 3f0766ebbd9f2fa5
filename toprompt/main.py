# toprompt/main.py
"""Main entry point for the toprompt CLI application."""

from toprompt.cli.interface import main_cli


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli(prog_name="toprompt")

if __name__ == '__main__':
    entrypoint()
