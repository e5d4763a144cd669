"""Allow running as `python -m gist_conceal`."""

from gist_conceal.cli.main import main

main()
