"""Subcommands of the ``smf`` command line."""
