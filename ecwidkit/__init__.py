"""Client library and command-line tool for the Ecwid REST API: carts and categories."""

__version__ = "0.1.0"