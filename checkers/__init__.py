"""Checkers rules, bech32 addresses, stored-game records and an in-memory state keeper."""

__version__ = "0.1.0"