"""Minimal OSDF/Pelican object client.

Reads bearer tokens from the HTCondor credential directory, asks the
federation director where an object lives and moves its bytes with a
single authenticated GET or PUT.
"""

__version__ = "0.1.0"
