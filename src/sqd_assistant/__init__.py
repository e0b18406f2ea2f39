"""
SQD Assistant backend package.

Personal task tracking backed by a local SQLite file; the desktop UI reaches
it through the loopback command bridge built by ``create_app``.
"""

__version__ = "0.1.0"
