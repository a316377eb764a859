"""Repository layer: SQL helpers over an open SQLite connection.

Functions take the connection and never commit; the caller owns the transaction.
"""
from __future__ import annotations
