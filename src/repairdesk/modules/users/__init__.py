"""Accounts (the global ``users`` table).

The identity service owns this table; this package only reads it to map
an actor to their tenant.
"""
