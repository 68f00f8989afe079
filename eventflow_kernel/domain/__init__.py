"""
Pure domain layer: roles, statuses, record types, workflow definitions.

ZERO I/O.  Nothing in this package imports from ``db/`` or ``services/``.
"""
