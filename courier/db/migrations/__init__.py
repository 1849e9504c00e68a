"""Alembic migrations for the subscription store and event ledger."""
