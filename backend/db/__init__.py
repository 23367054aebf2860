"""Postgres configuration and schema migrations.

psycopg is imported lazily inside functions so the service can run on the in-memory
store without DB drivers on the import path.
"""
