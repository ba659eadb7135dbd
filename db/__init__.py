"""
Repo-level database tooling for the dashboard store.

The service reaches the store through services.dashboard.app.gateway; this package only
provisions it: Alembic migrations and the deterministic seed used by dev and tests.
"""
