"""Integration tests for pantrywise.

These tests require a PostgreSQL database (pg_trgm optional).

Run with: pytest tests/integration/ -v -m integration
Skip with: pytest -m "not integration"
"""
