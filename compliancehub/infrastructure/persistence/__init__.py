"""Persistence: SQLAlchemy engine, Base and ORM models for the postgres store."""
