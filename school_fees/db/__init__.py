"""Database engine, session factory and schema setup."""
