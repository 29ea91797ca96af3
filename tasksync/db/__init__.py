"""Database engine, sessions and table creation."""
