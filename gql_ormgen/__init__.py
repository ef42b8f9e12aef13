"""Generate SQLAlchemy code and SQL migrations from GraphQL schemas."""

__version__ = "0.1.0"
