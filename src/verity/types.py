"""Custom SQLAlchemy column types."""

from sqlalchemy import String, TypeDecorator
from sqlalchemy.dialects.postgresql import CITEXT as PostgresCITEXT


class CITEXT(TypeDecorator):
    """Case-insensitive username column.

    PostgreSQL stores it as CITEXT so ``Alice`` and ``alice`` collide on the
    unique index. Other dialects (SQLite in tests) fall back to a plain
    ``VARCHAR`` of the same length.
    """

    impl = String
    cache_ok = True

    def __init__(self, length: int = 32, *args, **kwargs):
        super().__init__(length, *args, **kwargs)
        self.length = length

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PostgresCITEXT())
        return dialect.type_descriptor(String(self.length))
