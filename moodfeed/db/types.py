"""Column types that map to native PostgreSQL types and degrade on SQLite."""
from sqlalchemy import JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB

GUID = Uuid(as_uuid=True)
JSONType = JSON().with_variant(JSONB(), "postgresql")
