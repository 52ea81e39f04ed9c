from sqlalchemy import JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.dialects.postgresql import JSONB

Base = declarative_base()

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in unit tests)
JsonType = JSONB().with_variant(JSON(), "sqlite")

EMBEDDING_DIMENSIONS = 1536
