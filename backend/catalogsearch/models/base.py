"""Declarative base and column types shared by the models"""

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base

# JSONB on PostgreSQL (GIN-indexable, supports @>); plain JSON on SQLite test databases
PortableJSONB = JSON().with_variant(JSONB(), "postgresql")

Base = declarative_base()
