"""Create documents table with pgvector support

Revision ID: 002
Revises: 001
Create Date: 2026-10-17 09:30:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from pgvector.sqlalchemy import Vector

# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade():
    # Enable pgvector extension (idempotent)
    op.execute('CREATE EXTENSION IF NOT EXISTS vector')

    # product_id is a weak reference: no foreign key, no uniqueness
    op.create_table(
        'documents',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('collection', sa.String(100), nullable=False, server_default='documents'),
        sa.Column('product_id', sa.Integer(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('metadata', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default='{}'),
        # text-embedding-3-small
        sa.Column('embedding', Vector(1536), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_index('idx_documents_collection', 'documents', ['collection'])
    op.create_index('ix_documents_product_id', 'documents', ['product_id'])

    # Serves exact-match metadata filters (metadata @> '{"category": ...}')
    op.create_index('idx_documents_metadata', 'documents', ['metadata'], postgresql_using='gin')

    # HNSW index for cosine distance (<=>) nearest-neighbour search
    op.execute("""
        CREATE INDEX idx_documents_embedding_hnsw
        ON documents
        USING hnsw (embedding vector_cosine_ops)
        WITH (m = 16, ef_construction = 64)
    """)


def downgrade():
    op.execute('DROP INDEX IF EXISTS idx_documents_embedding_hnsw')
    op.drop_index('idx_documents_metadata', table_name='documents')
    op.drop_index('ix_documents_product_id', table_name='documents')
    op.drop_index('idx_documents_collection', table_name='documents')
    op.drop_table('documents')
