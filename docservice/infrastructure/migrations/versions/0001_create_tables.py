"""Create documents, authors, tags, permissions and document_tags

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "authors",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
    )
    op.create_table(
        "tags",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
    )
    op.create_table(
        "documents",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("author_id", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["author_id"], ["authors.id"], name="fk_document_author"),
    )
    op.create_table(
        "permissions",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("document_id", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(
            ["document_id"], ["documents.id"], name="fk_permission_document", ondelete="CASCADE"
        ),
    )
    op.create_table(
        "document_tags",
        sa.Column("document_id", sa.BigInteger(), nullable=False),
        sa.Column("tag_id", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("document_id", "tag_id"),
        sa.ForeignKeyConstraint(
            ["document_id"], ["documents.id"], name="fk_document_tags_document", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["tag_id"], ["tags.id"], name="fk_document_tags_tag", ondelete="CASCADE"
        ),
    )

    op.create_index("idx_document_created_at", "documents", [sa.text("created_at DESC")])
    op.create_index("idx_document_author", "documents", ["author_id"])
    op.create_index("idx_permission_document", "permissions", ["document_id"])
    op.create_index("idx_document_tags_document", "document_tags", ["document_id"])
    op.create_index("idx_document_tags_tag", "document_tags", ["tag_id"])


def downgrade():
    op.drop_table("document_tags")
    op.drop_table("permissions")
    op.drop_table("documents")
    op.drop_table("tags")
    op.drop_table("authors")
