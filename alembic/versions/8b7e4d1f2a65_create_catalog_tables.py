"""Create books, authors and categories tables

Revision ID: 8b7e4d1f2a65
Revises: 3f1c9a2b7d40
Create Date: 2026-10-18 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b7e4d1f2a65'
down_revision: Union[str, None] = '3f1c9a2b7d40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('books',
        sa.Column('isbn', sa.String(length=20), nullable=False, comment='ISBN, unique across the catalog'),
        sa.Column('title', sa.String(length=500), nullable=False, comment='Book title'),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False, comment='Price in USD'),
        sa.Column('author_name', sa.String(length=255), nullable=False, comment='Author name as submitted with the book'),
        sa.Column('genre', sa.String(length=100), nullable=False, comment='Genre as submitted with the book'),
        sa.Column('pub_date', sa.Date(), nullable=False, comment='Publication date'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('isbn')
    )
    op.create_index(op.f('ix_books_title'), 'books', ['title'], unique=False)
    op.create_index(op.f('ix_books_genre'), 'books', ['genre'], unique=False)

    op.create_table('authors',
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('isbn', sa.String(length=20), nullable=False, comment='ISBN of the book this author is attached to'),
        sa.Column('author_name', sa.String(length=255), nullable=False, comment="Author's full name"),
        sa.PrimaryKeyConstraint('author_id')
    )
    op.create_index(op.f('ix_authors_isbn'), 'authors', ['isbn'], unique=False)

    op.create_table('categories',
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('isbn', sa.String(length=20), nullable=False, comment='ISBN of the book this category is attached to'),
        sa.Column('genre', sa.String(length=100), nullable=False, comment="Genre name (e.g., 'Fiction', 'Biography')"),
        sa.PrimaryKeyConstraint('category_id')
    )
    op.create_index(op.f('ix_categories_isbn'), 'categories', ['isbn'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_categories_isbn'), table_name='categories')
    op.drop_table('categories')
    op.drop_index(op.f('ix_authors_isbn'), table_name='authors')
    op.drop_table('authors')
    op.drop_index(op.f('ix_books_genre'), table_name='books')
    op.drop_index(op.f('ix_books_title'), table_name='books')
    op.drop_table('books')
