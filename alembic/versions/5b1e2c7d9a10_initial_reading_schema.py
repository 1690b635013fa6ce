"""initial reading schema: users, books, reading_progress, summaries, comments

Revision ID: 5b1e2c7d9a10
Revises:
Create Date: 2026-10-17 10:12:40.118204

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '5b1e2c7d9a10'
down_revision = None
branch_labels = None
depends_on = None

reading_status = sa.Enum('NOT_STARTED', 'READING', 'PAUSED', 'COMPLETED', name='readingstatus')

def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('level', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('avatar_url', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'books',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('author', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('cover_image', sa.String(length=512), nullable=True),
        sa.Column('isbn', sa.String(length=32), nullable=True),
        sa.Column('category', sa.String(length=80), nullable=False),
        sa.Column('difficulty', sa.String(length=20), nullable=True),
        sa.Column('pages', sa.Integer(), nullable=True),
        sa.Column('language', sa.String(length=8), nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_books'),
        sa.UniqueConstraint('isbn', name='uq_books_isbn'),
    )
    op.create_index('ix_books_id', 'books', ['id'])
    op.create_index('ix_books_title', 'books', ['title'])
    op.create_index('ix_books_author', 'books', ['author'])
    op.create_index('ix_books_category', 'books', ['category'])

    op.create_table(
        'reading_progress',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('status', reading_status, nullable=False),
        sa.Column('current_page', sa.Integer(), nullable=False),
        sa.Column('total_pages', sa.Integer(), nullable=False),
        sa.Column('progress_percentage', sa.Float(), nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('halfway_awarded', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('completion_awarded', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_reading_progress_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], name='fk_reading_progress_book_id_books', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_reading_progress'),
        sa.UniqueConstraint('user_id', 'book_id', name='uq_reading_progress_user_book'),
    )
    op.create_index('ix_reading_progress_user_id', 'reading_progress', ['user_id'])
    op.create_index('ix_reading_progress_book_id', 'reading_progress', ['book_id'])
    op.create_index('ix_reading_progress_updated_at', 'reading_progress', ['updated_at'])

    op.create_table(
        'summaries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('rated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], name='fk_summaries_author_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], name='fk_summaries_book_id_books', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_summaries'),
    )
    op.create_index('ix_summaries_id', 'summaries', ['id'])
    op.create_index('ix_summaries_author_id', 'summaries', ['author_id'])
    op.create_index('ix_summaries_book_id', 'summaries', ['book_id'])
    op.create_index('ix_summaries_created_at', 'summaries', ['created_at'])

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('kind', sa.String(length=20), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('book_id', sa.Integer(), nullable=True),
        sa.Column('summary_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], name='fk_comments_author_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], name='fk_comments_book_id_books', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['summary_id'], ['summaries.id'], name='fk_comments_summary_id_summaries', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_comments'),
    )
    op.create_index('ix_comments_id', 'comments', ['id'])
    op.create_index('ix_comments_author_id', 'comments', ['author_id'])
    op.create_index('ix_comments_book_id', 'comments', ['book_id'])
    op.create_index('ix_comments_summary_id', 'comments', ['summary_id'])


def downgrade() -> None:
    op.drop_table('comments')
    op.drop_table('summaries')
    op.drop_table('reading_progress')
    op.drop_table('books')
    op.drop_table('users')
    reading_status.drop(op.get_bind(), checkfirst=True)
