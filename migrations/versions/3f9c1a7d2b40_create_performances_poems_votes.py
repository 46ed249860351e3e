"""create performances, poems and votes

Revision ID: 3f9c1a7d2b40
Revises:
Create Date: 2026-10-18 10:12:41.118204

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3f9c1a7d2b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('performances',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('name', sa.String(length=200), nullable=False),
    sa.Column('slug', sa.String(length=200), nullable=False),
    sa.Column('color', sa.String(length=20), nullable=False),
    sa.Column('location', sa.String(length=200), nullable=True),
    sa.Column('date', sa.Date(), nullable=True),
    sa.Column('num_poems', sa.Integer(), nullable=False),
    sa.Column('num_poets', sa.Integer(), nullable=False),
    sa.Column('model_link', sa.String(length=500), nullable=True),
    sa.Column('huggingface_link', sa.String(length=500), nullable=True),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('poets', sa.JSON(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
    sa.CheckConstraint("status IN ('upcoming', 'training', 'trained')", name='ck_performances_status'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('slug')
    )
    op.create_table('poems',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('performance_id', sa.String(length=36), nullable=False),
    sa.Column('theme', sa.String(length=200), nullable=False),
    sa.Column('theme_slug', sa.String(length=200), nullable=False),
    sa.Column('text', sa.Text(), nullable=False),
    sa.Column('author_name', sa.String(length=200), nullable=False),
    sa.Column('author_type', sa.String(length=20), nullable=False),
    sa.Column('vote_count', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
    sa.CheckConstraint("author_type IN ('human', 'machine')", name='ck_poems_author_type'),
    sa.CheckConstraint('vote_count >= 0', name='ck_poems_vote_count'),
    sa.ForeignKeyConstraint(['performance_id'], ['performances.id'], ),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('performance_id', 'theme_slug', 'author_type', name='uq_poems_performance_theme_author')
    )
    op.create_index('ix_poems_performance_theme', 'poems', ['performance_id', 'theme_slug'], unique=False)
    op.create_table('votes',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('poem_id', sa.String(length=36), nullable=False),
    sa.Column('performance_id', sa.String(length=36), nullable=False),
    sa.Column('theme_slug', sa.String(length=200), nullable=False),
    sa.Column('voter_fingerprint', sa.String(length=255), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
    sa.ForeignKeyConstraint(['performance_id'], ['performances.id'], ),
    sa.ForeignKeyConstraint(['poem_id'], ['poems.id'], ),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('voter_fingerprint', 'poem_id', name='uq_votes_fingerprint_poem'),
    sa.UniqueConstraint('voter_fingerprint', 'performance_id', 'theme_slug', name='uq_votes_fingerprint_pair')
    )
    op.create_index(op.f('ix_votes_voter_fingerprint'), 'votes', ['voter_fingerprint'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_votes_voter_fingerprint'), table_name='votes')
    op.drop_table('votes')
    op.drop_index('ix_poems_performance_theme', table_name='poems')
    op.drop_table('poems')
    op.drop_table('performances')
