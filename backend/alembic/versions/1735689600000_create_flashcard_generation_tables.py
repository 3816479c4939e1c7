"""create flashcard generation tables

Revision ID: 1735689600000
Revises:
Create Date: 2025-01-01 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '1735689600000'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'generations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('model', sa.String(length=255), nullable=False),
        sa.Column('generated_count', sa.Integer(), nullable=False),
        sa.Column('source_text_hash', sa.String(length=32), nullable=False),
        sa.Column('source_text_length', sa.Integer(), nullable=False),
        sa.Column('generation_duration', sa.Integer(), nullable=False),
        sa.Column('accepted_unedited_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('accepted_edited_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_generations_user_id', 'generations', ['user_id'])
    op.create_index('ix_generations_source_text_hash', 'generations', ['source_text_hash'])

    op.create_table(
        'flashcards',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('front', sa.String(length=200), nullable=False),
        sa.Column('back', sa.String(length=500), nullable=False),
        sa.Column('source', sa.String(length=20), nullable=False, server_default='manual'),
        sa.Column('generation_id', sa.Integer(), nullable=True),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("source IN ('manual', 'ai-full', 'ai-edited')", name='ck_flashcards_source'),
        sa.CheckConstraint(
            "(source = 'manual' AND generation_id IS NULL) OR "
            "(source IN ('ai-full', 'ai-edited') AND generation_id IS NOT NULL)",
            name='ck_flashcards_generation_source'
        ),
        sa.ForeignKeyConstraint(['generation_id'], ['generations.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_flashcards_user_id', 'flashcards', ['user_id'])
    op.create_index('ix_flashcards_generation_id', 'flashcards', ['generation_id'])

    op.create_table(
        'generation_error_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('model', sa.String(length=255), nullable=False),
        sa.Column('source_text_hash', sa.String(length=32), nullable=False),
        sa.Column('source_text_length', sa.Integer(), nullable=False),
        sa.Column('error_code', sa.String(length=100), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_generation_error_logs_user_id', 'generation_error_logs', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_generation_error_logs_user_id', table_name='generation_error_logs')
    op.drop_table('generation_error_logs')
    op.drop_index('ix_flashcards_generation_id', table_name='flashcards')
    op.drop_index('ix_flashcards_user_id', table_name='flashcards')
    op.drop_table('flashcards')
    op.drop_index('ix_generations_source_text_hash', table_name='generations')
    op.drop_index('ix_generations_user_id', table_name='generations')
    op.drop_table('generations')
