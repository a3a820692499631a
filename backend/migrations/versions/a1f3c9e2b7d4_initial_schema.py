"""Initial schema

Revision ID: a1f3c9e2b7d4
Revises:
Create Date: 2026-10-18 10:12:31.402117
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1f3c9e2b7d4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('avatar', sa.Text(), nullable=True),
        sa.Column('is_email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('verification_code', sa.String(length=16), nullable=True),
        sa.Column('verification_code_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('disability_type', sa.String(), nullable=False),
        sa.Column('disability_severity', sa.Integer(), nullable=False),
        sa.Column('trigger_words', sa.Text(), nullable=False),
        sa.Column('disability_description', sa.Text(), nullable=True),
        sa.Column('voice_id', sa.String(), nullable=True),
        sa.Column('speed', sa.Float(), nullable=False),
        sa.Column('font_mode', sa.String(), nullable=False),
        sa.Column('text_size', sa.String(), nullable=False),
        sa.Column('high_contrast', sa.Boolean(), nullable=False),
        sa.Column('reduced_motion', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('disability_severity between 1 and 10', name='ck_users_severity'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'therapy_sessions',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('target_text', sa.Text(), nullable=False),
        sa.Column('transcribed_text', sa.Text(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('accuracy', sa.Float(), nullable=False),
        sa.Column('clarity_score', sa.Float(), nullable=False),
        sa.Column('overall_score', sa.Float(), nullable=False),
        sa.Column('word_analysis', sa.Text(), nullable=False),
        sa.Column('phoneme_issues', sa.Text(), nullable=False),
        sa.Column('recommendations', sa.Text(), nullable=False),
        sa.Column('difficulty', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('emotion', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('idx_therapy_sessions_user_time', 'therapy_sessions', ['user_id', 'created_at'])

    op.create_table(
        'bridge_exchanges',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('original_text', sa.Text(), nullable=False),
        sa.Column('corrected_text', sa.Text(), nullable=False),
        sa.Column('confidence', sa.Float(), nullable=False),
        sa.Column('intent', sa.Text(), nullable=True),
        sa.Column('corrections', sa.Text(), nullable=False),
        sa.Column('context', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('idx_bridge_exchanges_user_time', 'bridge_exchanges', ['user_id', 'created_at'])

    op.create_table(
        'phoneme_progress',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('phoneme_id', sa.String(length=64), nullable=False),
        sa.Column('progress', sa.Float(), nullable=False),
        sa.Column('practice_count', sa.Integer(), nullable=False),
        sa.Column('accuracy_history', sa.JSON(), nullable=False),
        sa.Column('last_practiced_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'phoneme_id', name='uq_phoneme_progress_user_phoneme'),
        sa.CheckConstraint('progress between 0 and 100', name='ck_phoneme_progress_range'),
    )
    op.create_index('ix_phoneme_progress_user_id', 'phoneme_progress', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_phoneme_progress_user_id', table_name='phoneme_progress')
    op.drop_table('phoneme_progress')
    op.drop_index('idx_bridge_exchanges_user_time', table_name='bridge_exchanges')
    op.drop_table('bridge_exchanges')
    op.drop_index('idx_therapy_sessions_user_time', table_name='therapy_sessions')
    op.drop_table('therapy_sessions')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
