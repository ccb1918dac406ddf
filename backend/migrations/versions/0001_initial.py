from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """users, breathing_sessions 테이블 생성"""
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'breathing_sessions',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.BigInteger(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('technique', sa.String(length=64), nullable=False),
        sa.Column('duration_seconds', sa.Integer(), nullable=False),
        sa.Column('cycles_completed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('duration_seconds > 0', name='ck_breathing_sessions_duration'),
        sa.CheckConstraint('cycles_completed >= 0', name='ck_breathing_sessions_cycles'),
    )
    op.create_index('ix_breathing_sessions_user_id', 'breathing_sessions', ['user_id'])
    op.create_index('idx_breathing_sessions_user_completed', 'breathing_sessions', ['user_id', 'completed_at'])


def downgrade() -> None:
    op.drop_index('idx_breathing_sessions_user_completed', table_name='breathing_sessions')
    op.drop_index('ix_breathing_sessions_user_id', table_name='breathing_sessions')
    op.drop_table('breathing_sessions')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
