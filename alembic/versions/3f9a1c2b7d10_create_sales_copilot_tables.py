"""create sales copilot tables

Revision ID: 3f9a1c2b7d10
Revises:
Create Date: 2026-10-18 09:12:41.204113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('teams',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('owner_id', sa.String(), nullable=False, comment='Identity-provider user id of the creator'),
    sa.Column('sales_motion', sa.String(), nullable=True, comment='smb | enterprise'),
    sa.Column('tone_default', sa.String(), nullable=True),
    sa.Column('no_go_phrases', sa.Text(), nullable=True),
    sa.Column('primary_objections', sa.Text(), nullable=True),
    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default='NOW()', nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_table('team_members',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('team_id', sa.UUID(), nullable=False),
    sa.Column('user_id', sa.String(), nullable=False),
    sa.Column('role', sa.String(), server_default='member', nullable=False, comment='owner | member'),
    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default='NOW()', nullable=False),
    sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('team_id', 'user_id', name='uq_team_members_team_user')
    )
    op.create_index('ix_team_members_user_id', 'team_members', ['user_id'], unique=False)
    op.create_table('sessions',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('team_id', sa.UUID(), nullable=False),
    sa.Column('created_by', sa.String(), nullable=False),
    sa.Column('company_name', sa.String(), nullable=True),
    sa.Column('status', sa.String(), server_default='active', nullable=False, comment='active | demo_booked | won | lost'),
    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default='NOW()', nullable=False),
    sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default='NOW()', nullable=False),
    sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_sessions_team_id', 'sessions', ['team_id'], unique=False)
    op.create_table('sales_scripts',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('session_id', sa.UUID(), nullable=True),
    sa.Column('team_id', sa.UUID(), nullable=True),
    sa.Column('created_by', sa.String(), nullable=True),
    sa.Column('input', sa.Text(), nullable=False),
    sa.Column('raw_output', sa.Text(), nullable=False, comment='Unparsed model response'),
    sa.Column('summary', sa.Text(), server_default='', nullable=False),
    sa.Column('opening', sa.Text(), server_default='', nullable=False),
    sa.Column('qualifying_questions', sa.Text(), server_default='', nullable=False),
    sa.Column('value_framing', sa.Text(), server_default='', nullable=False),
    sa.Column('objections', sa.Text(), server_default='', nullable=False),
    sa.Column('closing', sa.Text(), server_default='', nullable=False),
    sa.Column('coach_tips', sa.Text(), server_default='', nullable=False),
    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default='NOW()', nullable=False),
    sa.ForeignKeyConstraint(['session_id'], ['sessions.id'], ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_sales_scripts_session_id', 'sales_scripts', ['session_id'], unique=False)
    op.create_index('ix_sales_scripts_team_id', 'sales_scripts', ['team_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_sales_scripts_team_id', table_name='sales_scripts')
    op.drop_index('ix_sales_scripts_session_id', table_name='sales_scripts')
    op.drop_table('sales_scripts')
    op.drop_index('ix_sessions_team_id', table_name='sessions')
    op.drop_table('sessions')
    op.drop_index('ix_team_members_user_id', table_name='team_members')
    op.drop_table('team_members')
    op.drop_table('teams')
