"""Initial database schema

Revision ID: 001
Revises:
Create Date: 2025-01-06

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create profiles table
    op.create_table('profiles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('logo', sa.Text(), nullable=False, server_default=''),
        sa.Column('logo_variants', sa.JSON(), nullable=True),
        sa.Column('colors', sa.JSON(), nullable=False),
        sa.Column('fonts', sa.JSON(), nullable=False),
        sa.Column('layout', sa.JSON(), nullable=False),
        sa.Column('system_prompt', sa.Text(), nullable=False, server_default=''),
        sa.Column('design_tokens', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_profiles_user_id'), 'profiles', ['user_id'], unique=False)
    op.create_index(op.f('ix_profiles_slug'), 'profiles', ['slug'], unique=True)

    # Create designs table
    op.create_table('designs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('profile_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('thumbnail_url', sa.Text(), nullable=True),
        sa.Column('canvas_state', sa.JSON(), nullable=False),
        sa.Column('layers', sa.JSON(), nullable=False),
        sa.Column('overlay_opacity', sa.Float(), nullable=False, server_default='0'),
        sa.Column('content', sa.JSON(), nullable=True),
        sa.Column('background_image', sa.JSON(), nullable=True),
        sa.Column('overlay', sa.JSON(), nullable=True),
        sa.Column('product_image', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_designs_profile_id'), 'designs', ['profile_id'], unique=False)
    op.create_index('ix_designs_profile_updated', 'designs', ['profile_id', 'updated_at'], unique=False)

    # Create assets table
    op.create_table('assets',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('profile_id', sa.String(length=36), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('width', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('height', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_assets_profile_id'), 'assets', ['profile_id'], unique=False)

    # Create usage_logs table
    op.create_table('usage_logs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('user_email', sa.String(length=255), nullable=False, server_default='unknown'),
        sa.Column('operation', sa.String(length=100), nullable=False),
        sa.Column('cost_eur', sa.Float(), nullable=False),
        sa.Column('model', sa.String(length=100), nullable=False),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_usage_logs_user_created', 'usage_logs', ['user_id', 'created_at'], unique=False)
    op.create_index('ix_usage_logs_created_at', 'usage_logs', ['created_at'], unique=False)

    # Create generation_logs table
    op.create_table('generation_logs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('tool', sa.String(length=50), nullable=False),
        sa.Column('prompt', sa.Text(), nullable=False),
        sa.Column('prompt_source', sa.String(length=20), nullable=False),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('downloaded', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('downloaded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_generation_logs_user_id'), 'generation_logs', ['user_id'], unique=False)
    op.create_index('ix_generation_logs_created_at', 'generation_logs', ['created_at'], unique=False)
    op.create_index('ix_generation_logs_tool', 'generation_logs', ['tool'], unique=False)

    # Create waitlist_entries table
    op.create_table('waitlist_entries',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('source', sa.String(length=100), nullable=False, server_default='landing'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_waitlist_entries_email'), 'waitlist_entries', ['email'], unique=True)


def downgrade() -> None:
    op.drop_index(op.f('ix_waitlist_entries_email'), table_name='waitlist_entries')
    op.drop_table('waitlist_entries')
    op.drop_index('ix_generation_logs_tool', table_name='generation_logs')
    op.drop_index('ix_generation_logs_created_at', table_name='generation_logs')
    op.drop_index(op.f('ix_generation_logs_user_id'), table_name='generation_logs')
    op.drop_table('generation_logs')
    op.drop_index('ix_usage_logs_created_at', table_name='usage_logs')
    op.drop_index('ix_usage_logs_user_created', table_name='usage_logs')
    op.drop_table('usage_logs')
    op.drop_index(op.f('ix_assets_profile_id'), table_name='assets')
    op.drop_table('assets')
    op.drop_index('ix_designs_profile_updated', table_name='designs')
    op.drop_index(op.f('ix_designs_profile_id'), table_name='designs')
    op.drop_table('designs')
    op.drop_index(op.f('ix_profiles_slug'), table_name='profiles')
    op.drop_index(op.f('ix_profiles_user_id'), table_name='profiles')
    op.drop_table('profiles')
