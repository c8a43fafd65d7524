"""add share_tokens

Revision ID: 7b2e4d1c9a55
Revises: 3f1c2a9b7d10
Create Date: 2026-10-18 10:30:00
"""
from alembic import op
import sqlalchemy as sa

revision = '7b2e4d1c9a55'
down_revision = '3f1c2a9b7d10'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'share_tokens',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('token', sa.String(length=32), nullable=False),
        sa.Column('patient_id', sa.Integer(), sa.ForeignKey('patients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('revoked_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_share_tokens_token', 'share_tokens', ['token'], unique=True)
    op.create_index('ix_share_tokens_patient_id', 'share_tokens', ['patient_id'])


def downgrade():
    op.drop_index('ix_share_tokens_patient_id', table_name='share_tokens')
    op.drop_index('ix_share_tokens_token', table_name='share_tokens')
    op.drop_table('share_tokens')
