"""create patients, daily_logs and weekly_logs

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-17 09:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = '3f1c2a9b7d10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'patients',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(length=32), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('clinic_id', sa.String(length=40), nullable=True),
        sa.Column('patient_code', sa.String(length=60), nullable=True),
        sa.Column('name_or_initial', sa.String(length=120), nullable=True),
        sa.Column('phone', sa.String(length=40), nullable=True),
        sa.Column('weekly_day', sa.String(length=3), nullable=False, server_default='MON'),
        sa.Column('consent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_patients_user_id', 'patients', ['user_id'], unique=True)
    op.create_index('ix_patients_email', 'patients', ['email'], unique=True)
    op.create_index('ix_patients_clinic_id', 'patients', ['clinic_id'])
    op.create_index('ix_patients_patient_code', 'patients', ['patient_code'], unique=True)

    op.create_table(
        'daily_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('patient_id', sa.Integer(), sa.ForeignKey('patients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('medication_taken', sa.Boolean(), nullable=False),
        sa.Column('nausea_level', sa.Integer(), nullable=False),
        sa.Column('vomiting', sa.Boolean(), nullable=False),
        sa.Column('weight_kg', sa.Float(), nullable=True),
        sa.Column('dizziness', sa.Boolean(), nullable=True),
        sa.Column('abdominal_discomfort', sa.Boolean(), nullable=True),
        sa.Column('overall_condition', sa.Integer(), nullable=True),
        sa.Column('source', sa.String(length=20), nullable=False, server_default='app'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_daily_logs_patient_id', 'daily_logs', ['patient_id'])
    op.create_index('ix_daily_logs_timestamp', 'daily_logs', ['timestamp'])

    op.create_table(
        'weekly_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('patient_id', sa.Integer(), sa.ForeignKey('patients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('weight_kg', sa.Float(), nullable=False),
        sa.Column('body_fat_percent', sa.Float(), nullable=True),
        sa.Column('appetite_change', sa.String(length=20), nullable=False, server_default='maintained'),
        sa.Column('exercise_frequency', sa.String(length=20), nullable=False, server_default='none'),
        sa.Column('source', sa.String(length=20), nullable=False, server_default='app'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_weekly_logs_patient_id', 'weekly_logs', ['patient_id'])
    op.create_index('ix_weekly_logs_timestamp', 'weekly_logs', ['timestamp'])


def downgrade():
    op.drop_index('ix_weekly_logs_timestamp', table_name='weekly_logs')
    op.drop_index('ix_weekly_logs_patient_id', table_name='weekly_logs')
    op.drop_table('weekly_logs')
    op.drop_index('ix_daily_logs_timestamp', table_name='daily_logs')
    op.drop_index('ix_daily_logs_patient_id', table_name='daily_logs')
    op.drop_table('daily_logs')
    op.drop_index('ix_patients_patient_code', table_name='patients')
    op.drop_index('ix_patients_clinic_id', table_name='patients')
    op.drop_index('ix_patients_email', table_name='patients')
    op.drop_index('ix_patients_user_id', table_name='patients')
    op.drop_table('patients')
