"""add reports and weekly_reviews tables

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-02-02 09:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = 'a1b2c3d4e5f6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('reports',
        sa.Column('report_date', sa.Date(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('raw_text', sa.Text(), nullable=False),
        sa.Column('extracted_data', postgresql.JSONB(), nullable=False),
        sa.Column('parser_version', sa.String(length=20), nullable=False),
        sa.Column('parser_warnings', postgresql.JSONB(), nullable=False),
        sa.Column('consistency_errors', postgresql.JSONB(), nullable=False),
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('report_date', 'version', name='uq_reports_date_version'),
    )
    op.create_index('ix_reports_report_date', 'reports', ['report_date'])

    op.create_table('weekly_reviews',
        sa.Column('week_start', sa.Date(), nullable=False),
        sa.Column('week_end', sa.Date(), nullable=False),
        sa.Column('mode', sa.String(length=10), nullable=False),
        sa.Column('raw_text', sa.Text(), nullable=False),
        sa.Column('extracted_data', postgresql.JSONB(), nullable=False),
        sa.Column('parser_version', sa.String(length=20), nullable=False),
        sa.Column('parser_warnings', postgresql.JSONB(), nullable=False),
        sa.Column('consistency_errors', postgresql.JSONB(), nullable=False),
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('week_start', 'week_end', name='uq_weekly_reviews_week'),
    )
    op.create_index('ix_weekly_reviews_week_start', 'weekly_reviews', ['week_start'])


def downgrade() -> None:
    op.drop_index('ix_weekly_reviews_week_start', table_name='weekly_reviews')
    op.drop_table('weekly_reviews')
    op.drop_index('ix_reports_report_date', table_name='reports')
    op.drop_table('reports')
