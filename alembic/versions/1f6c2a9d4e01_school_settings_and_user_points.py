"""school_point_settings + user_points

Revision ID: 1f6c2a9d4e01
Revises:
Create Date: 2026-10-17 12:40:11.204318

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '1f6c2a9d4e01'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'school_point_settings',
        sa.Column('school_name', sa.String(length=255), nullable=False),
        sa.Column('settings_json', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('school_name', name=op.f('pk_school_point_settings')),
    )
    op.create_table(
        'user_points',
        sa.Column('user_email', sa.String(length=255), nullable=False),
        sa.Column('base_points', sa.Integer(), nullable=False),
        sa.Column('login_points', sa.Integer(), nullable=False),
        sa.Column('last_login_date', sa.Date(), nullable=True),
        sa.Column('login_points_that_day', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('user_email', name=op.f('pk_user_points')),
    )

def downgrade():
    op.drop_table('user_points')
    op.drop_table('school_point_settings')
