"""create donors table

Revision ID: c3f1a9d2b7e4
Revises: 
Create Date: 2026-10-19 09:12:44.318207

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'c3f1a9d2b7e4'
down_revision = None
branch_labels = None
depends_on = None

BLOOD_GROUPS = ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')


def upgrade() -> None:
    # Databases bootstrapped by init_db() already have the table
    inspector = sa.inspect(op.get_bind())
    if inspector.has_table('donors'):
        return

    op.create_table(
        'donors',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('contact', sa.String(length=32), nullable=False),
        sa.Column(
            'blood_group',
            sa.Enum(*BLOOD_GROUPS, name='blood_group', native_enum=False, length=3),
            nullable=False,
        ),
        sa.Column('last_donation_date', sa.Date(), nullable=True),
        sa.Column('available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('contact', name='uq_donors_contact'),
    )
    op.create_index('ix_donors_blood_group', 'donors', ['blood_group'])
    op.create_index('ix_donors_available', 'donors', ['available'])
    op.create_index('ix_donors_created_at', 'donors', ['created_at'])
    op.create_index('ix_donors_blood_group_available', 'donors', ['blood_group', 'available'])


def downgrade() -> None:
    op.drop_index('ix_donors_blood_group_available', table_name='donors')
    op.drop_index('ix_donors_created_at', table_name='donors')
    op.drop_index('ix_donors_available', table_name='donors')
    op.drop_index('ix_donors_blood_group', table_name='donors')
    op.drop_table('donors')
