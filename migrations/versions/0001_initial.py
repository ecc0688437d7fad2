"""initial tables

Revision ID: 0001
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='STAFF'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_user_email', 'user', ['email'], unique=True)

    op.create_table('dentist',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('dentist_code', sa.String(50), nullable=True, unique=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(40), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
    )
    op.create_index('ix_dentist_is_active', 'dentist', ['is_active'])

    op.create_table('service',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name_th', sa.String(255), nullable=False, unique=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
    )
    op.create_index('ix_service_is_active', 'service', ['is_active'])

    op.create_table('patient',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('hn', sa.String(50), nullable=False),
        sa.Column('name_th', sa.String(255), nullable=True),
        sa.Column('name_en', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(40), nullable=True),
        sa.Column('search_text', sa.Text(), nullable=False, server_default=''),
    )
    op.create_index('ix_patient_hn', 'patient', ['hn'], unique=True)

    op.create_table('booking_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('slot_capacity_per_dentist', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('slot_capacity_unassigned', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('id = 1', name='ck_booking_settings_singleton'),
        sa.CheckConstraint('slot_capacity_per_dentist >= 0 AND slot_capacity_unassigned >= 0',
                           name='ck_booking_settings_non_negative'),
    )

    op.create_table('booking',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('booking_date', sa.Date(), nullable=False),
        sa.Column('booking_time', sa.Time(), nullable=False),
        sa.Column('dentist_id', sa.Integer(), sa.ForeignKey('dentist.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('patient_id', sa.Integer(), sa.ForeignKey('patient.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('walkin_name_th', sa.String(255), nullable=True),
        sa.Column('walkin_name_en', sa.String(255), nullable=True),
        sa.Column('walkin_phone', sa.String(40), nullable=True),
        sa.Column('other_services', sa.JSON(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='booked'),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.text('0')),
        sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("status IN ('booked', 'cancelled')", name='ck_booking_status'),
        sa.CheckConstraint(
            'patient_id IS NOT NULL OR walkin_name_th IS NOT NULL OR walkin_name_en IS NOT NULL',
            name='ck_booking_patient_identity',
        ),
    )
    op.create_index('ix_booking_cell', 'booking', ['booking_date', 'booking_time'])
    op.create_index('ix_booking_dentist_id', 'booking', ['dentist_id'])
    op.create_index('ix_booking_patient_id', 'booking', ['patient_id'])

    op.create_table('booking_services',
        sa.Column('booking_id', sa.Integer(), sa.ForeignKey('booking.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('service_id', sa.Integer(), sa.ForeignKey('service.id', ondelete='RESTRICT'), primary_key=True),
    )


def downgrade():
    op.drop_table('booking_services')
    op.drop_index('ix_booking_patient_id', table_name='booking')
    op.drop_index('ix_booking_dentist_id', table_name='booking')
    op.drop_index('ix_booking_cell', table_name='booking')
    op.drop_table('booking')
    op.drop_table('booking_settings')
    op.drop_index('ix_patient_hn', table_name='patient')
    op.drop_table('patient')
    op.drop_index('ix_service_is_active', table_name='service')
    op.drop_table('service')
    op.drop_index('ix_dentist_is_active', table_name='dentist')
    op.drop_table('dentist')
    op.drop_index('ix_user_email', table_name='user')
    op.drop_table('user')
