"""Initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create CITEXT extension
    op.execute('CREATE EXTENSION IF NOT EXISTS citext')

    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('username', postgresql.CITEXT(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('is_admin', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('inserted_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    # Create users_tokens table
    op.create_table(
        'users_tokens',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('token_hash', sa.LargeBinary(), nullable=False),
        sa.Column('context', sa.String(), nullable=False),
        sa.Column('authenticated_at', sa.DateTime(), nullable=True),
        sa.Column('inserted_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_tokens_id'), 'users_tokens', ['id'], unique=False)
    op.create_index(op.f('ix_users_tokens_user_id'), 'users_tokens', ['user_id'], unique=False)
    op.create_index(op.f('ix_users_tokens_token_hash'), 'users_tokens', ['token_hash'], unique=True)

    # Create verification_requests table
    op.create_table(
        'verification_requests',
        sa.Column('id', sa.BigInteger(), nullable=False),
        sa.Column('subject_id', sa.BigInteger(), nullable=False),
        sa.Column('credentials', sa.String(length=4000), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('review_note', sa.String(length=1000), nullable=True),
        sa.Column('reviewed_by_id', sa.BigInteger(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('inserted_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name='check_verification_status',
        ),
        sa.ForeignKeyConstraint(['subject_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reviewed_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_verification_requests_id'), 'verification_requests', ['id'], unique=False)
    op.create_index(
        op.f('ix_verification_requests_subject_id'), 'verification_requests', ['subject_id'], unique=False
    )
    op.create_index(
        op.f('ix_verification_requests_status'), 'verification_requests', ['status'], unique=False
    )
    # At most one pending request per subject
    op.create_index(
        'idx_verification_requests_pending_subject',
        'verification_requests',
        ['subject_id'],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
    )


def downgrade() -> None:
    op.drop_table('verification_requests')
    op.drop_table('users_tokens')
    op.drop_table('users')
    op.execute('DROP EXTENSION IF EXISTS citext')
