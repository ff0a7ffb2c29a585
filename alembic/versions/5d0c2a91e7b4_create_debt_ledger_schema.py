"""create debt ledger schema

Revision ID: 5d0c2a91e7b4
Revises:
Create Date: 2026-10-19 09:12:40.118522

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5d0c2a91e7b4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

categorytype = sa.Enum('income', 'expense', name='categorytype')
transactiontype = sa.Enum('income', 'expense', name='transactiontype')
debttransactiontype = sa.Enum('payment', 'increase', name='debttransactiontype')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('type', categorytype, nullable=False),
        sa.Column('icon', sa.String(), nullable=True),
        sa.Column('color', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_categories_user_id', 'categories', ['user_id'])

    op.create_table(
        'debts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('interest_rate', sa.Float(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_debts_user_id', 'debts', ['user_id'])

    op.create_table(
        'debt_transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('debt_id', sa.Integer(), sa.ForeignKey('debts.id'), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('type', debttransactiontype, nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_debt_transactions_user_id', 'debt_transactions', ['user_id'])
    op.create_index('ix_debt_transactions_debt_id', 'debt_transactions', ['debt_id'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('type', transactiontype, nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('debt_id', sa.Integer(), nullable=True),
        sa.Column('debt_transaction_id', sa.Integer(), nullable=True),
        sa.Column('source_type', sa.String(), nullable=True),
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_debt_transaction_id', 'transactions', ['debt_transaction_id'])
    op.create_foreign_key(
        'fk_transactions_debt_id', 'transactions', 'debts',
        ['debt_id'], ['id'], ondelete='SET NULL'
    )
    op.create_foreign_key(
        'fk_transactions_debt_transaction_id', 'transactions', 'debt_transactions',
        ['debt_transaction_id'], ['id'], ondelete='SET NULL'
    )


def downgrade():
    op.drop_table('transactions')
    op.drop_table('debt_transactions')
    op.drop_table('debts')
    op.drop_table('categories')
    op.drop_table('users')
    debttransactiontype.drop(op.get_bind(), checkfirst=True)
    transactiontype.drop(op.get_bind(), checkfirst=True)
    categorytype.drop(op.get_bind(), checkfirst=True)
