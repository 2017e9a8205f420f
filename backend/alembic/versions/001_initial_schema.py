"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ENUM_TYPES = {
    'funding_type': ('NEW', 'RENEWAL', 'REFINANCE', 'BUYOUT', 'OTHER'),
    'application_type': ('NEW', 'RENEWAL', 'RESUBMISSION', 'RENEWAL_RESUBMISSION'),
    'stipulation_status': ('REQUESTED', 'RECEIVED', 'VERIFIED', 'WAIVED'),
    'payment_method': ('ACH', 'WIRE', 'CHECK', 'OTHER'),
    'payback_frequency': ('DAILY', 'WEEKLY', 'MONTHLY'),
    'payback_status': ('SUBMITTED', 'PROCESSING', 'BOUNCED', 'SUCCEED', 'FAILED', 'DISPUTED'),
    'payback_plan_status': ('ACTIVE', 'PAUSED', 'STOPPED'),
    'distribution_priority': ('FUND', 'FEE', 'BOTH'),
    'intent_status': ('SCHEDULED', 'SUBMITTED', 'SUCCEED', 'FAILED', 'CANCELLED'),
    'transfer_status': ('SUBMITTED', 'PROCESSING', 'SUCCEED', 'FAILED'),
    'syndication_offer_status': ('SUBMITTED', 'DECLINED', 'ACCEPTED', 'CANCELLED', 'EXPIRED'),
    'syndication_status': ('ACTIVE', 'CLOSED'),
}

# (table, column) pairs carrying an ix_<table>_<column> index
INDEXES = [
    ('funders', 'name'), ('funders', 'inactive'),
    ('lenders', 'funder_id'), ('lenders', 'name'), ('lenders', 'inactive'),
    ('merchants', 'name'), ('merchants', 'inactive'),
    ('isos', 'name'), ('isos', 'inactive'),
    ('syndicators', 'name'), ('syndicators', 'inactive'),
    ('applications', 'name'), ('applications', 'identifier'), ('applications', 'type'),
    ('applications', 'merchant_id'), ('applications', 'merchant_name'),
    ('applications', 'funder_id'), ('applications', 'funder_name'),
    ('applications', 'iso_id'), ('applications', 'iso_name'),
    ('applications', 'priority'), ('applications', 'closed'), ('applications', 'inactive'),
    ('application_stipulations', 'application_id'), ('application_stipulations', 'status'),
    ('fundings', 'name'), ('fundings', 'identifier'), ('fundings', 'application_id'),
    ('fundings', 'funder_id'), ('fundings', 'funder_name'),
    ('fundings', 'lender_id'), ('fundings', 'lender_name'),
    ('fundings', 'merchant_id'), ('fundings', 'merchant_name'),
    ('fundings', 'closed'), ('fundings', 'warning'), ('fundings', 'defaulted'), ('fundings', 'inactive'),
    ('funding_fees', 'funding_id'), ('funding_fees', 'inactive'),
    ('funding_expenses', 'funding_id'), ('funding_expenses', 'inactive'),
    ('funding_credits', 'funding_id'), ('funding_credits', 'inactive'),
    ('payback_plans', 'funding_id'), ('payback_plans', 'merchant_id'), ('payback_plans', 'funder_id'),
    ('payback_plans', 'lender_id'), ('payback_plans', 'next_payback_date'), ('payback_plans', 'status'),
    ('paybacks', 'funding_id'), ('paybacks', 'payback_plan_id'), ('paybacks', 'merchant_id'),
    ('paybacks', 'funder_id'), ('paybacks', 'due_date'), ('paybacks', 'status'),
    ('disbursement_intents', 'funding_id'), ('disbursement_intents', 'status'),
    ('disbursements', 'disbursement_intent_id'), ('disbursements', 'funding_id'), ('disbursements', 'status'),
    ('commission_intents', 'funding_id'), ('commission_intents', 'iso_id'), ('commission_intents', 'status'),
    ('commissions', 'commission_intent_id'), ('commissions', 'funding_id'), ('commissions', 'status'),
    ('syndication_offers', 'funding_id'), ('syndication_offers', 'funder_id'),
    ('syndication_offers', 'syndicator_id'), ('syndication_offers', 'funding_name'),
    ('syndication_offers', 'status'), ('syndication_offers', 'inactive'),
    ('syndications', 'funding_id'), ('syndications', 'funder_id'), ('syndications', 'syndicator_id'),
    ('syndications', 'syndication_offer_id'), ('syndications', 'funding_name'),
    ('syndications', 'status'), ('syndications', 'inactive'),
    ('payouts', 'funding_id'), ('payouts', 'funder_id'), ('payouts', 'syndicator_id'),
    ('payouts', 'syndication_id'), ('payouts', 'payback_id'), ('payouts', 'pending'), ('payouts', 'inactive'),
]


def _base_columns():
    return [
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def _enum(name):
    return postgresql.ENUM(name=name, create_type=False)


def _embedded(prefix):
    return [
        sa.Column(f'{prefix}_name', sa.String(length=255), nullable=True),
        sa.Column(f'{prefix}_email', sa.String(length=255), nullable=True),
        sa.Column(f'{prefix}_phone', sa.String(length=20), nullable=True),
    ]


def _flag(name, default='false'):
    return sa.Column(name, sa.Boolean(), nullable=False, server_default=sa.text(default))


def _money(name, nullable=False, server_default=None):
    return sa.Column(name, sa.Numeric(precision=15, scale=2), nullable=nullable, server_default=server_default)


def upgrade() -> None:
    # Create ENUM types
    for name, values in ENUM_TYPES.items():
        labels = ", ".join(f"'{value}'" for value in values)
        op.execute(f"CREATE TYPE {name} AS ENUM ({labels})")

    # Counterparties
    for table in ('funders', 'merchants', 'isos', 'syndicators'):
        extra = [sa.Column('dba_name', sa.String(length=255), nullable=True)] if table == 'merchants' else []
        op.create_table(
            table,
            *_base_columns(),
            sa.Column('name', sa.String(length=255), nullable=False),
            *extra,
            sa.Column('email', sa.String(length=255), nullable=True),
            sa.Column('phone', sa.String(length=20), nullable=True),
            _flag('inactive'),
        )

    op.create_table(
        'lenders',
        *_base_columns(),
        sa.Column('funder_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        _flag('inactive'),
        sa.ForeignKeyConstraint(['funder_id'], ['funders.id'], ondelete='CASCADE'),
    )

    # Applications
    op.create_table(
        'applications',
        *_base_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('identifier', sa.String(length=100), nullable=True),
        sa.Column('type', _enum('application_type'), nullable=False),
        sa.Column('merchant_id', postgresql.UUID(as_uuid=True), nullable=False),
        *_embedded('merchant'),
        sa.Column('funder_id', postgresql.UUID(as_uuid=True), nullable=False),
        *_embedded('funder'),
        sa.Column('iso_id', postgresql.UUID(as_uuid=True), nullable=True),
        *_embedded('iso'),
        _money('request_amount'),
        sa.Column('request_date', sa.Date(), nullable=False),
        _flag('priority'),
        _flag('internal'),
        _flag('closed'),
        sa.Column('declined_reason', sa.Text(), nullable=True),
        _flag('inactive'),
        sa.ForeignKeyConstraint(['merchant_id'], ['merchants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['funder_id'], ['funders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['iso_id'], ['isos.id'], ondelete='SET NULL'),
    )

    op.create_table(
        'application_stipulations',
        *_base_columns(),
        sa.Column('application_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('status', _enum('stipulation_status'), nullable=False, server_default='REQUESTED'),
        sa.Column('note', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['application_id'], ['applications.id'], ondelete='CASCADE'),
    )

    # Fundings and their adjustments
    op.create_table(
        'fundings',
        *_base_columns(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('identifier', sa.String(length=100), nullable=True),
        sa.Column('type', _enum('funding_type'), nullable=False, server_default='NEW'),
        sa.Column('application_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('funder_id', postgresql.UUID(as_uuid=True), nullable=False),
        *_embedded('funder'),
        sa.Column('lender_id', postgresql.UUID(as_uuid=True), nullable=True),
        *_embedded('lender'),
        sa.Column('merchant_id', postgresql.UUID(as_uuid=True), nullable=False),
        *_embedded('merchant'),
        _money('funded_amount'),
        _money('payback_amount'),
        sa.Column('position', sa.Integer(), nullable=True),
        _flag('closed'),
        _flag('warning'),
        _flag('defaulted'),
        _flag('internal'),
        _flag('inactive'),
        sa.ForeignKeyConstraint(['application_id'], ['applications.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['funder_id'], ['funders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['lender_id'], ['lenders.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['merchant_id'], ['merchants.id'], ondelete='CASCADE'),
    )

    for table, flag in (('funding_fees', 'upfront'), ('funding_expenses', 'commission'), ('funding_credits', None)):
        extra = [_flag(flag)] if flag else []
        op.create_table(
            table,
            *_base_columns(),
            sa.Column('funding_id', postgresql.UUID(as_uuid=True), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=True),
            _money('amount'),
            *extra,
            _flag('inactive'),
            sa.ForeignKeyConstraint(['funding_id'], ['fundings.id'], ondelete='CASCADE'),
        )

    # Payback plans and paybacks
    op.create_table(
        'payback_plans',
        *_base_columns(),
        sa.Column('funding_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('merchant_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('funder_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('lender_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('payment_method', _enum('payment_method'), nullable=True),
        _money('total_amount'),
        sa.Column('payback_count', sa.Integer(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('next_payback_date', sa.Date(), nullable=True),
        sa.Column('frequency', _enum('payback_frequency'), nullable=True),
        sa.Column('payday_list', sa.JSON(), nullable=False),
        _flag('avoid_holiday'),
        sa.Column('distribution_priority', _enum('distribution_priority'), nullable=False, server_default='FUND'),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('status', _enum('payback_plan_status'), nullable=False, server_default='ACTIVE'),
        sa.ForeignKeyConstraint(['funding_id'], ['fundings.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['merchant_id'], ['merchants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['funder_id'], ['funders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['lender_id'], ['lenders.id'], ondelete='SET NULL'),
    )

    op.create_table(
        'paybacks',
        *_base_columns(),
        sa.Column('funding_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('payback_plan_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('merchant_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('funder_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('submitted_date', sa.Date(), nullable=True),
        sa.Column('processed_date', sa.Date(), nullable=True),
        _money('payback_amount'),
        _money('funded_amount', server_default='0.00'),
        _money('fee_amount', server_default='0.00'),
        sa.Column('payment_method', _enum('payment_method'), nullable=True),
        sa.Column('status', _enum('payback_status'), nullable=False, server_default='SUBMITTED'),
        sa.Column('note', sa.Text(), nullable=True),
        _flag('reconciled'),
        sa.ForeignKeyConstraint(['funding_id'], ['fundings.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['payback_plan_id'], ['payback_plans.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['merchant_id'], ['merchants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['funder_id'], ['funders.id'], ondelete='CASCADE'),
    )

    # Disbursement and commission intents with their transfers
    for intent_table, transfer_table, extra in (
        ('disbursement_intents', 'disbursements', []),
        ('commission_intents', 'commissions', ['iso_id']),
    ):
        op.create_table(
            intent_table,
            *_base_columns(),
            sa.Column('funding_id', postgresql.UUID(as_uuid=True), nullable=False),
            *[sa.Column(column, postgresql.UUID(as_uuid=True), nullable=True) for column in extra],
            _money('amount'),
            sa.Column('scheduled_date', sa.Date(), nullable=True),
            sa.Column('payment_method', _enum('payment_method'), nullable=True),
            sa.Column('status', _enum('intent_status'), nullable=False, server_default='SCHEDULED'),
            sa.Column('note', sa.Text(), nullable=True),
            sa.ForeignKeyConstraint(['funding_id'], ['fundings.id'], ondelete='CASCADE'),
            *[sa.ForeignKeyConstraint([column], ['isos.id'], ondelete='SET NULL') for column in extra],
        )

        intent_column = f"{intent_table[:-1]}_id"
        op.create_table(
            transfer_table,
            *_base_columns(),
            sa.Column(intent_column, postgresql.UUID(as_uuid=True), nullable=False),
            sa.Column('funding_id', postgresql.UUID(as_uuid=True), nullable=False),
            _money('amount'),
            sa.Column('transfer_date', sa.Date(), nullable=True),
            sa.Column('status', _enum('transfer_status'), nullable=False, server_default='SUBMITTED'),
            sa.ForeignKeyConstraint([intent_column], [f'{intent_table}.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['funding_id'], ['fundings.id'], ondelete='CASCADE'),
        )

    # Syndication
    op.create_table(
        'syndication_offers',
        *_base_columns(),
        sa.Column('funding_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('funder_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('syndicator_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('funding_name', sa.String(length=255), nullable=True),
        sa.Column('funding_identifier', sa.String(length=100), nullable=True),
        sa.Column('participate_percent', sa.Numeric(precision=7, scale=4), nullable=False),
        _money('participate_amount'),
        _money('payback_amount'),
        sa.Column('fee_list', sa.JSON(), nullable=False),
        sa.Column('credit_list', sa.JSON(), nullable=False),
        sa.Column('offered_date', sa.Date(), nullable=True),
        sa.Column('status', _enum('syndication_offer_status'), nullable=False, server_default='SUBMITTED'),
        _flag('inactive'),
        sa.ForeignKeyConstraint(['funding_id'], ['fundings.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['funder_id'], ['funders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['syndicator_id'], ['syndicators.id'], ondelete='CASCADE'),
    )

    op.create_table(
        'syndications',
        *_base_columns(),
        sa.Column('funding_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('funder_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('syndicator_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('syndication_offer_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('funding_name', sa.String(length=255), nullable=True),
        sa.Column('funding_identifier', sa.String(length=100), nullable=True),
        sa.Column('participate_percent', sa.Numeric(precision=7, scale=4), nullable=False),
        _money('participate_amount'),
        _money('payback_amount'),
        sa.Column('fee_list', sa.JSON(), nullable=False),
        sa.Column('credit_list', sa.JSON(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('status', _enum('syndication_status'), nullable=False, server_default='ACTIVE'),
        _flag('inactive'),
        sa.ForeignKeyConstraint(['funding_id'], ['fundings.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['funder_id'], ['funders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['syndicator_id'], ['syndicators.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['syndication_offer_id'], ['syndication_offers.id'], ondelete='SET NULL'),
    )

    op.create_table(
        'payouts',
        *_base_columns(),
        sa.Column('funding_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('funder_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('syndicator_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('syndication_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('payback_id', postgresql.UUID(as_uuid=True), nullable=True),
        _money('payout_amount'),
        _money('fee_amount', server_default='0.00'),
        _money('credit_amount', server_default='0.00'),
        _flag('pending', default='true'),
        _flag('inactive'),
        sa.ForeignKeyConstraint(['funding_id'], ['fundings.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['funder_id'], ['funders.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['syndicator_id'], ['syndicators.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['syndication_id'], ['syndications.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['payback_id'], ['paybacks.id'], ondelete='SET NULL'),
    )

    for table, column in INDEXES:
        op.create_index(f'ix_{table}_{column}', table, [column])


def downgrade() -> None:
    for table, column in reversed(INDEXES):
        op.drop_index(f'ix_{table}_{column}', table_name=table)

    op.drop_table('payouts')
    op.drop_table('syndications')
    op.drop_table('syndication_offers')
    op.drop_table('commissions')
    op.drop_table('commission_intents')
    op.drop_table('disbursements')
    op.drop_table('disbursement_intents')
    op.drop_table('paybacks')
    op.drop_table('payback_plans')
    op.drop_table('funding_credits')
    op.drop_table('funding_expenses')
    op.drop_table('funding_fees')
    op.drop_table('fundings')
    op.drop_table('application_stipulations')
    op.drop_table('applications')
    op.drop_table('lenders')
    op.drop_table('syndicators')
    op.drop_table('isos')
    op.drop_table('merchants')
    op.drop_table('funders')

    # Drop ENUM types
    for name in reversed(list(ENUM_TYPES)):
        op.execute(f'DROP TYPE {name}')
