"""initial schema

Revision ID: 3b1f0c2a9d10
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3b1f0c2a9d10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('preferred_name', sa.String(), nullable=False),
        sa.Column('picture', sa.String(), nullable=True),
        sa.Column('inactive', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'organizations',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('picture', sa.String(), nullable=True),
        sa.Column('stripe_id', sa.String(), nullable=True),
        sa.Column('stripe_subscription_id', sa.String(), nullable=True),
        sa.Column('active_user_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('inactive_user_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('period_start', sa.DateTime(), nullable=True),
        sa.Column('period_end', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_organizations_name', 'organizations', ['name'], unique=False)
    op.create_index('ix_organizations_stripe_id', 'organizations', ['stripe_id'], unique=False)
    op.create_index('ix_organizations_stripe_subscription_id', 'organizations', ['stripe_subscription_id'], unique=True)

    op.create_table(
        'organization_users',
        sa.Column('org_id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False, server_default='member'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['org_id'], ['organizations.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('org_id', 'user_id'),
    )
    op.create_index('ix_organization_users_org_id', 'organization_users', ['org_id'], unique=False)
    op.create_index('ix_organization_users_user_id', 'organization_users', ['user_id'], unique=False)

    op.create_table(
        'invoice_item_hooks',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('org_id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('proration_date', sa.Integer(), nullable=False),
        sa.Column('stripe_subscription_id', sa.String(), nullable=False),
        sa.Column('invoice_item_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['org_id'], ['organizations.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('invoice_item_id'),
    )
    op.create_index('ix_invoice_item_hooks_user_id', 'invoice_item_hooks', ['user_id'], unique=False)
    op.create_index('ix_invoice_item_hooks_stripe_subscription_id', 'invoice_item_hooks', ['stripe_subscription_id'], unique=False)
    # Webhook lookups and pause counting filter on proration date first
    op.create_index('ix_invoice_item_hooks_proration_date_org_id', 'invoice_item_hooks', ['proration_date', 'org_id'], unique=False)

    op.create_table(
        'teams',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('org_id', sa.String(), nullable=False),
        sa.Column('meeting_id', sa.String(), nullable=True),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['org_id'], ['organizations.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_teams_org_id', 'teams', ['org_id'], unique=False)

    op.create_table(
        'team_members',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('team_id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('is_not_removed', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_team_members_team_id', 'team_members', ['team_id'], unique=False)
    op.create_index('ix_team_members_user_id', 'team_members', ['user_id'], unique=False)

    op.create_table(
        'agenda_items',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('team_id', sa.String(), nullable=False),
        sa.Column('team_member_id', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id']),
        sa.ForeignKeyConstraint(['team_member_id'], ['team_members.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_agenda_items_team_id', 'agenda_items', ['team_id'], unique=False)

    op.create_table(
        'reflect_templates',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('team_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('last_used_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reflect_templates_team_id', 'reflect_templates', ['team_id'], unique=False)

    op.create_table(
        'retro_phase_items',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('team_id', sa.String(), nullable=False),
        sa.Column('template_id', sa.String(), nullable=False),
        sa.Column('phase_item_type', sa.String(), nullable=False, server_default='retroPhaseItem'),
        sa.Column('question', sa.String(), nullable=False),
        sa.Column('group_color', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id']),
        sa.ForeignKeyConstraint(['template_id'], ['reflect_templates.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_retro_phase_items_team_id', 'retro_phase_items', ['team_id'], unique=False)
    op.create_index('ix_retro_phase_items_template_id', 'retro_phase_items', ['template_id'], unique=False)


def downgrade():
    op.drop_index('ix_retro_phase_items_template_id', table_name='retro_phase_items')
    op.drop_index('ix_retro_phase_items_team_id', table_name='retro_phase_items')
    op.drop_table('retro_phase_items')
    op.drop_index('ix_reflect_templates_team_id', table_name='reflect_templates')
    op.drop_table('reflect_templates')
    op.drop_index('ix_agenda_items_team_id', table_name='agenda_items')
    op.drop_table('agenda_items')
    op.drop_index('ix_team_members_user_id', table_name='team_members')
    op.drop_index('ix_team_members_team_id', table_name='team_members')
    op.drop_table('team_members')
    op.drop_index('ix_teams_org_id', table_name='teams')
    op.drop_table('teams')
    op.drop_index('ix_invoice_item_hooks_proration_date_org_id', table_name='invoice_item_hooks')
    op.drop_index('ix_invoice_item_hooks_stripe_subscription_id', table_name='invoice_item_hooks')
    op.drop_index('ix_invoice_item_hooks_user_id', table_name='invoice_item_hooks')
    op.drop_table('invoice_item_hooks')
    op.drop_index('ix_organization_users_user_id', table_name='organization_users')
    op.drop_index('ix_organization_users_org_id', table_name='organization_users')
    op.drop_table('organization_users')
    op.drop_index('ix_organizations_stripe_subscription_id', table_name='organizations')
    op.drop_index('ix_organizations_stripe_id', table_name='organizations')
    op.drop_index('ix_organizations_name', table_name='organizations')
    op.drop_table('organizations')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
