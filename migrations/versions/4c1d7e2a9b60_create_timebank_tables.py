"""create_timebank_tables

Revision ID: 4c1d7e2a9b60
Revises:
Create Date: 2026-10-12 09:41:17.204913

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d7e2a9b60'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, skills, tasks, task_completions, credits and badges."""
    op.create_table('profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table('skills',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('skill_name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False, server_default='other'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "category IN ('teaching', 'repairs', 'cleaning', 'caregiving', 'other')",
            name='ck_skills_category',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_skills_user_id', 'skills', ['user_id'], unique=False)
    op.create_index('ix_skills_category', 'skills', ['category'], unique=False)

    op.create_table('tasks',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('requester_id', sa.UUID(), nullable=False),
        sa.Column('provider_id', sa.UUID(), nullable=True),
        sa.Column('skill_id', sa.UUID(), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=20), nullable=True),
        sa.Column('credits_value', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='open'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('credits_value > 0', name='ck_tasks_credits_positive'),
        sa.CheckConstraint(
            "status IN ('open', 'accepted', 'completed', 'cancelled')",
            name='ck_tasks_status',
        ),
        sa.CheckConstraint(
            'provider_id IS NULL OR provider_id <> requester_id',
            name='ck_tasks_no_self_dealing',
        ),
        sa.ForeignKeyConstraint(['requester_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['provider_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['skill_id'], ['skills.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tasks_requester_id', 'tasks', ['requester_id'], unique=False)
    op.create_index('ix_tasks_provider_id', 'tasks', ['provider_id'], unique=False)
    op.create_index('ix_tasks_skill_id', 'tasks', ['skill_id'], unique=False)
    op.create_index('ix_tasks_status', 'tasks', ['status'], unique=False)

    op.create_table('task_completions',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('task_id', sa.UUID(), nullable=False),
        sa.Column('provider_id', sa.UUID(), nullable=False),
        sa.Column('requester_id', sa.UUID(), nullable=False),
        sa.Column('credits_transferred', sa.Integer(), nullable=False),
        sa.Column(
            'confirmation_status', sa.String(length=20), nullable=False, server_default='pending'
        ),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('confirmed_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "confirmation_status IN ('pending', 'approved')",
            name='ck_task_completions_status',
        ),
        sa.ForeignKeyConstraint(['task_id'], ['tasks.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['provider_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['requester_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('task_id'),
    )
    op.create_index(
        'ix_task_completions_provider_id', 'task_completions', ['provider_id'], unique=False
    )
    op.create_index(
        'ix_task_completions_requester_id', 'task_completions', ['requester_id'], unique=False
    )

    op.create_table('credits',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('transaction_type', sa.String(length=20), nullable=False),
        sa.Column('related_task_id', sa.UUID(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "(transaction_type = 'earned' AND amount > 0) "
            "OR (transaction_type = 'spent' AND amount < 0)",
            name='ck_credits_signed_amount',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['related_task_id'], ['tasks.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_credits_user_id', 'credits', ['user_id'], unique=False)
    op.create_index('ix_credits_related_task_id', 'credits', ['related_task_id'], unique=False)

    op.create_table('badges',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('badge_type', sa.String(length=50), nullable=False),
        sa.Column('badge_name', sa.String(length=100), nullable=False),
        sa.Column('earned_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_badges_user_id', 'badges', ['user_id'], unique=False)

    # The API connects as the table owner; RLS guards direct client access.
    for table in ('profiles', 'skills', 'tasks', 'task_completions', 'credits', 'badges'):
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # Community-visible tables
    for table in ('profiles', 'skills', 'tasks', 'badges'):
        op.execute(f"""
            CREATE POLICY {table}_select ON {table}
                FOR SELECT USING ((SELECT auth.uid()) IS NOT NULL);
        """)

    # The ledger is private to its owner and written only by the API
    op.execute("""
        CREATE POLICY credits_select ON credits
            FOR SELECT USING (user_id = (SELECT auth.uid()));
    """)
    op.execute("""
        CREATE POLICY task_completions_select ON task_completions
            FOR SELECT USING (
                provider_id = (SELECT auth.uid())
                OR requester_id = (SELECT auth.uid())
            );
    """)


def downgrade() -> None:
    """Drop all time bank tables."""
    op.execute("DROP POLICY IF EXISTS task_completions_select ON task_completions;")
    op.execute("DROP POLICY IF EXISTS credits_select ON credits;")
    for table in ('profiles', 'skills', 'tasks', 'badges'):
        op.execute(f"DROP POLICY IF EXISTS {table}_select ON {table};")

    op.drop_index('ix_badges_user_id', table_name='badges')
    op.drop_table('badges')
    op.drop_index('ix_credits_related_task_id', table_name='credits')
    op.drop_index('ix_credits_user_id', table_name='credits')
    op.drop_table('credits')
    op.drop_index('ix_task_completions_requester_id', table_name='task_completions')
    op.drop_index('ix_task_completions_provider_id', table_name='task_completions')
    op.drop_table('task_completions')
    op.drop_index('ix_tasks_status', table_name='tasks')
    op.drop_index('ix_tasks_skill_id', table_name='tasks')
    op.drop_index('ix_tasks_provider_id', table_name='tasks')
    op.drop_index('ix_tasks_requester_id', table_name='tasks')
    op.drop_table('tasks')
    op.drop_index('ix_skills_category', table_name='skills')
    op.drop_index('ix_skills_user_id', table_name='skills')
    op.drop_table('skills')
    op.drop_table('profiles')
