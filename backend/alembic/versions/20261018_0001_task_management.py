"""task management schema

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261018_0001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('tasks',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('reference_id', sa.BigInteger(), nullable=False),
        sa.Column('reference_type', sa.String(), nullable=False),
        sa.Column('task_kind', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='ASSIGNED', index=True),
        sa.Column('assignee_id', sa.BigInteger(), nullable=True, index=True),
        sa.Column('task_deadline_time', sa.BigInteger(), nullable=True),
        sa.Column('priority', sa.String(), nullable=True, index=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False)
    )
    op.create_index('ix_tasks_reference', 'tasks', ['reference_id', 'reference_type'])
    op.create_table('task_activities',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('task_id', sa.Integer(), sa.ForeignKey('tasks.id'), nullable=False, index=True),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('timestamp', sa.BigInteger(), nullable=False)
    )
    op.create_table('task_comments',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('task_id', sa.Integer(), sa.ForeignKey('tasks.id'), nullable=False, index=True),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('comment', sa.String(), nullable=False),
        sa.Column('timestamp', sa.BigInteger(), nullable=False)
    )


def downgrade():
    op.drop_table('task_comments')
    op.drop_table('task_activities')
    op.drop_index('ix_tasks_reference', table_name='tasks')
    op.drop_table('tasks')
