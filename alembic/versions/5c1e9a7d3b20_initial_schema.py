"""initial schema

Revision ID: 5c1e9a7d3b20
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e9a7d3b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """Create users and every mirrored entity table."""
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('login', sa.String(length=100), nullable=False),
        sa.Column('access_token', sa.String(length=255), nullable=True),
        sa.Column('last_synced_at', sa.DateTime(), nullable=True),
        sa.Column('last_sync_type', sa.Enum('FULL', 'PARTIAL', name='synctype'), nullable=True),
        sa.Column('sync_in_progress', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('login')
    )
    op.create_table('organizations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('external_id', sa.BigInteger(), nullable=False),
        sa.Column('login', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('url', sa.String(length=500), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('blog', sa.String(length=500), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('public_repos', sa.Integer(), nullable=True),
        sa.Column('followers', sa.Integer(), nullable=True),
        sa.Column('github_created_at', sa.DateTime(), nullable=True),
        sa.Column('github_updated_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'external_id', name='uq_organization_user_external')
    )
    op.create_index('ix_organizations_user_id', 'organizations', ['user_id'])

    op.create_table('repositories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('organization_id', sa.Integer(), nullable=False),
        sa.Column('external_id', sa.BigInteger(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('url', sa.String(length=500), nullable=True),
        sa.Column('owner', sa.JSON(), nullable=True),
        sa.Column('is_private', sa.Boolean(), nullable=False),
        sa.Column('default_branch', sa.String(length=255), nullable=True),
        sa.Column('language', sa.String(length=100), nullable=True),
        sa.Column('stargazers_count', sa.Integer(), nullable=True),
        sa.Column('forks_count', sa.Integer(), nullable=True),
        sa.Column('open_issues_count', sa.Integer(), nullable=True),
        sa.Column('github_created_at', sa.DateTime(), nullable=True),
        sa.Column('github_updated_at', sa.DateTime(), nullable=True),
        sa.Column('pushed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'external_id', name='uq_repository_user_external')
    )
    op.create_index('ix_repositories_user_id', 'repositories', ['user_id'])
    op.create_index('ix_repositories_organization_id', 'repositories', ['organization_id'])
    op.create_index('ix_repositories_full_name', 'repositories', ['full_name'])

    op.create_table('commits',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('repository_id', sa.Integer(), nullable=False),
        sa.Column('sha', sa.String(length=40), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=True),
        sa.Column('author', sa.JSON(), nullable=True),
        sa.Column('committer', sa.JSON(), nullable=True),
        sa.Column('author_account', sa.JSON(), nullable=True),
        sa.Column('committer_account', sa.JSON(), nullable=True),
        sa.Column('verification', sa.JSON(), nullable=True),
        sa.Column('comment_count', sa.Integer(), nullable=True),
        sa.Column('authored_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['repository_id'], ['repositories.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'sha', name='uq_commit_user_sha')
    )
    op.create_index('ix_commits_user_id', 'commits', ['user_id'])
    op.create_index('ix_commits_repository_id', 'commits', ['repository_id'])

    op.create_table('pull_requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('repository_id', sa.Integer(), nullable=False),
        sa.Column('external_id', sa.BigInteger(), nullable=False),
        sa.Column('number', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('body', sa.Text(), nullable=True),
        sa.Column('state', sa.String(length=20), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=True),
        sa.Column('draft', sa.Boolean(), nullable=False),
        sa.Column('author', sa.String(length=100), nullable=True),
        sa.Column('assignee', sa.JSON(), nullable=True),
        sa.Column('assignees', sa.JSON(), nullable=False),
        sa.Column('labels', sa.JSON(), nullable=False),
        sa.Column('commits', sa.JSON(), nullable=False),
        sa.Column('github_created_at', sa.DateTime(), nullable=False),
        sa.Column('github_updated_at', sa.DateTime(), nullable=False),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        sa.Column('merged_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['repository_id'], ['repositories.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'external_id', name='uq_pull_request_user_external')
    )
    op.create_index('ix_pull_requests_user_id', 'pull_requests', ['user_id'])
    op.create_index('ix_pull_requests_repository_id', 'pull_requests', ['repository_id'])

    op.create_table('issues',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('repository_id', sa.Integer(), nullable=False),
        sa.Column('external_id', sa.BigInteger(), nullable=False),
        sa.Column('number', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('body', sa.Text(), nullable=True),
        sa.Column('state', sa.String(length=20), nullable=False),
        sa.Column('state_reason', sa.String(length=50), nullable=True),
        sa.Column('url', sa.String(length=500), nullable=True),
        sa.Column('author', sa.String(length=100), nullable=True),
        sa.Column('assignee', sa.JSON(), nullable=True),
        sa.Column('labels', sa.JSON(), nullable=False),
        sa.Column('closed_by', sa.JSON(), nullable=True),
        sa.Column('reactions', sa.JSON(), nullable=True),
        sa.Column('comments_count', sa.Integer(), nullable=False),
        sa.Column('github_created_at', sa.DateTime(), nullable=False),
        sa.Column('github_updated_at', sa.DateTime(), nullable=False),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['repository_id'], ['repositories.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'external_id', name='uq_issue_user_external')
    )
    op.create_index('ix_issues_user_id', 'issues', ['user_id'])
    op.create_index('ix_issues_repository_id', 'issues', ['repository_id'])

    op.create_table('issue_history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('issue_id', sa.Integer(), nullable=False),
        sa.Column('repository_id', sa.Integer(), nullable=False),
        sa.Column('external_id', sa.String(length=64), nullable=False),
        sa.Column('event', sa.String(length=64), nullable=False),
        sa.Column('actor', sa.JSON(), nullable=True),
        sa.Column('occurred_at', sa.DateTime(), nullable=True),
        sa.Column('summary', sa.Text(), nullable=False),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('commit_id', sa.String(length=40), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['issue_id'], ['issues.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['repository_id'], ['repositories.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'issue_id', 'external_id', name='uq_issue_history_event')
    )
    op.create_index('ix_issue_history_user_id', 'issue_history', ['user_id'])
    op.create_index('ix_issue_history_issue_id', 'issue_history', ['issue_id'])
    op.create_index('ix_issue_history_repository_id', 'issue_history', ['repository_id'])

    op.create_table('organization_users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('organization_id', sa.Integer(), nullable=False),
        sa.Column('external_id', sa.BigInteger(), nullable=False),
        sa.Column('login', sa.String(length=100), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('url', sa.String(length=500), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('company', sa.String(length=255), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('public_repos', sa.Integer(), nullable=True),
        sa.Column('followers', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('external_id', 'organization_id', 'user_id', name='uq_organization_user_member')
    )
    op.create_index('ix_organization_users_user_id', 'organization_users', ['user_id'])
    op.create_index('ix_organization_users_organization_id', 'organization_users', ['organization_id'])


def downgrade() -> None:
    """Drop every table (children first)."""
    op.drop_table('organization_users')
    op.drop_table('issue_history')
    op.drop_table('issues')
    op.drop_table('pull_requests')
    op.drop_table('commits')
    op.drop_table('repositories')
    op.drop_table('organizations')
    op.drop_table('users')
    sa.Enum(name='synctype').drop(op.get_bind(), checkfirst=True)
