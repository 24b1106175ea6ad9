"""add experience to admins

Revision ID: c3f82a6e5b17
Revises: b7e41c0d9a12
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c3f82a6e5b17'
down_revision: Union[str, Sequence[str], None] = 'b7e41c0d9a12'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Backfill from the approved application the account was created from
    op.add_column('admins', sa.Column('experience', sa.Text(), nullable=True))
    op.execute(
        "UPDATE admins SET experience = ("
        "SELECT admin_requests.experience FROM admin_requests "
        "WHERE admin_requests.id = admins.admin_request_id)"
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_column('admins', 'experience')
