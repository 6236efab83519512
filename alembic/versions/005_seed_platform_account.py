"""005: seed the platform commission account

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Must match settings.PLATFORM_OWNER_ID; override deployments add their own row.
    op.execute("""
        INSERT INTO accounts (user_id, available_balance, version)
        VALUES ('PLATFORM_FEE', 0, 0)
        ON CONFLICT (user_id) DO NOTHING;
    """)


def downgrade() -> None:
    op.execute("DELETE FROM accounts WHERE user_id = 'PLATFORM_FEE';")
