"""004: create marketplace_events audit log

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE marketplace_events (
            id              BIGSERIAL       PRIMARY KEY,
            event_type      VARCHAR(20)     NOT NULL,
            order_id        VARCHAR(64)     NOT NULL,
            payload         JSONB           NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_marketplace_event_type CHECK (
                event_type IN ('LISTED', 'PURCHASED', 'CANCELLED')
            )
        );
    """)
    op.execute("CREATE INDEX idx_marketplace_events_order ON marketplace_events (order_id);")
    op.execute("COMMENT ON TABLE marketplace_events IS 'Append-only; tailed by off-chain indexers';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS marketplace_events CASCADE;")
