"""003: create sale_orders registry, order_history and the item id sequence

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("CREATE SEQUENCE sale_order_item_id_seq START WITH 1 INCREMENT BY 1;")
    op.execute("""
        CREATE TABLE sale_orders (
            order_id        VARCHAR(64)     PRIMARY KEY,
            item_id         BIGINT          NOT NULL,
            asset_address   VARCHAR(128)    NOT NULL,
            asset_id        NUMERIC(78, 0)  NOT NULL,
            seller          VARCHAR(64)     NOT NULL,
            price           BIGINT          NOT NULL,
            buyer           VARCHAR(64),
            sold            BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_sale_orders_item_id UNIQUE (item_id),
            CONSTRAINT uq_sale_orders_asset   UNIQUE (asset_address, asset_id),
            CONSTRAINT ck_sale_orders_price_gt_0 CHECK (price > 0)
        );
    """)
    op.execute("""
        CREATE TABLE order_history (
            item_id         BIGINT          PRIMARY KEY,
            order_id        VARCHAR(64)     NOT NULL,
            asset_address   VARCHAR(128)    NOT NULL,
            asset_id        NUMERIC(78, 0)  NOT NULL,
            seller          VARCHAR(64)     NOT NULL,
            price           BIGINT          NOT NULL,
            status          VARCHAR(20)     NOT NULL DEFAULT 'OPEN',
            buyer           VARCHAR(64),
            amount_paid     BIGINT,
            created_at      TIMESTAMPTZ     NOT NULL,
            closed_at       TIMESTAMPTZ,
            CONSTRAINT uq_order_history_order_id UNIQUE (order_id),
            CONSTRAINT ck_order_history_status CHECK (status IN ('OPEN', 'SOLD', 'CANCELLED')),
            CONSTRAINT ck_order_history_sold_has_buyer CHECK (
                status <> 'SOLD' OR (buyer IS NOT NULL AND amount_paid >= price)
            )
        );
    """)
    op.execute("CREATE INDEX idx_order_history_buyer ON order_history (buyer, item_id);")
    op.execute("CREATE INDEX idx_order_history_seller ON order_history (seller, item_id);")
    op.execute("COMMENT ON TABLE sale_orders IS 'Open orders only; rows deleted on sale or cancel';")
    op.execute("COMMENT ON TABLE order_history IS 'Every order ever created, never deleted';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS order_history CASCADE;")
    op.execute("DROP TABLE IF EXISTS sale_orders CASCADE;")
    op.execute("DROP SEQUENCE IF EXISTS sale_order_item_id_seq;")
