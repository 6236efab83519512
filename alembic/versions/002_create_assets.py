"""002: create assets custody table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE assets (
            asset_address   VARCHAR(128)    NOT NULL,
            asset_id        NUMERIC(78, 0)  NOT NULL,
            owner_id        VARCHAR(64)     NOT NULL,
            approved_id     VARCHAR(64),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (asset_address, asset_id),
            CONSTRAINT ck_assets_address_lower CHECK (asset_address = lower(asset_address)),
            CONSTRAINT ck_assets_id_gte_0      CHECK (asset_id >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_assets_owner ON assets (owner_id);")
    op.execute("""
        CREATE TRIGGER trg_assets_updated_at
            BEFORE UPDATE ON assets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS assets CASCADE;")
