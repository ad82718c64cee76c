"""003: create products table

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
    # category_id / provider_id are opaque references; categories and
    # providers are managed outside this service.
    op.execute("""
        CREATE TABLE products (
            id              VARCHAR(64)     PRIMARY KEY,
            name            VARCHAR(255)    NOT NULL,
            brand           VARCHAR(128),
            price_cents     BIGINT          NOT NULL,
            stock           INTEGER         NOT NULL DEFAULT 0,
            category_id     VARCHAR(64),
            provider_id     VARCHAR(64),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_products_price_non_negative CHECK (price_cents >= 0),
            CONSTRAINT ck_products_stock_non_negative CHECK (stock >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_products_name ON products (name);")
    op.execute("""
        CREATE TRIGGER trg_products_updated_at
            BEFORE UPDATE ON products
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS products CASCADE;")
