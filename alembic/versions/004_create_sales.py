"""004: create sales and sale_items tables

Revision ID: 004
Revises: 003
Create Date: 2026-10-19

sales.user_id and sale_items.product_id carry no foreign keys: users and
products may be removed after the sale, and the sale keeps its snapshot
(user_name/user_email, product_name/price_cents).
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE sales (
            id                    VARCHAR(64)     PRIMARY KEY,
            user_id               VARCHAR(64)     NOT NULL,
            user_name             VARCHAR(128)    NOT NULL,
            user_email            VARCHAR(255)    NOT NULL,
            total_cents           BIGINT          NOT NULL,
            shipping_cost_cents   BIGINT          NOT NULL DEFAULT 0,
            payment_method        VARCHAR(16)     NOT NULL,
            status                VARCHAR(16)     NOT NULL DEFAULT 'completed',
            delivery_method       VARCHAR(16)     NOT NULL,
            order_status          VARCHAR(32)     NOT NULL DEFAULT 'En preparación',
            delivery_street       VARCHAR(255),
            delivery_city         VARCHAR(128),
            delivery_postal_code  VARCHAR(32),
            delivery_country      VARCHAR(128),
            delivery_notes        TEXT,
            created_at            TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at            TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_sales_total_positive     CHECK (total_cents > 0),
            CONSTRAINT ck_sales_shipping_non_neg   CHECK (shipping_cost_cents >= 0),
            CONSTRAINT ck_sales_payment_method     CHECK (payment_method IN
                ('credit_card', 'debit_card', 'cash', 'transfer')),
            CONSTRAINT ck_sales_status             CHECK (status IN
                ('pending', 'completed', 'cancelled')),
            CONSTRAINT ck_sales_delivery_method    CHECK (delivery_method IN
                ('home_delivery', 'local_pickup')),
            CONSTRAINT ck_sales_order_status       CHECK (
                (delivery_method = 'home_delivery'
                    AND order_status IN ('En preparación', 'En envío', 'Entregado'))
                OR (delivery_method = 'local_pickup'
                    AND order_status IN ('En preparación', 'Preparado', 'Entregado'))
            ),
            CONSTRAINT ck_sales_home_delivery_address CHECK (
                delivery_method <> 'home_delivery'
                OR (delivery_street IS NOT NULL AND delivery_city IS NOT NULL
                    AND delivery_postal_code IS NOT NULL AND delivery_country IS NOT NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_sales_user_created ON sales (user_id, created_at DESC);")
    op.execute("CREATE INDEX idx_sales_created ON sales (created_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_sales_updated_at
            BEFORE UPDATE ON sales
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)

    op.execute("""
        CREATE TABLE sale_items (
            sale_id         VARCHAR(64)     NOT NULL REFERENCES sales (id) ON DELETE CASCADE,
            line_no         INTEGER         NOT NULL,
            product_id      VARCHAR(64)     NOT NULL,
            product_name    VARCHAR(255)    NOT NULL,
            quantity        INTEGER         NOT NULL,
            price_cents     BIGINT          NOT NULL,
            PRIMARY KEY (sale_id, line_no),
            CONSTRAINT ck_sale_items_quantity_positive CHECK (quantity >= 1),
            CONSTRAINT ck_sale_items_price_non_neg     CHECK (price_cents >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_sale_items_product ON sale_items (product_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS sale_items CASCADE;")
    op.execute("DROP TABLE IF EXISTS sales CASCADE;")
