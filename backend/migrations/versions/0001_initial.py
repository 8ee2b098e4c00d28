"""Initial schema – users, sessions, catalog, cart and orders

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

Creates every table with the foreign-key constraints and indexes required
by the application.
"""

from alembic import op
import sqlalchemy as sa

# Alembic revision identifiers
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(with_updated: bool = True):
    cols = [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]
    if with_updated:
        cols.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
        )
    return cols


def upgrade() -> None:
    # -- users ----------------------------------------------------------
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("salt", sa.String(255), nullable=False),
        sa.Column(
            "role",
            sa.Enum("admin", "user", name="user_role"),
            nullable=False,
            server_default="user",
        ),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("addresses", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_users_email", "users", ["email"])

    # -- sessions -------------------------------------------------------
    op.create_table(
        "sessions",
        sa.Column("id", sa.String(64), primary_key=True),
        # {"id": ..., "role": ...} only – never password material
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_sessions_expires_at", "sessions", ["expires_at"])

    # -- catalog --------------------------------------------------------
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("discount_percentage", sa.Float(), nullable=False, server_default="0"),
        sa.Column("discount_price", sa.Integer(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("brand", sa.String(255), nullable=False),
        sa.Column("category", sa.String(255), nullable=False),
        sa.Column("thumbnail", sa.String(2048), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("colors", sa.JSON(), nullable=False),
        sa.Column("sizes", sa.JSON(), nullable=False),
        sa.Column("highlights", sa.JSON(), nullable=False),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
    )
    op.create_index("idx_products_brand", "products", ["brand"])
    op.create_index("idx_products_category", "products", ["category"])

    for table in ("categories", "brands"):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("label", sa.String(255), nullable=False, unique=True),
            sa.Column("value", sa.String(255), nullable=False, unique=True),
        )

    # -- cart -----------------------------------------------------------
    op.create_table(
        "cart_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("size", sa.String(64), nullable=True),
        sa.Column("color", sa.String(64), nullable=True),
        *_timestamps(with_updated=False),
    )
    op.create_index("idx_cart_items_user_id", "cart_items", ["user_id"])

    # -- orders ---------------------------------------------------------
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("items", sa.JSON(), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("total_items", sa.Integer(), nullable=False),
        sa.Column("payment_method", sa.String(16), nullable=False),
        sa.Column("payment_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("selected_address", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_orders_user_id", "orders", ["user_id"])
    op.create_index("idx_orders_status", "orders", ["status"])


def downgrade() -> None:
    op.drop_index("idx_orders_status", table_name="orders")
    op.drop_index("idx_orders_user_id", table_name="orders")
    op.drop_table("orders")
    op.drop_index("idx_cart_items_user_id", table_name="cart_items")
    op.drop_table("cart_items")
    op.drop_table("brands")
    op.drop_table("categories")
    op.drop_index("idx_products_category", table_name="products")
    op.drop_index("idx_products_brand", table_name="products")
    op.drop_table("products")
    op.drop_index("idx_sessions_expires_at", table_name="sessions")
    op.drop_table("sessions")
    op.drop_index("idx_users_email", table_name="users")
    op.drop_table("users")
