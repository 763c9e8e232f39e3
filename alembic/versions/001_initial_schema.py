"""Initial schema — users, engineers, tickets, hazards.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users
    op.create_table(
        "users",
        sa.Column("email", sa.String(320), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("pincode", sa.String(20), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )

    # Engineers
    op.create_table(
        "engineers",
        sa.Column("email", sa.String(320), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("specialization", sa.String(20), nullable=False),
        sa.Column(
            "availability", ARRAY(sa.String(10)), nullable=False, server_default="{}"
        ),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("pincode", sa.String(20), nullable=True),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("current_tasks", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "assigned_tasks", ARRAY(sa.Integer), nullable=False, server_default="{}"
        ),
        sa.Column("is_engineer", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("version", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_engineers_specialization", "engineers", ["specialization"])
    op.create_index(
        "idx_engineers_availability", "engineers", ["availability"], postgresql_using="gin"
    )

    # Tickets
    op.execute(sa.schema.CreateSequence(sa.Sequence("tickets_id_seq")))
    op.create_table(
        "tickets",
        sa.Column(
            "id",
            sa.Integer,
            primary_key=True,
            server_default=sa.text("nextval('tickets_id_seq')"),
        ),
        sa.Column("user_email", sa.String(320), nullable=False),
        sa.Column("service_type", sa.String(20), nullable=False),
        sa.Column("pincode", sa.String(20), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("priority", sa.String(10), nullable=False, server_default="low"),
        sa.Column("status", sa.String(20), nullable=False, server_default="open"),
        sa.Column("accepted", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("engineer_email", sa.String(320), nullable=True),
        sa.Column("version", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_tickets_user_email", "tickets", ["user_email"])
    op.create_index("idx_tickets_engineer_email", "tickets", ["engineer_email"])
    op.create_index("idx_tickets_status", "tickets", ["status"])
    op.create_index("idx_tickets_priority", "tickets", ["priority"])

    # Hazards
    op.create_table(
        "hazards",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("hazard_type", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("risk_level", sa.String(10), nullable=False),
        sa.Column("pincode", sa.String(20), nullable=False),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )


def downgrade() -> None:
    op.drop_table("hazards")
    op.drop_table("tickets")
    op.execute(sa.schema.DropSequence(sa.Sequence("tickets_id_seq")))
    op.drop_table("engineers")
    op.drop_table("users")
