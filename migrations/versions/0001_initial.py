"""Initial schema: users, tournaments, participants.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("wallet_address", sa.String(), nullable=True),
        sa.Column("username", sa.String(), nullable=True),
        sa.Column("password_hash", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False, server_default="user"),
        sa.Column("points", sa.Integer(), nullable=False, server_default="1000"),
        sa.Column("total_tournaments", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("won_tournaments", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_claim_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("points >= 0", name="ck_users_points_non_negative"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_wallet_address", "users", ["wallet_address"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=False)

    op.create_table(
        "tournaments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("tournament_type", sa.String(length=32), nullable=False),
        sa.Column("options", sa.Text(), nullable=False),
        sa.Column("entry_fee", sa.Integer(), nullable=False),
        sa.Column("max_participants", sa.Integer(), nullable=False),
        sa.Column("current_participants", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("prize_pool", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("correct_answer", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("entry_fee > 0", name="ck_tournaments_entry_fee_positive"),
        sa.CheckConstraint(
            "current_participants <= max_participants", name="ck_tournaments_capacity"
        ),
        sa.CheckConstraint("prize_pool >= 0", name="ck_tournaments_prize_pool"),
    )
    op.create_index("ix_tournaments_title", "tournaments", ["title"], unique=True)
    op.create_index("ix_tournaments_category", "tournaments", ["category"], unique=False)
    op.create_index("ix_tournaments_status", "tournaments", ["status"], unique=False)

    op.create_table(
        "participants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("tournament_id", sa.Integer(), sa.ForeignKey("tournaments.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("prediction", sa.String(), nullable=False),
        sa.Column("points_paid", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "tournament_id", "user_id", name="uq_participants_tournament_user"
        ),
    )
    op.create_index(
        "ix_participants_tournament_id", "participants", ["tournament_id"], unique=False
    )
    op.create_index("ix_participants_user_id", "participants", ["user_id"], unique=False)


def downgrade():
    op.drop_table("participants")
    op.drop_table("tournaments")
    op.drop_table("users")
