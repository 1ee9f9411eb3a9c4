"""Initial schema: users, evaluations, notification_logs

Revision ID: 0001_initial
Revises: None
Create Date: 2025-09-02 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

ANSWER_COLUMNS = (
    "performance_experience", "performance_deliveries", "performance_skills",
    "energy_availability", "energy_deadlines", "energy_pressure",
    "culture_values", "culture_collaboration", "culture_innovation",
)


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(50)),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime),
    )
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "evaluations",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("candidate_name", sa.String(200), nullable=False),
        sa.Column("candidate_email", sa.String(254), nullable=False),
        *[sa.Column(name, sa.Integer, nullable=False) for name in ANSWER_COLUMNS],
        sa.Column("fit_score", sa.Integer, nullable=False),
        sa.Column("fit_classification", sa.String(40), nullable=False),
    )
    op.create_index("ix_evaluations_created_at", "evaluations", ["created_at"])
    op.create_index("ix_evaluations_candidate_email", "evaluations", ["candidate_email"])
    op.create_index("ix_evaluations_fit_classification", "evaluations", ["fit_classification"])

    op.create_table(
        "notification_logs",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("evaluation_id", sa.Integer, sa.ForeignKey("evaluations.id"), nullable=True),
        sa.Column("notification_type", sa.String(50), nullable=False),
        sa.Column("recipient_email", sa.String(254)),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("subject", sa.String(255)),
        sa.Column("provider_message_id", sa.String(255)),
        sa.Column("sent_at", sa.DateTime, nullable=False),
    )
    op.create_index("ix_notification_logs_evaluation_id", "notification_logs", ["evaluation_id"])
    op.create_index("ix_notification_logs_notification_type", "notification_logs", ["notification_type"])


def downgrade():
    op.drop_table("notification_logs")
    op.drop_table("evaluations")
    op.drop_table("users")
