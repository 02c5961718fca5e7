"""initial schema: users, houses, staffing, compliance, notifications, audit

Revision ID: a1c0e5d2f001
Revises:
Create Date: 2026-09-28 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "a1c0e5d2f001"
down_revision = None
branch_labels = None
depends_on = None


def _user_role_enum() -> sa.Enum:
    return sa.Enum("ADMIN", "DESIGNATED_COORDINATOR", "LEAD_STAFF", name="user_role_enum", native_enum=False)


def _employee_status_enum() -> sa.Enum:
    return sa.Enum("ACTIVE", "INACTIVE", "ON_LEAVE", "TERMINATED", name="employee_status_enum", native_enum=False)


def _compliance_status_enum() -> sa.Enum:
    return sa.Enum(
        "PENDING",
        "COMPLETED",
        "OVERDUE",
        "NOT_COMPLETED",
        name="compliance_status_enum",
        native_enum=False,
    )


def _compliance_entity_type_enum() -> sa.Enum:
    return sa.Enum("EMPLOYEE", "HOUSE", name="compliance_entity_type_enum", native_enum=False)


def _notification_type_enum() -> sa.Enum:
    return sa.Enum("OVERDUE", "DEADLINE_WARNING", "GENERAL", name="notification_type_enum", native_enum=False)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("role", _user_role_enum(), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "houses",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("city", sa.String(length=128), nullable=True),
        sa.Column("state", sa.String(length=32), nullable=True),
        sa.Column("zip_code", sa.String(length=16), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("license_number", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "employees",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("first_name", sa.String(length=128), nullable=False),
        sa.Column("last_name", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("position", sa.String(length=128), nullable=True),
        sa.Column("hire_date", sa.Date(), nullable=True),
        sa.Column("status", _employee_status_enum(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_employees_email", "employees", ["email"], unique=False)
    op.create_index("ix_employees_status", "employees", ["status"], unique=False)
    op.create_index("ix_employees_status_last_name", "employees", ["status", "last_name"], unique=False)

    op.create_table(
        "user_houses",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("house_id", sa.String(length=36), sa.ForeignKey("houses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "house_id", name="uq_user_houses_user_house"),
    )
    op.create_index("ix_user_houses_user_id", "user_houses", ["user_id"], unique=False)
    op.create_index("ix_user_houses_house_id", "user_houses", ["house_id"], unique=False)

    op.create_table(
        "employee_houses",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("employee_id", sa.String(length=36), sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
        sa.Column("house_id", sa.String(length=36), sa.ForeignKey("houses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("employee_id", "house_id", name="uq_employee_houses_employee_house"),
    )
    op.create_index("ix_employee_houses_employee_id", "employee_houses", ["employee_id"], unique=False)
    op.create_index("ix_employee_houses_house_id", "employee_houses", ["house_id"], unique=False)

    op.create_table(
        "compliance_items",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("entity_type", _compliance_entity_type_enum(), nullable=False),
        sa.Column("item_type", sa.String(length=64), nullable=False),
        sa.Column("item_name", sa.String(length=255), nullable=False),
        sa.Column("statute_ref", sa.String(length=128), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("completed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", _compliance_status_enum(), nullable=False),
        sa.Column("employee_id", sa.String(length=36), sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=True),
        sa.Column("house_id", sa.String(length=36), sa.ForeignKey("houses.id", ondelete="CASCADE"), nullable=True),
        sa.Column("corrective_action", sa.Text(), nullable=True),
        sa.Column("corrective_notes", sa.Text(), nullable=True),
        sa.Column("correction_due_date", sa.Date(), nullable=True),
        sa.Column("correction_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_compliance_items_item_type", "compliance_items", ["item_type"], unique=False)
    op.create_index("ix_compliance_items_due_date", "compliance_items", ["due_date"], unique=False)
    op.create_index("ix_compliance_items_status", "compliance_items", ["status"], unique=False)
    op.create_index("ix_compliance_items_employee_id", "compliance_items", ["employee_id"], unique=False)
    op.create_index("ix_compliance_items_house_id", "compliance_items", ["house_id"], unique=False)
    op.create_index("ix_compliance_items_status_due", "compliance_items", ["status", "due_date"], unique=False)

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", _notification_type_enum(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("link", sa.String(length=255), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_notifications_id", "notifications", ["id"], unique=False)
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"], unique=False)
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"], unique=False)
    op.create_index("ix_notifications_user_read", "notifications", ["user_id", "is_read"], unique=False)
    op.create_index("ix_notifications_user_type_link", "notifications", ["user_id", "type", "link"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.String(length=64), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_audit_logs_id", "audit_logs", ["id"], unique=False)
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"], unique=False)
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"], unique=False)
    op.create_index("ix_audit_logs_entity_type", "audit_logs", ["entity_type"], unique=False)
    op.create_index("ix_audit_logs_entity_id", "audit_logs", ["entity_id"], unique=False)
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"], unique=False)
    op.create_index("ix_audit_logs_entity", "audit_logs", ["entity_type", "entity_id"], unique=False)
    op.create_index("ix_audit_logs_action_time", "audit_logs", ["action", "created_at"], unique=False)
    op.create_index("ix_audit_logs_time_desc", "audit_logs", [sa.text("created_at DESC")], unique=False)


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("notifications")
    op.drop_table("compliance_items")
    op.drop_table("employee_houses")
    op.drop_table("user_houses")
    op.drop_table("employees")
    op.drop_table("houses")
    op.drop_table("users")
