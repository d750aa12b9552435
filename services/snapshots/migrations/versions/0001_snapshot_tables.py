from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_snapshot_tables"
down_revision = None
branch_labels = None
depends_on = None

_CHILD_TABLES = (
    ("snapshot_channels", "channel_id"),
    ("snapshot_config_channels", "config_channel_id"),
    ("snapshot_config_revisions", "config_revision_id"),
    ("snapshot_packages", "nevra_id"),
    ("snapshot_server_groups", "server_group_id"),
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "snapshots",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("org_id", sa.Integer(), nullable=False),
        sa.Column("server_id", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(length=4000), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_snapshots_created_at", "snapshots", ["created_at"])
    op.create_index("ix_snapshots_server_id", "snapshots", ["server_id"])
    op.create_index("ix_snapshots_created_server", "snapshots", ["created_at", "server_id"])

    for table, column in _CHILD_TABLES:
        op.create_table(
            table,
            sa.Column(
                "snapshot_id",
                sa.Integer(),
                sa.ForeignKey("snapshots.id", ondelete="CASCADE"),
                primary_key=True,
            ),
            sa.Column(column, sa.Integer(), primary_key=True),
        )

    op.create_table(
        "snapshot_tags",
        sa.Column(
            "snapshot_id",
            sa.Integer(),
            sa.ForeignKey("snapshots.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("tag_id", sa.Integer(), primary_key=True),
        sa.Column("server_id", sa.Integer(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_snapshot_tags_created_at", "snapshot_tags", ["created_at"])

    op.create_table(
        "server_group_members",
        sa.Column("server_id", sa.Integer(), primary_key=True),
        sa.Column("server_group_id", sa.Integer(), primary_key=True),
        *_timestamps(),
    )
    op.create_index("ix_server_group_members_created_at", "server_group_members", ["created_at"])

    for table in ("server_arches", "server_group_types"):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("label", sa.String(length=64), nullable=False, unique=True),
            sa.Column("name", sa.String(length=64), nullable=False),
            *_timestamps(),
        )
        op.create_index(f"ix_{table}_created_at", table, ["created_at"])

    op.create_table(
        "server_server_group_arch_compat",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("server_arch_id", sa.Integer(), sa.ForeignKey("server_arches.id"), nullable=False),
        sa.Column(
            "server_group_type_id",
            sa.Integer(),
            sa.ForeignKey("server_group_types.id"),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint(
            "server_arch_id", "server_group_type_id", name="uix_sgac_arch_group_type"
        ),
    )
    op.create_index(
        "ix_server_server_group_arch_compat_created_at",
        "server_server_group_arch_compat",
        ["created_at"],
    )


def downgrade() -> None:
    op.drop_table("server_server_group_arch_compat")
    op.drop_table("server_group_types")
    op.drop_table("server_arches")
    op.drop_table("server_group_members")
    op.drop_table("snapshot_tags")
    for table, _ in reversed(_CHILD_TABLES):
        op.drop_table(table)
    op.drop_table("snapshots")
