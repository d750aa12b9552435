from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db import Base
from .mixins import TimestampMixin


class Snapshot(TimestampMixin, Base):
    __tablename__ = "snapshots"
    __table_args__ = (
        # Index for per-server history lookups
        Index("ix_snapshots_server_id", "server_id"),
        # Composite index for the distinct-server count in age reports
        Index("ix_snapshots_created_server", "created_at", "server_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    org_id: Mapped[int] = mapped_column(Integer, nullable=False)
    server_id: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(String(4000), nullable=False)

    channels: Mapped[list["SnapshotChannel"]] = relationship(
        back_populates="snapshot", cascade="all, delete-orphan", passive_deletes=True
    )
    packages: Mapped[list["SnapshotPackage"]] = relationship(
        back_populates="snapshot", cascade="all, delete-orphan", passive_deletes=True
    )
    server_groups: Mapped[list["SnapshotServerGroup"]] = relationship(
        back_populates="snapshot", cascade="all, delete-orphan", passive_deletes=True
    )


class SnapshotChannel(Base):
    __tablename__ = "snapshot_channels"

    snapshot_id: Mapped[int] = mapped_column(
        ForeignKey("snapshots.id", ondelete="CASCADE"), primary_key=True
    )
    channel_id: Mapped[int] = mapped_column(Integer, primary_key=True)

    snapshot: Mapped[Snapshot] = relationship(back_populates="channels")


class SnapshotConfigChannel(Base):
    __tablename__ = "snapshot_config_channels"

    snapshot_id: Mapped[int] = mapped_column(
        ForeignKey("snapshots.id", ondelete="CASCADE"), primary_key=True
    )
    config_channel_id: Mapped[int] = mapped_column(Integer, primary_key=True)


class SnapshotConfigRevision(Base):
    __tablename__ = "snapshot_config_revisions"

    snapshot_id: Mapped[int] = mapped_column(
        ForeignKey("snapshots.id", ondelete="CASCADE"), primary_key=True
    )
    config_revision_id: Mapped[int] = mapped_column(Integer, primary_key=True)


class SnapshotPackage(Base):
    __tablename__ = "snapshot_packages"

    snapshot_id: Mapped[int] = mapped_column(
        ForeignKey("snapshots.id", ondelete="CASCADE"), primary_key=True
    )
    nevra_id: Mapped[int] = mapped_column(Integer, primary_key=True)

    snapshot: Mapped[Snapshot] = relationship(back_populates="packages")


class SnapshotServerGroup(Base):
    __tablename__ = "snapshot_server_groups"

    snapshot_id: Mapped[int] = mapped_column(
        ForeignKey("snapshots.id", ondelete="CASCADE"), primary_key=True
    )
    server_group_id: Mapped[int] = mapped_column(Integer, primary_key=True)

    snapshot: Mapped[Snapshot] = relationship(back_populates="server_groups")


class SnapshotTag(TimestampMixin, Base):
    __tablename__ = "snapshot_tags"

    snapshot_id: Mapped[int] = mapped_column(
        ForeignKey("snapshots.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    server_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class ServerGroupMember(TimestampMixin, Base):
    """Server-to-group membership; locked while snapshot batches are deleted."""

    __tablename__ = "server_group_members"

    server_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    server_group_id: Mapped[int] = mapped_column(Integer, primary_key=True)


# Reporting order: parent first, then children alphabetically
SNAPSHOT_FAMILY = (
    Snapshot,
    SnapshotChannel,
    SnapshotConfigChannel,
    SnapshotConfigRevision,
    SnapshotPackage,
    SnapshotServerGroup,
    SnapshotTag,
)

SNAPSHOT_TABLES = tuple(model.__tablename__ for model in SNAPSHOT_FAMILY)
