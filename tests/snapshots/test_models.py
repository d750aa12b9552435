"""Tests for the snapshot table family models."""

from datetime import UTC, datetime

from sqlalchemy import delete, func, select

from services.snapshots.app.models.snapshots import (
    SNAPSHOT_TABLES,
    ServerGroupMember,
    Snapshot,
    SnapshotChannel,
    SnapshotConfigRevision,
    SnapshotServerGroup,
    SnapshotTag,
)


def _count(session, model):
    return session.execute(select(func.count()).select_from(model)).scalar_one()


class TestSnapshotFamily:
    def test_family_tables_start_with_parent(self):
        assert SNAPSHOT_TABLES[0] == "snapshots"
        assert len(SNAPSHOT_TABLES) == 7
        assert "server_group_members" not in SNAPSHOT_TABLES

    def test_timestamps_default_to_now(self, db_session):
        snap = Snapshot(org_id=1, server_id=1000010001, reason="Initial registration")
        db_session.add(snap)
        db_session.commit()

        assert snap.created_at is not None
        assert snap.updated_at is not None

    def test_deleting_snapshot_cascades_to_children(self, db_session):
        snap = Snapshot(org_id=1, server_id=1000010001, reason="Channel subscription changed")
        db_session.add(snap)
        db_session.flush()
        db_session.add_all(
            [
                SnapshotChannel(snapshot_id=snap.id, channel_id=101),
                SnapshotConfigRevision(snapshot_id=snap.id, config_revision_id=5),
                SnapshotServerGroup(snapshot_id=snap.id, server_group_id=3),
                SnapshotTag(snapshot_id=snap.id, tag_id=9, server_id=snap.server_id),
            ]
        )
        db_session.add(ServerGroupMember(server_id=snap.server_id, server_group_id=3))
        db_session.commit()

        db_session.execute(delete(Snapshot).where(Snapshot.id == snap.id))
        db_session.commit()

        for model in (SnapshotChannel, SnapshotConfigRevision, SnapshotServerGroup, SnapshotTag):
            assert _count(db_session, model) == 0
        assert _count(db_session, ServerGroupMember) == 1

    def test_relationship_loads_children(self, db_session):
        snap = Snapshot(
            org_id=1,
            server_id=1000010002,
            reason="Package profile changed",
            created_at=datetime(2024, 1, 1, tzinfo=UTC),
        )
        snap.channels.append(SnapshotChannel(channel_id=101))
        db_session.add(snap)
        db_session.commit()

        assert [c.channel_id for c in snap.channels] == [101]
