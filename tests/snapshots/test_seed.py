"""Tests for server arch / group type compatibility seed data."""

import pytest
from sqlalchemy import func, select

from services.snapshots.app.models.compat import (
    ServerArch,
    ServerGroupType,
    ServerServerGroupArchCompat,
)
from services.snapshots.app.services.seed import (
    SERVER_GROUP_ARCH_COMPAT,
    seed_server_group_arch_compat,
)


def _add_labels(session, arches, group_types):
    session.add_all(ServerArch(label=label, name=label) for label in sorted(arches))
    session.add_all(ServerGroupType(label=label, name=label) for label in sorted(group_types))
    session.flush()


def _compat_count(session):
    return session.execute(select(func.count()).select_from(ServerServerGroupArchCompat)).scalar_one()


class TestSeedData:
    def test_pairs_are_unique(self):
        assert len(SERVER_GROUP_ARCH_COMPAT) == len(set(SERVER_GROUP_ARCH_COMPAT))

    def test_known_mappings_present(self):
        assert ("x86_64-redhat-linux", "enterprise_entitled") in SERVER_GROUP_ARCH_COMPAT
        assert ("sparc-sun4u-solaris", "provisioning_entitled") in SERVER_GROUP_ARCH_COMPAT

    def test_solaris_is_not_monitoring_entitled(self):
        solaris = {arch for arch, sg in SERVER_GROUP_ARCH_COMPAT if arch.endswith("solaris")}

        assert solaris
        assert not any(
            (arch, "monitoring_entitled") in SERVER_GROUP_ARCH_COMPAT for arch in solaris
        )


class TestSeedServerGroupArchCompat:
    def test_seeds_every_pair(self, db_session):
        _add_labels(
            db_session,
            {arch for arch, _ in SERVER_GROUP_ARCH_COMPAT},
            {sg for _, sg in SERVER_GROUP_ARCH_COMPAT},
        )

        inserted = seed_server_group_arch_compat(db_session)
        db_session.commit()

        assert inserted == len(SERVER_GROUP_ARCH_COMPAT)
        assert _compat_count(db_session) == len(SERVER_GROUP_ARCH_COMPAT)

    def test_reseeding_inserts_nothing(self, db_session):
        pairs = [("i686-redhat-linux", "sw_mgr_entitled"), ("i686-redhat-linux", "virtualization_host")]
        _add_labels(db_session, {"i686-redhat-linux"}, {"sw_mgr_entitled", "virtualization_host"})

        assert seed_server_group_arch_compat(db_session, pairs) == 2
        assert seed_server_group_arch_compat(db_session, pairs) == 0
        assert _compat_count(db_session) == 2

    def test_unknown_labels_raise_before_inserting(self, db_session):
        _add_labels(db_session, {"i686-redhat-linux"}, {"sw_mgr_entitled"})
        pairs = [
            ("i686-redhat-linux", "sw_mgr_entitled"),
            ("m68k-redhat-linux", "sw_mgr_entitled"),
            ("i686-redhat-linux", "bogus_entitled"),
        ]

        with pytest.raises(LookupError) as exc_info:
            seed_server_group_arch_compat(db_session, pairs)

        message = str(exc_info.value)
        assert "m68k-redhat-linux" in message
        assert "bogus_entitled" in message
        assert _compat_count(db_session) == 0
