"""Server arch / server group type compatibility seed data.

A server may only be entitled to a group type listed here for its arch.
"""

from __future__ import annotations

from typing import Dict, Iterable, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.compat import ServerArch, ServerGroupType, ServerServerGroupArchCompat

SERVER_GROUP_ARCH_COMPAT: Tuple[Tuple[str, str], ...] = (
    ("i386-redhat-linux", "sw_mgr_entitled"),
    ("i486-redhat-linux", "sw_mgr_entitled"),
    ("i586-redhat-linux", "sw_mgr_entitled"),
    ("i686-redhat-linux", "sw_mgr_entitled"),
    ("athlon-redhat-linux", "sw_mgr_entitled"),
    ("alpha-redhat-linux", "sw_mgr_entitled"),
    ("alphaev6-redhat-linux", "sw_mgr_entitled"),
    ("ia64-redhat-linux", "sw_mgr_entitled"),
    ("sparc-redhat-linux", "sw_mgr_entitled"),
    ("sparcv9-redhat-linux", "sw_mgr_entitled"),
    ("sparc64-redhat-linux", "sw_mgr_entitled"),
    ("s390-redhat-linux", "sw_mgr_entitled"),
    ("s390x-redhat-linux", "sw_mgr_entitled"),
    ("ppc-redhat-linux", "sw_mgr_entitled"),
    ("ppc64-redhat-linux", "sw_mgr_entitled"),
    ("pSeries-redhat-linux", "sw_mgr_entitled"),
    ("iSeries-redhat-linux", "sw_mgr_entitled"),
    ("x86_64-redhat-linux", "sw_mgr_entitled"),
    ("ia32e-redhat-linux", "sw_mgr_entitled"),
    ("amd64-redhat-linux", "sw_mgr_entitled"),
    ("ppc64iseries-redhat-linux", "sw_mgr_entitled"),
    ("ppc64pseries-redhat-linux", "sw_mgr_entitled"),

    ("i386-redhat-linux", "enterprise_entitled"),
    ("i486-redhat-linux", "enterprise_entitled"),
    ("i586-redhat-linux", "enterprise_entitled"),
    ("i686-redhat-linux", "enterprise_entitled"),
    ("athlon-redhat-linux", "enterprise_entitled"),
    ("alpha-redhat-linux", "enterprise_entitled"),
    ("alphaev6-redhat-linux", "enterprise_entitled"),
    ("ia64-redhat-linux", "enterprise_entitled"),
    ("sparc-redhat-linux", "enterprise_entitled"),
    ("sparcv9-redhat-linux", "enterprise_entitled"),
    ("sparc64-redhat-linux", "enterprise_entitled"),
    ("s390-redhat-linux", "enterprise_entitled"),
    ("s390x-redhat-linux", "enterprise_entitled"),
    ("ppc-redhat-linux", "enterprise_entitled"),
    ("ppc64-redhat-linux", "enterprise_entitled"),
    ("pSeries-redhat-linux", "enterprise_entitled"),
    ("iSeries-redhat-linux", "enterprise_entitled"),
    ("x86_64-redhat-linux", "enterprise_entitled"),
    ("ia32e-redhat-linux", "enterprise_entitled"),
    ("amd64-redhat-linux", "enterprise_entitled"),
    ("ppc64iseries-redhat-linux", "enterprise_entitled"),
    ("ppc64pseries-redhat-linux", "enterprise_entitled"),
    ("sparc-sun4m-solaris", "enterprise_entitled"),
    ("sparc-sun4u-solaris", "enterprise_entitled"),
    ("sparc-sun4v-solaris", "enterprise_entitled"),
    ("i386-i86pc-solaris", "enterprise_entitled"),

    ("i386-redhat-linux", "provisioning_entitled"),
    ("i486-redhat-linux", "provisioning_entitled"),
    ("i586-redhat-linux", "provisioning_entitled"),
    ("i686-redhat-linux", "provisioning_entitled"),
    ("athlon-redhat-linux", "provisioning_entitled"),
    ("alpha-redhat-linux", "provisioning_entitled"),
    ("alphaev6-redhat-linux", "provisioning_entitled"),
    ("ia64-redhat-linux", "provisioning_entitled"),
    ("sparc-redhat-linux", "provisioning_entitled"),
    ("sparcv9-redhat-linux", "provisioning_entitled"),
    ("sparc64-redhat-linux", "provisioning_entitled"),
    ("s390-redhat-linux", "provisioning_entitled"),
    ("s390x-redhat-linux", "provisioning_entitled"),
    ("ppc-redhat-linux", "provisioning_entitled"),
    ("ppc64-redhat-linux", "provisioning_entitled"),
    ("pSeries-redhat-linux", "provisioning_entitled"),
    ("iSeries-redhat-linux", "provisioning_entitled"),
    ("x86_64-redhat-linux", "provisioning_entitled"),
    ("ia32e-redhat-linux", "provisioning_entitled"),
    ("amd64-redhat-linux", "provisioning_entitled"),
    ("ppc64iseries-redhat-linux", "provisioning_entitled"),
    ("ppc64pseries-redhat-linux", "provisioning_entitled"),
    ("sparc-sun4m-solaris", "provisioning_entitled"),
    ("sparc-sun4u-solaris", "provisioning_entitled"),
    ("sparc-sun4v-solaris", "provisioning_entitled"),
    ("i386-i86pc-solaris", "provisioning_entitled"),

    ("i386-redhat-linux", "monitoring_entitled"),
    ("i486-redhat-linux", "monitoring_entitled"),
    ("i586-redhat-linux", "monitoring_entitled"),
    ("i686-redhat-linux", "monitoring_entitled"),
    ("athlon-redhat-linux", "monitoring_entitled"),
    ("alpha-redhat-linux", "monitoring_entitled"),
    ("alphaev6-redhat-linux", "monitoring_entitled"),
    ("ia64-redhat-linux", "monitoring_entitled"),
    ("s390-redhat-linux", "monitoring_entitled"),
    ("s390x-redhat-linux", "monitoring_entitled"),
    ("ppc-redhat-linux", "monitoring_entitled"),
    ("ppc64-redhat-linux", "monitoring_entitled"),
    ("pSeries-redhat-linux", "monitoring_entitled"),
    ("iSeries-redhat-linux", "monitoring_entitled"),
    ("x86_64-redhat-linux", "monitoring_entitled"),
    ("ia32e-redhat-linux", "monitoring_entitled"),
    ("amd64-redhat-linux", "monitoring_entitled"),
    ("ppc64iseries-redhat-linux", "monitoring_entitled"),
    ("ppc64pseries-redhat-linux", "monitoring_entitled"),

    # virtualization hosts
    ("i386-redhat-linux", "virtualization_host"),
    ("i486-redhat-linux", "virtualization_host"),
    ("i586-redhat-linux", "virtualization_host"),
    ("i686-redhat-linux", "virtualization_host"),
    ("athlon-redhat-linux", "virtualization_host"),
    ("amd64-redhat-linux", "virtualization_host"),
    ("ia64-redhat-linux", "virtualization_host"),
    ("ia32e-redhat-linux", "virtualization_host"),
    ("s390-redhat-linux", "virtualization_host"),
    ("s390x-redhat-linux", "virtualization_host"),
    ("ppc-redhat-linux", "virtualization_host"),
    ("ppc64-redhat-linux", "virtualization_host"),
    ("x86_64-redhat-linux", "virtualization_host"),

    ("i386-redhat-linux", "virtualization_host_platform"),
    ("i486-redhat-linux", "virtualization_host_platform"),
    ("i586-redhat-linux", "virtualization_host_platform"),
    ("i686-redhat-linux", "virtualization_host_platform"),
    ("athlon-redhat-linux", "virtualization_host_platform"),
    ("amd64-redhat-linux", "virtualization_host_platform"),
    ("ia64-redhat-linux", "virtualization_host_platform"),
    ("ia32e-redhat-linux", "virtualization_host_platform"),
    ("x86_64-redhat-linux", "virtualization_host_platform"),
)


def _resolve(session: Session, model, labels: Iterable[str]) -> Dict[str, int]:
    wanted = set(labels)
    rows = session.execute(select(model.label, model.id).where(model.label.in_(wanted))).all()
    return {label: id_ for label, id_ in rows}


def seed_server_group_arch_compat(
    session: Session,
    pairs: Iterable[Tuple[str, str]] = SERVER_GROUP_ARCH_COMPAT,
) -> int:
    """Insert missing compat rows by label and return how many were added.

    Unknown labels raise ``LookupError`` before anything is inserted. The
    caller owns the transaction.
    """
    pairs = list(pairs)
    arches = _resolve(session, ServerArch, (arch for arch, _ in pairs))
    group_types = _resolve(session, ServerGroupType, (sg_type for _, sg_type in pairs))

    missing = sorted(
        {arch for arch, _ in pairs if arch not in arches}
        | {sg_type for _, sg_type in pairs if sg_type not in group_types}
    )
    if missing:
        raise LookupError(f"Unknown server arch or group type labels: {', '.join(missing)}")

    existing = {
        tuple(row)
        for row in session.execute(
            select(
                ServerServerGroupArchCompat.server_arch_id,
                ServerServerGroupArchCompat.server_group_type_id,
            )
        ).all()
    }

    inserted = 0
    for arch, sg_type in pairs:
        key = (arches[arch], group_types[sg_type])
        if key in existing:
            continue
        session.add(
            ServerServerGroupArchCompat(server_arch_id=key[0], server_group_type_id=key[1])
        )
        existing.add(key)
        inserted += 1
    session.flush()
    return inserted
