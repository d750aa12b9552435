"""seed server arch / server group type compatibility

Revision ID: 0002_server_group_arch_compat_data
Revises: 0001_snapshot_tables

Creates any arch and group type labels the mapping needs, then inserts the
compatibility pairs. Safe to re-run against a partially seeded database.

Downgrade removes the compatibility pairs only. Arch and group type labels
are shared with server registration and may predate this revision, so they
stay in place.
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.orm import Session

from app.models.compat import ServerArch, ServerGroupType, ServerServerGroupArchCompat
from app.services.seed import SERVER_GROUP_ARCH_COMPAT, seed_server_group_arch_compat

# revision identifiers, used by Alembic.
revision = "0002_server_group_arch_compat_data"
down_revision = "0001_snapshot_tables"
branch_labels = None
depends_on = None


def _ensure_labels(session: Session, model, labels: set[str]) -> None:
    known = set(session.scalars(sa.select(model.label)).all())
    for label in sorted(labels - known):
        session.add(model(label=label, name=label))
    session.flush()


def upgrade() -> None:
    session = Session(bind=op.get_bind())
    _ensure_labels(session, ServerArch, {arch for arch, _ in SERVER_GROUP_ARCH_COMPAT})
    _ensure_labels(session, ServerGroupType, {sg for _, sg in SERVER_GROUP_ARCH_COMPAT})
    seed_server_group_arch_compat(session)
    session.flush()


def downgrade() -> None:
    # labels are kept, see module docstring
    op.execute(sa.delete(ServerServerGroupArchCompat.__table__))
