from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base
from .mixins import TimestampMixin


class ServerArch(TimestampMixin, Base):
    __tablename__ = "server_arches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    label: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)


class ServerGroupType(TimestampMixin, Base):
    __tablename__ = "server_group_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    label: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)


class ServerServerGroupArchCompat(TimestampMixin, Base):
    """Which server group types a server architecture may be entitled to."""

    __tablename__ = "server_server_group_arch_compat"
    __table_args__ = (
        UniqueConstraint(
            "server_arch_id", "server_group_type_id", name="uix_sgac_arch_group_type"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    server_arch_id: Mapped[int] = mapped_column(
        ForeignKey("server_arches.id"), nullable=False
    )
    server_group_type_id: Mapped[int] = mapped_column(
        ForeignKey("server_group_types.id"), nullable=False
    )
