"""Team invite model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, IdMixin, TenantMixin, TimestampMixin, enum_column
from app.domain.settlement.enums import InviteStatus


class TeamInvite(IdMixin, TenantMixin, TimestampMixin, Base):
    __tablename__ = "team_invites"

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), default="member", nullable=False)

    status: Mapped[InviteStatus] = mapped_column(
        enum_column(InviteStatus),
        default=InviteStatus.PENDING,
        nullable=False,
        index=True,
    )
