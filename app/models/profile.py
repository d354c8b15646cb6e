"""Profile and role-assignment database models."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin
from app.models.user import ProfileStatus, UserRole


def _role_enum(name: str) -> SAEnum:
    return SAEnum(
        UserRole,
        name=name,
        create_constraint=True,
        native_enum=False,
        values_callable=lambda e: [member.value for member in e],
    )


class Profile(Base, TimestampMixin):
    """User-facing account record, one per auth identity."""

    __tablename__ = "profiles"

    # Same value as the auth provider's user id
    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Denormalized display role; user_roles is authoritative
    role: Mapped[str | None] = mapped_column(_role_enum("profile_role"), nullable=True)

    status: Mapped[str] = mapped_column(
        SAEnum(
            ProfileStatus,
            name="profile_status",
            create_constraint=True,
            native_enum=False,
            values_callable=lambda e: [member.value for member in e],
        ),
        default=ProfileStatus.active.value,
        nullable=False,
    )

    last_sign_in_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (Index("idx_profile_role_status", "role", "status"),)

    @property
    def is_active(self) -> bool:
        return self.status == ProfileStatus.active

    def __repr__(self) -> str:
        return f"<Profile {self.id}: role={self.role} status={self.status}>"


class RoleAssignment(Base):
    """One role held by one user."""

    __tablename__ = "user_roles"

    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role: Mapped[str] = mapped_column(_role_enum("app_role"), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (Index("idx_user_roles_role", "role"),)

    def __repr__(self) -> str:
        return f"<RoleAssignment {self.user_id}: {self.role}>"
