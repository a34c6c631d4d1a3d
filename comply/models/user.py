"""User model."""

from sqlalchemy import Boolean, Column, Enum, String

from comply.database import Base
from comply.models.enums import Role
from comply.models.mixins import IdMixin, TimestampMixin


class User(Base, IdMixin, TimestampMixin):
    """User model for authentication and role-based access."""

    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    role = Column(
        Enum(
            Role,
            name="userrole",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=Role.USER,
        nullable=False,
    )
    is_active = Column(Boolean, default=True, nullable=False)
