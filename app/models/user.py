# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Back-office account mirrored from Supabase Auth.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")

    Role:
      - "staff" | "admin"
      - public visitors never get a row; they browse and order anonymously.

    Passwords live in Supabase Auth, not here.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches Supabase auth.users.id",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Email from Supabase auth.users",
    )

    name: str = Field(
        max_length=50,
        description="Display name; first part of email by default",
    )

    # Application role (not Supabase RLS role)
    role: str = Field(
        default="staff",
        index=True,
        description="Application role: staff | admin",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
