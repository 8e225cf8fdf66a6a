"""UISchema model - named, ordered arrays of UI component descriptors."""
import os
import struct
import time

from sqlalchemy import String, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column
from interface_compiler.models.base import Base, TimestampMixin

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


def new_object_id() -> str:
    """24 hex chars: 4-byte big-endian epoch seconds followed by 8 random bytes."""
    return (struct.pack(">I", int(time.time())) + os.urandom(8)).hex()


class UISchema(Base, TimestampMixin):
    __tablename__ = "ui_schemas"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(String(DESCRIPTION_MAX_LENGTH), default="")
    components: Mapped[list] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        Index("idx_ui_schemas_created_at", "created_at"),
    )
