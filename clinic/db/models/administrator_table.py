# clinic/db/models/administrator_table.py
from __future__ import annotations
from typing import Optional
from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from .db_base_model import DbBaseModel


class Administrator(DbBaseModel):
    __tablename__ = "administrators"

    admin_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.user_id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )

    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)


__all__ = ["Administrator"]
