"""
SQLAlchemy models for orphanage listings and their images.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from happy.shared.database import Base


class Orphanage(Base):
    """A listed orphanage, pinned on the map by latitude/longitude."""

    __tablename__ = "orphanages"
    __table_args__ = (
        CheckConstraint("latitude BETWEEN -90 AND 90", name="latitude_range"),
        CheckConstraint("longitude BETWEEN -180 AND 180", name="longitude_range"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    latitude: Mapped[float] = mapped_column(
        Float,
        nullable=False,
    )
    longitude: Mapped[float] = mapped_column(
        Float,
        nullable=False,
    )
    about: Mapped[str] = mapped_column(
        String(300),
        nullable=False,
    )
    instructions: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    opening_hours: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    open_on_weekends: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    pending: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    images: Mapped[list["Image"]] = relationship(
        "Image",
        back_populates="orphanage",
        cascade="all, delete-orphan",
        order_by="Image.id",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Orphanage(id={self.id}, name={self.name!r}, pending={self.pending})>"


class Image(Base):
    """An uploaded photo owned by exactly one orphanage."""

    __tablename__ = "images"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    path: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
    )
    orphanage_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("orphanages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    orphanage: Mapped[Orphanage] = relationship(
        "Orphanage",
        back_populates="images",
    )

    def __repr__(self) -> str:
        return f"<Image(id={self.id}, path={self.path!r})>"
