"""SQLAlchemy ORM models for PaceKeeper."""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import DeclarativeBase, relationship


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Preset(Base):
    """A user-defined step sequence, saved from the preset editor."""

    __tablename__ = "presets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now)

    steps = relationship(
        "PresetStep",
        back_populates="preset",
        order_by="PresetStep.position",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Preset id={self.id} name={self.name!r} steps={len(self.steps)}>"


class PresetStep(Base):
    """One step of a saved preset, kept in ``position`` order."""

    __tablename__ = "preset_steps"

    id = Column(Integer, primary_key=True, autoincrement=True)
    preset_id = Column(Integer, ForeignKey("presets.id"), nullable=False)
    position = Column(Integer, nullable=False)
    name = Column(String(255), nullable=False)
    seconds = Column(Integer, nullable=False, default=0)

    preset = relationship("Preset", back_populates="steps")

    def __repr__(self) -> str:
        return (
            f"<PresetStep preset={self.preset_id} pos={self.position} "
            f"name={self.name!r} seconds={self.seconds}>"
        )
