"""User preset storage.

The UI talks to a ``PresetRepository``; the timer engine never does.
``SqlPresetRepository`` keeps presets in the application's SQLite database.

Usage::

    repo = SqlPresetRepository()
    repo.save("Morning stretch", [Step("Neck", 60), Step("Shoulders", 60)])
    steps = repo.get("Morning stretch")
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from ..database.db import get_session
from ..database.models import Preset, PresetStep, utc_now
from ..timer.models import Step

logger = logging.getLogger(__name__)


class PresetError(ValueError):
    """Raised when a preset cannot be saved as given."""


class PresetRepository(Protocol):
    def get(self, name: str) -> list[Step] | None: ...

    def list(self) -> list[str]: ...

    def save(self, name: str, steps: Iterable[Step]) -> None: ...

    def delete(self, name: str) -> bool: ...


def validate_preset(name: str, steps: Iterable[Step]) -> tuple[str, list[Step]]:
    """Strip the name and check there is something to save."""
    clean_name = (name or "").strip()
    if not clean_name:
        raise PresetError("Preset name is required")
    step_list = list(steps)
    if not step_list:
        raise PresetError("A preset needs at least one step")
    return clean_name, step_list


class SqlPresetRepository:
    """``PresetRepository`` backed by the ``presets`` / ``preset_steps``
    tables.  Names are listed in insertion order."""

    def get(self, name: str) -> list[Step] | None:
        with get_session() as db:
            preset = db.query(Preset).filter_by(name=name).first()
            if preset is None:
                return None
            return [Step(row.name, row.seconds) for row in preset.steps]

    def list(self) -> list[str]:
        with get_session() as db:
            rows = db.query(Preset.name).order_by(Preset.id).all()
            return [row.name for row in rows]

    def save(self, name: str, steps: Iterable[Step]) -> None:
        """Create or replace a preset."""
        name, step_list = validate_preset(name, steps)
        with get_session() as db:
            preset = db.query(Preset).filter_by(name=name).first()
            if preset is None:
                preset = Preset(name=name)
                db.add(preset)
            else:
                preset.steps.clear()
                preset.updated_at = utc_now()
            for position, step in enumerate(step_list):
                preset.steps.append(
                    PresetStep(position=position, name=step.name, seconds=step.seconds)
                )
        logger.info("Saved preset %r (%d steps)", name, len(step_list))

    def delete(self, name: str) -> bool:
        with get_session() as db:
            preset = db.query(Preset).filter_by(name=name).first()
            if preset is None:
                return False
            db.delete(preset)
        logger.info("Deleted preset %r", name)
        return True
