# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Static emotional technique catalog.

Techniques are reference data shipped as YAML (data/techniques.yaml) and
loaded once at process start. The catalog is read-only afterwards and is
keyed by technique id.

Example:
    >>> catalog = TechniqueCatalog.from_yaml()
    >>> catalog.get("box_breathing").name
    'Box Breathing'
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from eduaffect.core.config.yaml_loader import YAMLLoadError, load_yaml_entries
from eduaffect.core.emotional.constants import InterventionType

logger = logging.getLogger(__name__)

DEFAULT_TECHNIQUES_PATH = Path(__file__).parent / "data" / "techniques.yaml"


class TechniqueCatalogError(Exception):
    """Raised when the technique catalog cannot be loaded or is inconsistent."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)


class EmotionalTechnique(BaseModel):
    """A regulation technique that interventions can reference.

    Attributes:
        id: Unique technique id.
        name: Display name.
        description: Short description.
        instructions: Ordered instruction steps.
        duration: Duration in minutes.
        age_appropriate: Age groups the technique suits.
        effectiveness_rating: Effectiveness estimate (0-1).
        prerequisites: Skills the learner should have.
        intervention_types: Intervention types the technique serves.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    description: str
    instructions: tuple[str, ...] = Field(min_length=1)
    duration: int = Field(ge=0, description="Duration in minutes")
    age_appropriate: tuple[str, ...] = ()
    effectiveness_rating: float = Field(ge=0.0, le=1.0)
    prerequisites: tuple[str, ...] = ()
    intervention_types: tuple[InterventionType, ...] = ()


class TechniqueCatalog:
    """Read-only, id-keyed collection of EmotionalTechnique entries."""

    def __init__(self, techniques: list[EmotionalTechnique]) -> None:
        """Initialize the catalog.

        Args:
            techniques: Catalog entries in display order.

        Raises:
            TechniqueCatalogError: If two entries share an id.
        """
        by_id: dict[str, EmotionalTechnique] = {}
        for technique in techniques:
            if technique.id in by_id:
                raise TechniqueCatalogError(f"Duplicate technique id: {technique.id}")
            by_id[technique.id] = technique
        self._techniques = by_id

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "TechniqueCatalog":
        """Load the catalog from a YAML file.

        Args:
            path: Catalog file. Defaults to the packaged techniques.yaml.

        Returns:
            Loaded TechniqueCatalog.

        Raises:
            TechniqueCatalogError: If the file is missing, malformed or invalid.
        """
        path = path or DEFAULT_TECHNIQUES_PATH
        try:
            entries = load_yaml_entries(path, "techniques")
        except YAMLLoadError as e:
            raise TechniqueCatalogError(str(e), path=path) from e

        try:
            techniques = [EmotionalTechnique.model_validate(entry) for entry in entries]
        except ValidationError as e:
            raise TechniqueCatalogError(f"Invalid technique entry: {e}", path=path) from e

        catalog = cls(techniques)
        logger.info("Loaded %d emotional techniques from %s", len(catalog), path)
        return catalog

    def get(self, technique_id: str) -> EmotionalTechnique | None:
        """Get a technique by id."""
        return self._techniques.get(technique_id)

    def all(self) -> list[EmotionalTechnique]:
        """Get all techniques in catalog order."""
        return list(self._techniques.values())

    def for_intervention(self, intervention_type: InterventionType) -> list[EmotionalTechnique]:
        """Get the techniques serving an intervention type, in catalog order."""
        return [t for t in self._techniques.values() if intervention_type in t.intervention_types]

    def ensure_covers(self, intervention_types: list[InterventionType]) -> None:
        """Check that every given intervention type has at least one technique.

        Raises:
            TechniqueCatalogError: If a type has no technique.
        """
        missing = [t.value for t in intervention_types if not self.for_intervention(t)]
        if missing:
            raise TechniqueCatalogError(
                f"No techniques for intervention types: {', '.join(missing)}"
            )

    def __len__(self) -> int:
        return len(self._techniques)

    def __contains__(self, technique_id: object) -> bool:
        return technique_id in self._techniques
