# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the technique catalog and YAML loader."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from eduaffect.core.config.yaml_loader import YAMLLoadError, load_yaml, load_yaml_entries
from eduaffect.core.emotional import (
    EmotionalTechnique,
    InterventionType,
    TechniqueCatalog,
    TechniqueCatalogError,
)
from eduaffect.core.emotional.interventions import PATTERN_INTERVENTION_TYPE, SINGLE_STATE_RULES

VALID_ENTRY = """
  - id: {id}
    name: Test Technique
    description: A technique used in tests
    instructions:
      - Step one
    duration: 2
    effectiveness_rating: 0.5
    intervention_types: [breathing_exercise]
"""


def write_catalog(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "techniques.yaml"
    path.write_text(body, encoding="utf-8")
    return path


# =============================================================================
# YAML loader
# =============================================================================


@pytest.mark.unit
class TestLoadYaml:
    """Tests for load_yaml and load_yaml_entries."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(YAMLLoadError, match="File does not exist"):
            load_yaml(tmp_path / "nope.yaml")

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        with pytest.raises(YAMLLoadError, match="not a file"):
            load_yaml(tmp_path)

    def test_invalid_syntax(self, tmp_path: Path) -> None:
        path = write_catalog(tmp_path, "techniques: [unclosed\n")

        with pytest.raises(YAMLLoadError, match="Invalid YAML syntax"):
            load_yaml(path)

    def test_empty_file_is_empty_dict(self, tmp_path: Path) -> None:
        assert load_yaml(write_catalog(tmp_path, "")) == {}

    def test_root_must_be_mapping(self, tmp_path: Path) -> None:
        with pytest.raises(YAMLLoadError, match="must be a mapping"):
            load_yaml(write_catalog(tmp_path, "- a\n- b\n"))

    def test_entries_of_section(self, tmp_path: Path) -> None:
        path = write_catalog(tmp_path, "techniques:\n  - id: one\n  - id: two\nother: 1\n")

        assert load_yaml_entries(path, "techniques") == [{"id": "one"}, {"id": "two"}]

    @pytest.mark.parametrize("body", ["other: 1\n", "techniques: []\n", "techniques: yes\n"])
    def test_entries_section_must_be_non_empty_list(self, tmp_path: Path, body: str) -> None:
        with pytest.raises(YAMLLoadError, match="'techniques' must be a non-empty list"):
            load_yaml_entries(write_catalog(tmp_path, body), "techniques")

    def test_entries_must_be_mappings(self, tmp_path: Path) -> None:
        path = write_catalog(tmp_path, "techniques:\n  - id: one\n  - just a string\n")

        with pytest.raises(YAMLLoadError, match="entry 1 must be a mapping"):
            load_yaml_entries(path, "techniques")


# =============================================================================
# Technique catalog
# =============================================================================


@pytest.mark.unit
class TestTechniqueCatalog:
    """Tests for TechniqueCatalog."""

    def test_packaged_catalog_loads(self, catalog: TechniqueCatalog) -> None:
        assert len(catalog) >= 5
        assert "box_breathing" in catalog
        box = catalog.get("box_breathing")
        assert box.name == "Box Breathing"
        assert InterventionType.BREATHING_EXERCISE in box.intervention_types
        assert 0.0 <= box.effectiveness_rating <= 1.0

    def test_packaged_catalog_covers_every_emitted_intervention(self, catalog: TechniqueCatalog) -> None:
        emitted = [rule.intervention_type for rule in SINGLE_STATE_RULES.values()]
        emitted.append(PATTERN_INTERVENTION_TYPE)

        catalog.ensure_covers(emitted)

    def test_unknown_id_returns_none(self, catalog: TechniqueCatalog) -> None:
        assert catalog.get("levitation") is None

    def test_for_intervention_keeps_catalog_order(self, catalog: TechniqueCatalog) -> None:
        ids = [t.id for t in catalog.for_intervention(InterventionType.MINDFULNESS)]

        assert ids == ["box_breathing", "mindful_minute"]

    def test_for_unserved_intervention_is_empty(self, catalog: TechniqueCatalog) -> None:
        assert catalog.for_intervention(InterventionType.TEACHER_NOTIFICATION) == []

    def test_ensure_covers_names_missing_types(self, catalog: TechniqueCatalog) -> None:
        with pytest.raises(TechniqueCatalogError, match="peer_support, celebration"):
            catalog.ensure_covers([
                InterventionType.BREATHING_EXERCISE,
                InterventionType.PEER_SUPPORT,
                InterventionType.CELEBRATION,
            ])

    def test_duplicate_ids_rejected(self) -> None:
        technique = EmotionalTechnique(
            id="dup",
            name="Dup",
            description="Duplicate",
            instructions=("Step",),
            duration=1,
            effectiveness_rating=0.5,
        )

        with pytest.raises(TechniqueCatalogError, match="Duplicate technique id: dup"):
            TechniqueCatalog([technique, technique])

    def test_from_yaml_custom_path(self, tmp_path: Path) -> None:
        path = write_catalog(tmp_path, "techniques:" + VALID_ENTRY.format(id="one") + VALID_ENTRY.format(id="two"))

        catalog = TechniqueCatalog.from_yaml(path)

        assert [t.id for t in catalog.all()] == ["one", "two"]

    def test_from_yaml_missing_file_wraps_loader_error(self, tmp_path: Path) -> None:
        path = tmp_path / "missing.yaml"

        with pytest.raises(TechniqueCatalogError) as exc_info:
            TechniqueCatalog.from_yaml(path)

        assert exc_info.value.path == path
        assert isinstance(exc_info.value.__cause__, YAMLLoadError)

    def test_from_yaml_requires_techniques_list(self, tmp_path: Path) -> None:
        with pytest.raises(TechniqueCatalogError, match="'techniques' must be a non-empty list"):
            TechniqueCatalog.from_yaml(write_catalog(tmp_path, "techniques: []\n"))

    def test_from_yaml_rejects_invalid_entry(self, tmp_path: Path) -> None:
        body = "techniques:" + VALID_ENTRY.format(id="bad").replace("0.5", "1.5")

        with pytest.raises(TechniqueCatalogError, match="Invalid technique entry"):
            TechniqueCatalog.from_yaml(write_catalog(tmp_path, body))

    def test_from_yaml_rejects_unknown_intervention_type(self, tmp_path: Path) -> None:
        body = "techniques:" + VALID_ENTRY.format(id="bad").replace("breathing_exercise", "yodelling")

        with pytest.raises(TechniqueCatalogError, match="Invalid technique entry"):
            TechniqueCatalog.from_yaml(write_catalog(tmp_path, body))

    def test_technique_is_immutable(self, catalog: TechniqueCatalog) -> None:
        box = catalog.get("box_breathing")

        with pytest.raises(ValidationError):
            box.name = "Changed"
