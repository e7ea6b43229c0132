"""Tests for the interactive design session."""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from habforge.errors import InvalidDimensions, UnsupportedShape
from habforge.geometry import CylinderShape, ModularShape, SphereShape, TorusShape
from habforge.session import HabitatSession
from habforge.standards import StaticStandardsProvider, load_standards


@pytest.fixture
def session():
    """Session with a fresh default design."""
    session = HabitatSession(StaticStandardsProvider(load_standards()))
    session.create_new_design("Test Base", "Unit test habitat")
    return session


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def module_fields(name, module_type, **extra):
    fields = {
        "name": name,
        "type": module_type,
        "dimensions": {"length": 4, "width": 3, "height": 2.5},
    }
    fields.update(extra)
    return fields


class TestSessionLifecycle:
    """Test design creation and loading."""

    def test_no_design_yet(self):
        session = HabitatSession(StaticStandardsProvider(load_standards()))
        assert not session.has_design
        with pytest.raises(RuntimeError):
            session.design

    def test_new_design_is_validated(self, session):
        design = session.design
        assert design.name == "Test Base"
        assert design.metrics.total_volume == pytest.approx(603.19, abs=0.01)
        assert design.findings
        assert design.compliance_score < 100

    def test_update_metadata(self, session):
        design = session.update_metadata(name="Renamed", author="Ops")
        assert design.name == "Renamed"
        assert design.author == "Ops"
        assert design.description == "Unit test habitat"

    def test_update_metadata_rejects_other_fields(self, session):
        with pytest.raises(ValueError):
            session.update_metadata(shape=None)
        with pytest.raises(ValidationError):
            session.update_metadata(name="")

    def test_export_and_import(self, session):
        session.add_module(**module_fields("Lab", "laboratory"))
        exported = session.export_json()

        other = HabitatSession(session.standards_provider)
        design = other.import_json(exported)
        assert design.id == session.design.id
        assert design.findings == session.design.findings

    def test_save_and_open(self, session, temp_dir):
        path = temp_dir / "base.json"
        session.save(path)
        other = HabitatSession(session.standards_provider)
        assert other.open(path).name == "Test Base"


class TestSnapshots:
    """Test that published designs are never mutated."""

    def test_edit_publishes_new_snapshot(self, session):
        before = session.design
        after = session.update_mission_parameters(crew_size=6)
        assert before is not after
        assert before.mission.crew_size == 4
        assert after.mission.crew_size == 6

    def test_geometry_failure_keeps_previous_design(self, session):
        before = session.design
        with pytest.raises(InvalidDimensions):
            session.update_shape(CylinderShape(radius=-1, height=10))
        with pytest.raises(UnsupportedShape):
            session.switch_shape("custom")
        assert session.design is before

    def test_revalidates_on_every_mutation(self, session):
        with patch("habforge.session.validate_design", return_value=[]) as mock_validate:
            session.update_mission_parameters(duration_days=200)
            session.add_module(**module_fields("Gym", "exercise"))
        assert mock_validate.call_count == 2


class TestShapeEditing:
    """Test shell shape updates."""

    def test_switch_shape_defaults(self, session):
        design = session.switch_shape("torus")
        assert design.shape == TorusShape(major_radius=8.0, minor_radius=3.0)

        design = session.switch_shape("modular", height=4.0)
        assert design.shape == ModularShape(length=10.0, width=8.0, height=4.0)

    def test_update_dimensions_keeps_others(self, session):
        design = session.update_dimensions(height=20.0)
        assert design.shape == CylinderShape(radius=4.0, height=20.0)

    def test_update_shape_from_dict(self, session):
        design = session.update_shape({"shape": "sphere", "radius": 6.0})
        assert isinstance(design.shape, SphereShape)
        assert design.metrics.total_volume == pytest.approx(904.78, abs=0.01)


class TestModules:
    """Test module and connection editing."""

    def test_add_module(self, session):
        module_id = session.add_module(**module_fields("Command", "command", power_requirement=8))
        module = session.design.module(module_id)
        assert module.volume == pytest.approx(30.0)
        assert session.design.metrics.power_requirement == 8
        assert "Missing essential module: command" not in [
            f.message for f in session.design.findings
        ]

    def test_duplicate_module_id(self, session):
        session.add_module(id="cmd", **module_fields("Command", "command"))
        with pytest.raises(ValueError):
            session.add_module(id="cmd", **module_fields("Other", "command"))

    def test_update_module(self, session):
        module_id = session.add_module(**module_fields("Lab", "laboratory"))
        design = session.update_module(
            module_id, dimensions={"length": 5, "width": 4, "height": 3}
        )
        assert design.module(module_id).volume == pytest.approx(60.0)
        assert design.module(module_id).name == "Lab"

    def test_update_unknown_module(self, session):
        with pytest.raises(KeyError):
            session.update_module("ghost", name="Ghost")
        with pytest.raises(KeyError):
            session.remove_module("ghost")

    def test_connections(self, session):
        a = session.add_module(**module_fields("Command", "command", adjacency_requirements=[]))
        b = session.add_module(**module_fields("Airlock", "airlock"))
        corridor = session.add_connection(a, b)
        airlock = session.add_connection(b, a, "airlock")

        connections = {c.id: c for c in session.design.connections}
        assert connections[corridor].diameter == 0.8
        assert connections[airlock].diameter == 1.2
        assert connections[corridor].length == 2.0

        session.remove_connection(corridor)
        assert [c.id for c in session.design.connections] == [airlock]
        with pytest.raises(KeyError):
            session.remove_connection(corridor)

    def test_connection_to_unknown_module(self, session):
        a = session.add_module(**module_fields("Command", "command"))
        with pytest.raises(KeyError):
            session.add_connection(a, "ghost")

    def test_remove_module_drops_connections(self, session):
        a = session.add_module(**module_fields("Command", "command"))
        b = session.add_module(**module_fields("Quarters", "habitation"))
        c = session.add_module(**module_fields("Lab", "laboratory"))
        session.add_connection(a, b)
        keep = session.add_connection(a, c)

        design = session.remove_module(b)
        assert [m.id for m in design.modules] == [a, c]
        assert [conn.id for conn in design.connections] == [keep]

    def test_adjacency_feedback(self, session):
        a = session.add_module(**module_fields("Alpha", "command"))
        b = session.add_module(**module_fields("Bravo", "habitation"))
        session.update_module(a, adjacency_requirements=[b])
        messages = [f.message for f in session.design.findings]
        assert "Alpha should be adjacent to Bravo" in messages

        session.add_connection(a, b)
        messages = [f.message for f in session.design.findings]
        assert "Alpha should be adjacent to Bravo" not in messages


class TestAnalysis:
    def test_analyze_is_cleared_by_edits(self, session):
        analysis = session.analyze()
        assert session.analysis is analysis
        assert analysis.volume.total_volume == pytest.approx(603.19, abs=0.01)

        session.update_mission_parameters(crew_size=5)
        assert session.analysis is None
