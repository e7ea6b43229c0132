"""Interactive design session.

``HabitatSession`` owns the one mutable piece of state, the current design.
Every edit builds a new design snapshot, recomputes its metrics, revalidates
it and only then replaces the previous snapshot. A snapshot that has been
handed out is never modified afterwards.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger
from pydantic import TypeAdapter

from .analysis import DesignAnalysis, analyze_design
from .config import EngineConfig, config
from .geometry import HabitatShape, ShapeTag, make_shape
from .metrics import compute_design_metrics
from .models import Connection, FunctionalModule, HabitatDesign, MissionParameters
from .standards import StandardsProvider, get_standards_provider
from .validation import calculate_compliance_score, validate_design

# Starting dimensions offered when the user switches to a shape
SHAPE_DEFAULTS: Dict[ShapeTag, Dict[str, float]] = {
    ShapeTag.CYLINDER: {"radius": 4.0, "height": 12.0},
    ShapeTag.SPHERE: {"radius": 5.0},
    ShapeTag.TORUS: {"major_radius": 8.0, "minor_radius": 3.0},
    ShapeTag.DOME: {"radius": 6.0, "height": 4.0},
    ShapeTag.INFLATABLE: {"inflated_radius": 4.0, "inflated_height": 10.0},
    ShapeTag.MODULAR: {"length": 10.0, "width": 8.0, "height": 6.0},
    ShapeTag.CUSTOM: {},
}

METADATA_FIELDS = ("name", "description", "author", "version")

_shape_adapter = TypeAdapter(HabitatShape)


class HabitatSession:
    """Holds the current design and keeps its metrics and findings current."""

    def __init__(
        self,
        standards_provider: Optional[StandardsProvider] = None,
        engine_config: Optional[EngineConfig] = None,
    ):
        self.standards_provider = standards_provider or get_standards_provider()
        self.config = engine_config or config
        self._design: Optional[HabitatDesign] = None
        self.analysis: Optional[DesignAnalysis] = None

    @property
    def design(self) -> HabitatDesign:
        if self._design is None:
            raise RuntimeError("No design loaded; call create_new_design or load_design")
        return self._design

    @property
    def has_design(self) -> bool:
        return self._design is not None

    def _commit(self, design: HabitatDesign) -> HabitatDesign:
        """Recompute, revalidate and publish a new snapshot.

        Geometry errors propagate and leave the previous snapshot in place.
        """
        metrics = compute_design_metrics(design, self.config)
        published = design.model_copy(update={"metrics": metrics})
        findings = validate_design(published, self.standards_provider.get(), self.config)
        published = published.model_copy(
            update={
                "findings": findings,
                "compliance_score": calculate_compliance_score(findings, self.config.score),
            }
        )
        self._design = published
        self.analysis = None
        return published

    def _edit(self, **update: Any) -> HabitatDesign:
        update["updated_at"] = datetime.now()
        return self._commit(self.design.model_copy(update=update))

    # Design lifecycle

    def create_new_design(self, name: str, description: str = "") -> HabitatDesign:
        design = HabitatDesign(name=name, description=description)
        logger.info(f"Creating design {design.name} ({design.id})")
        return self._commit(design)

    def load_design(self, design: HabitatDesign) -> HabitatDesign:
        logger.info(f"Loading design {design.name} ({design.id})")
        return self._commit(design)

    def import_json(self, data: str) -> HabitatDesign:
        """Load a design from its JSON export."""
        return self.load_design(HabitatDesign.model_validate_json(data))

    def export_json(self) -> str:
        return self.design.model_dump_json(indent=2)

    def save(self, output_path: Path) -> None:
        self.design.save_to_file(output_path)

    def open(self, file_path: Path) -> HabitatDesign:
        return self.load_design(HabitatDesign.load_from_file(file_path))

    def update_metadata(self, **fields: Any) -> HabitatDesign:
        unknown = set(fields) - set(METADATA_FIELDS)
        if unknown:
            raise ValueError(f"Not metadata fields: {', '.join(sorted(unknown))}")
        merged = {**self.design.model_dump(include=set(METADATA_FIELDS)), **fields}
        # Round-trip through the model so length limits apply
        checked = HabitatDesign.model_validate(merged)
        return self._edit(**{key: getattr(checked, key) for key in fields})

    # Habitat shell and mission

    def update_shape(self, shape) -> HabitatDesign:
        """Replace the pressure shell with a complete shape descriptor."""
        shape = _shape_adapter.validate_python(shape)
        logger.debug(f"Updating shape to {shape!r}")
        return self._edit(shape=shape)

    def update_dimensions(self, **dimensions: float) -> HabitatDesign:
        """Change dimensions of the current shape, keeping the others."""
        current = self.design.shape
        merged = {**current.model_dump(exclude={"shape"}), **dimensions}
        return self.update_shape(make_shape(current.shape, **merged))

    def switch_shape(self, tag, **dimensions: float) -> HabitatDesign:
        """Change the shape tag, filling unspecified dimensions with defaults."""
        tag = ShapeTag(tag)
        merged = {**SHAPE_DEFAULTS[tag], **dimensions}
        logger.info(f"Switching habitat shape to {tag.value}")
        return self.update_shape(make_shape(tag, **merged))

    def update_mission_parameters(self, **params: Any) -> HabitatDesign:
        merged = {**self.design.mission.model_dump(), **params}
        return self._edit(mission=MissionParameters.model_validate(merged))

    # Modules

    def add_module(self, **fields: Any) -> str:
        """Add a module and return its id."""
        module = FunctionalModule(**fields)
        if self.design.module(module.id) is not None:
            raise ValueError(f"Duplicate module id: {module.id}")
        self._edit(modules=[*self.design.modules, module])
        logger.info(f"Added {module.type.value} module {module.name} ({module.id})")
        return module.id

    def update_module(self, module_id: str, **updates: Any) -> HabitatDesign:
        current = self.design.module(module_id)
        if current is None:
            raise KeyError(module_id)
        data = current.model_dump(exclude={"volume", "mass"})
        data.update(updates)
        data["id"] = module_id
        updated = FunctionalModule.model_validate(data)
        modules = [updated if m.id == module_id else m for m in self.design.modules]
        return self._edit(modules=modules)

    def remove_module(self, module_id: str) -> HabitatDesign:
        """Remove a module together with every connection touching it."""
        if self.design.module(module_id) is None:
            raise KeyError(module_id)
        modules = [m for m in self.design.modules if m.id != module_id]
        connections = [
            c
            for c in self.design.connections
            if module_id not in (c.from_module_id, c.to_module_id)
        ]
        logger.info(f"Removed module {module_id}")
        return self._edit(modules=modules, connections=connections)

    # Connections

    def add_connection(self, from_id: str, to_id: str, type: str = "corridor") -> str:
        """Connect two existing modules and return the connection id."""
        for module_id in (from_id, to_id):
            if self.design.module(module_id) is None:
                raise KeyError(module_id)

        defaults = self.config.design
        diameter = (
            defaults.AIRLOCK_CONNECTION_DIAMETER_M
            if type == "airlock"
            else defaults.CONNECTION_DIAMETER_M
        )
        connection = Connection(
            from_module_id=from_id,
            to_module_id=to_id,
            type=type,
            diameter=diameter,
            length=defaults.CONNECTION_LENGTH_M,
        )
        self._edit(connections=[*self.design.connections, connection])
        logger.debug(f"Connected {from_id} -> {to_id} ({type})")
        return connection.id

    def remove_connection(self, connection_id: str) -> HabitatDesign:
        connections = [c for c in self.design.connections if c.id != connection_id]
        if len(connections) == len(self.design.connections):
            raise KeyError(connection_id)
        return self._edit(connections=connections)

    # Validation and analysis

    def validate(self) -> HabitatDesign:
        """Re-run validation, e.g. after the standards source changed."""
        return self._commit(self.design)

    def analyze(self) -> DesignAnalysis:
        self.analysis = analyze_design(
            self.design, self.standards_provider.get(), self.config
        )
        return self.analysis
