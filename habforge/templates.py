"""Sample habitat designs used as starting points."""

from typing import Callable, Dict, List

from .geometry import CylinderShape
from .models import (
    AccessRequirements,
    Connection,
    Destination,
    FunctionalModule,
    HabitatDesign,
    MissionParameters,
    ModuleDimensions,
    ModuleType,
    Vector3D,
)


def _module(module_id, name, module_type, size, position, **fields) -> FunctionalModule:
    length, width, height = size
    x, y, z = position
    return FunctionalModule(
        id=module_id,
        name=name,
        type=module_type,
        dimensions=ModuleDimensions(length=length, width=width, height=height),
        position=Vector3D(x=x, y=y, z=z),
        **fields,
    )


def _corridors(pairs, connection_type="corridor") -> List[Connection]:
    return [
        Connection(
            id=f"conn-{a}-{b}",
            from_module_id=a,
            to_module_id=b,
            type=connection_type,
            diameter=1.2 if connection_type == "airlock" else 0.8,
        )
        for a, b in pairs
    ]


def luna_base_alpha() -> HabitatDesign:
    """Four-crew lunar surface outpost launched on Starship."""
    modules = [
        _module("cmd", "Command Deck", ModuleType.COMMAND, (4, 3, 2.5), (0, 0, 10),
                power_requirement=8.0, crew_capacity=4, essential=True,
                adjacency_requirements=["hab"]),
        _module("hab", "Crew Quarters", ModuleType.HABITATION, (4, 3, 2.5), (0, 0, 7.5),
                power_requirement=3.0, crew_capacity=4, essential=True,
                adjacency_restrictions=["gym"]),
        _module("lab", "Science Lab", ModuleType.LABORATORY, (4, 3, 2.5), (0, 0, 5),
                power_requirement=10.0, crew_capacity=3),
        _module("rec", "Wardroom", ModuleType.RECREATION, (5, 4, 2.5), (0, 0, 2.5),
                power_requirement=2.0, crew_capacity=4),
        _module("log", "Logistics Bay", ModuleType.LOGISTICS, (3, 2, 2.5), (2, 0, 0),
                power_requirement=1.0, essential=True),
        _module("gym", "Exercise Bay", ModuleType.EXERCISE, (3, 2.5, 2.5), (-2, 0, 0),
                power_requirement=2.5, crew_capacity=2, essential=True),
        _module("med", "Medical Bay", ModuleType.MEDICAL, (2, 2, 2.5), (0, 2, 0),
                power_requirement=2.0, crew_capacity=2, essential=True),
        _module("al1", "Main Airlock", ModuleType.AIRLOCK, (2, 2, 2.5), (0, -3, 0),
                power_requirement=1.5, crew_capacity=2, essential=True,
                access_requirements=AccessRequirements(direct_access=True, emergency_access=True)),
        _module("al2", "Emergency Airlock", ModuleType.AIRLOCK, (2, 2, 2.5), (0, 3, 10),
                power_requirement=1.5, crew_capacity=2, essential=True,
                access_requirements=AccessRequirements(emergency_access=True)),
    ]
    connections = _corridors(
        [("cmd", "hab"), ("hab", "lab"), ("lab", "rec"), ("rec", "log"),
         ("rec", "gym"), ("rec", "med")]
    ) + _corridors([("rec", "al1"), ("cmd", "al2")], connection_type="airlock")

    return HabitatDesign(
        id="luna-base-alpha",
        name="Luna Base Alpha",
        description="Single-launch lunar surface habitat for a 180-day crew rotation",
        shape=CylinderShape(radius=4.0, height=12.0),
        mission=MissionParameters(
            crew_size=4,
            duration_days=180,
            destination=Destination.LUNAR_SURFACE,
            launch_vehicle="starship",
            mission_type="exploration",
        ),
        modules=modules,
        connections=connections,
    )


def mars_transit() -> HabitatDesign:
    """Six-crew deep space transit habitat for a 500-day round trip."""
    modules = [
        _module("cmd", "Flight Deck", ModuleType.COMMAND, (4, 3, 2.5), (0, 0, 13),
                power_requirement=10.0, crew_capacity=6, essential=True),
        _module("hab", "Crew Quarters", ModuleType.HABITATION, (5, 4, 2.5), (0, 0, 10.5),
                power_requirement=4.0, crew_capacity=6, essential=True,
                adjacency_requirements=["rec"]),
        _module("rec", "Galley and Wardroom", ModuleType.RECREATION, (5, 5, 2.5), (0, 0, 8),
                power_requirement=3.0, crew_capacity=6),
        _module("lab", "Science Lab", ModuleType.LABORATORY, (4, 4, 2.5), (0, 0, 5.5),
                power_requirement=12.0, crew_capacity=3),
        _module("grn", "Veggie Garden", ModuleType.GREENHOUSE, (5, 4, 2.5), (0, 0, 3),
                power_requirement=6.0, crew_capacity=2),
        _module("log", "Pantry and Stores", ModuleType.LOGISTICS, (4, 3, 2.5), (2, 0, 0.5),
                power_requirement=1.0, essential=True),
        _module("gym", "Exercise Bay", ModuleType.EXERCISE, (3, 2.5, 2.5), (-2, 0, 0.5),
                power_requirement=3.0, crew_capacity=2, essential=True,
                adjacency_restrictions=["hab"]),
        _module("med", "Medical Bay", ModuleType.MEDICAL, (3, 2, 2.5), (0, 2, 0.5),
                power_requirement=2.5, crew_capacity=2, essential=True),
        _module("al1", "EVA Airlock", ModuleType.AIRLOCK, (2, 2, 2.5), (0, -3, 0.5),
                power_requirement=1.5, crew_capacity=3, essential=True),
        _module("al2", "Contingency Airlock", ModuleType.AIRLOCK, (2, 2, 2.5), (0, 3, 13),
                power_requirement=1.5, crew_capacity=3, essential=True),
    ]
    connections = _corridors(
        [("cmd", "hab"), ("hab", "rec"), ("rec", "lab"), ("lab", "grn"),
         ("grn", "log"), ("grn", "gym"), ("grn", "med")]
    ) + _corridors([("log", "al1"), ("cmd", "al2")], connection_type="airlock")

    return HabitatDesign(
        id="mars-transit",
        name="Mars Transit Habitat",
        description="Deep space transit vehicle habitat for a Mars round trip",
        shape=CylinderShape(radius=4.2, height=16.0),
        mission=MissionParameters(
            crew_size=6,
            duration_days=500,
            destination=Destination.DEEP_SPACE,
            launch_vehicle="starship",
            mission_type="exploration",
        ),
        modules=modules,
        connections=connections,
    )


TEMPLATES: Dict[str, Callable[[], HabitatDesign]] = {
    "luna-base-alpha": luna_base_alpha,
    "mars-transit": mars_transit,
}


def list_templates() -> List[str]:
    return list(TEMPLATES)


def get_template(name: str) -> HabitatDesign:
    """Build a fresh copy of a named sample design.

    Raises:
        KeyError: if no template has that name
    """
    try:
        builder = TEMPLATES[name]
    except KeyError:
        raise KeyError(
            f"Unknown template '{name}'. Available: {', '.join(TEMPLATES)}"
        ) from None
    return builder()
