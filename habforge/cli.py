"""Command-line interface for HabForge."""

import sys
from pathlib import Path
from typing import Dict, Optional

import typer
from loguru import logger
from rich import print_json
from rich.console import Console
from rich.table import Table

from .analysis import analyze_design
from .errors import HabForgeError
from .geometry.shapes import SHAPE_MODELS
from .geometry import (
    ShapeTag,
    check_launch_constraints,
    compute_moment_of_inertia,
    compute_structural_mass,
    compute_surface_area,
    compute_volume,
    make_shape,
    recommended_dimensions,
)
from .metrics import compute_design_metrics
from .models import HabitatDesign, Severity
from .standards import get_standards_provider
from .templates import get_template, list_templates
from .validation import calculate_compliance_score, validate_design

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | {level} | {message}"

# Configure logger
logger.remove()  # Remove default handler
logger.add(sys.stderr, format=LOG_FORMAT, level="INFO")

app = typer.Typer(
    help="HabForge: Space habitat geometry and NASA standards validation",
    rich_markup_mode="rich",
)
console = Console()

SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
):
    """Design and validate space habitats against NASA standards."""
    if verbose:
        logger.remove()
        logger.add(sys.stderr, format=LOG_FORMAT, level="DEBUG")


def _load_design(design_json: Path) -> HabitatDesign:
    """Read a design file, exiting with status 1 if it cannot be parsed."""
    try:
        return HabitatDesign.load_from_file(design_json)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)


def _load_standards(source: Optional[str]):
    try:
        return get_standards_provider(source).get()
    except (HabForgeError, OSError, ValueError) as e:
        console.print(f"[red]Error loading standards:[/] {e}")
        raise typer.Exit(1)


@app.command(name="validate")
def validate_command(
    design_json: Path = typer.Argument(
        ..., help="Path to habitat design JSON file", exists=True
    ),
    standards: Optional[str] = typer.Option(
        None, "--standards", "-s", help="Standards YAML path or http(s) service URL"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print findings as JSON"),
):
    """Validate a habitat design against NASA standards."""
    design = _load_design(design_json)
    standards_config = _load_standards(standards)

    try:
        design = design.model_copy(update={"metrics": compute_design_metrics(design)})
    except HabForgeError as e:
        logger.warning(f"Could not recompute metrics: {e}")

    findings = validate_design(design, standards_config)
    score = calculate_compliance_score(findings)
    errors = [f for f in findings if f.severity == Severity.ERROR]

    if as_json:
        payload = {
            "design_id": design.id,
            "compliance_score": score,
            "findings": [f.model_dump(mode="json") for f in findings],
        }
        print_json(data=payload)
    else:
        table = Table(title=f"Validation Results: {design.name}")
        table.add_column("Check", style="cyan")
        table.add_column("Severity", justify="center")
        table.add_column("Category")
        table.add_column("Message")
        table.add_column("Standard", style="dim")

        for finding in findings:
            style = SEVERITY_STYLES[finding.severity]
            table.add_row(
                finding.check,
                f"[{style}]{finding.severity.value.upper()}[/]",
                finding.category.value,
                finding.message,
                finding.compliance_standard or "",
            )

        console.print(table)
        score_style = "green" if score >= 80 else "yellow" if score >= 50 else "red"
        console.print(f"Compliance score: [{score_style}]{score}/100[/]")
        console.print(
            f"{len(errors)} errors, "
            f"{sum(1 for f in findings if f.severity == Severity.WARNING)} warnings, "
            f"{sum(1 for f in findings if f.severity == Severity.INFO)} info"
        )

    if errors:
        raise typer.Exit(1)


@app.command(name="analyze")
def analyze_command(
    design_json: Path = typer.Argument(
        ..., help="Path to habitat design JSON file", exists=True
    ),
    standards: Optional[str] = typer.Option(
        None, "--standards", "-s", help="Standards YAML path or http(s) service URL"
    ),
):
    """Analyze volume, mass, layout and redundancy of a design."""
    design = _load_design(design_json)
    standards_config = _load_standards(standards)

    try:
        analysis = analyze_design(design, standards_config)
    except HabForgeError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    volume, mass = analysis.volume, analysis.mass
    console.print(f"\n[bold]Volume Analysis: {design.name}[/]")
    console.print(f"Total volume: {volume.total_volume:.1f} m³")
    console.print(f"Net habitable volume: {volume.net_habitable_volume:.1f} m³")
    console.print(f"Volume per crew: {volume.volume_per_crew:.1f} m³")
    console.print(f"Module utilization: {volume.volume_utilization:.1f}%")

    console.print("\n[bold]Mass Analysis:[/]")
    console.print(f"Total mass: {mass.total_mass / 1000:.1f} t")
    console.print(f"Structural mass: {mass.structural_mass / 1000:.1f} t")
    console.print(f"Mission consumables: {mass.consumables_mass / 1000:.1f} t")
    com = mass.center_of_mass
    console.print(f"Center of mass: ({com.x:.2f}, {com.y:.2f}, {com.z:.2f}) m")

    table = Table(title="Mass by Module Type")
    table.add_column("Type", style="cyan")
    table.add_column("Volume (m³)", justify="right")
    table.add_column("Mass (kg)", justify="right", style="green")
    for module_type, type_mass in sorted(mass.mass_by_type.items()):
        table.add_row(
            module_type,
            f"{volume.volume_by_type.get(module_type, 0.0):.1f}",
            f"{type_mass:.0f}",
        )
    console.print(table)

    access = analysis.accessibility
    console.print("\n[bold]Accessibility:[/]")
    console.print(f"Average path length: {access.average_path_length:.2f} hops")
    console.print(f"Longest path: {access.max_path_length} hops")
    if access.bottlenecks:
        console.print(f"Bottlenecks: [yellow]{', '.join(access.bottlenecks)}[/]")
    if access.unreachable_modules:
        console.print(
            f"No airlock path: [red]{', '.join(access.unreachable_modules)}[/]"
        )

    adjacency, safety = analysis.adjacency, analysis.safety
    console.print("\n[bold]Adjacency and Safety:[/]")
    console.print(
        f"Requirements satisfied: {adjacency.satisfied_requirements}/"
        f"{adjacency.satisfied_requirements + adjacency.violated_requirements}"
    )
    console.print(f"Restrictions violated: {adjacency.violated_restrictions}")
    console.print(f"Redundancy score: {safety.redundancy_score:.0f}/100")
    if safety.critical_single_points:
        console.print(
            f"Critical single points: [red]{', '.join(safety.critical_single_points)}[/]"
        )


def _shape_dimensions(tag: ShapeTag, **options: Optional[float]) -> Dict[str, float]:
    """Keep the options the shape model accepts; inflatables take radius/height."""
    if tag is ShapeTag.INFLATABLE:
        options["inflated_radius"] = options.pop("radius")
        options["inflated_height"] = options.pop("height")
    fields = SHAPE_MODELS[tag].model_fields
    return {k: v for k, v in options.items() if v is not None and k in fields}


@app.command(name="geometry")
def geometry_command(
    shape: ShapeTag = typer.Argument(..., help="Habitat shape"),
    radius: Optional[float] = typer.Option(None, "--radius", help="Radius in m"),
    height: Optional[float] = typer.Option(None, "--height", help="Height in m"),
    major_radius: Optional[float] = typer.Option(
        None, "--major-radius", help="Torus major radius in m"
    ),
    minor_radius: Optional[float] = typer.Option(
        None, "--minor-radius", help="Torus minor radius in m"
    ),
    length: Optional[float] = typer.Option(None, "--length", help="Length in m"),
    width: Optional[float] = typer.Option(None, "--width", help="Width in m"),
    vehicle: Optional[str] = typer.Option(
        None, "--vehicle", help="Launch vehicle id to check the fit against"
    ),
    standards: Optional[str] = typer.Option(
        None, "--standards", "-s", help="Standards YAML path or http(s) service URL"
    ),
):
    """Compute volume, surface area, mass and inertia of a habitat shape."""
    dimensions = _shape_dimensions(
        shape,
        radius=radius,
        height=height,
        major_radius=major_radius,
        minor_radius=minor_radius,
        length=length,
        width=width,
    )

    try:
        habitat = make_shape(shape, **dimensions)
        volume = compute_volume(habitat)
        area = compute_surface_area(habitat)
        mass = compute_structural_mass(habitat)
        inertia = compute_moment_of_inertia(habitat)
    except (HabForgeError, ValueError) as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    table = Table(title=f"{shape.value.capitalize()} Habitat Geometry")
    table.add_column("Property", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Volume (m³)", f"{volume:.2f}")
    table.add_row("Surface area (m²)", f"{area:.2f}")
    table.add_row("Structural mass (kg)", f"{mass:.0f}")
    table.add_row("Ixx (kg·m²)", f"{inertia.ixx:.3e}")
    table.add_row("Iyy (kg·m²)", f"{inertia.iyy:.3e}")
    table.add_row("Izz (kg·m²)", f"{inertia.izz:.3e}")
    console.print(table)

    if vehicle is None:
        return

    fairing = _load_standards(standards).fairing(vehicle)
    if fairing is None:
        console.print(f"[red]Error:[/] Unknown launch vehicle: {vehicle}")
        raise typer.Exit(1)

    fit = check_launch_constraints(habitat, fairing.diameter, fairing.height, fairing.mass_limit)
    factors = fit.utilization_factors
    status = "[green]✓ Fits[/]" if fit.fits else "[red]✗ Does not fit[/]"
    console.print(f"\n[bold]{fairing.label or vehicle}:[/] {status}")
    for violation in fit.violations:
        console.print(f"  [red]•[/] {violation}")
    console.print(
        f"Utilization: diameter {factors.diameter:.0%}, height {factors.height:.0%}, "
        f"mass {factors.mass:.0%}"
    )
    if not fit.fits:
        raise typer.Exit(1)


@app.command(name="recommend")
def recommend_command(
    shape: ShapeTag = typer.Argument(..., help="Habitat shape"),
    volume: float = typer.Argument(..., help="Target volume in m³"),
    aspect_ratio: Optional[float] = typer.Option(
        None, "--aspect-ratio", help="Cylinder height over diameter (default 2.0)"
    ),
):
    """Suggest dimensions that enclose a target volume."""
    try:
        habitat = recommended_dimensions(shape, volume, aspect_ratio)
    except HabForgeError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    console.print(f"Recommended {shape.value} for {volume:.1f} m³:")
    for field, value in habitat.model_dump(exclude={"shape"}, exclude_none=True).items():
        console.print(f"  {field}: [green]{value:.2f} m[/]")


@app.command(name="vehicles")
def vehicles_command(
    standards: Optional[str] = typer.Option(
        None, "--standards", "-s", help="Standards YAML path or http(s) service URL"
    ),
):
    """List launch vehicles and their payload fairings."""
    standards_config = _load_standards(standards)

    table = Table(title="Launch Vehicles")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Diameter (m)", justify="right")
    table.add_column("Height (m)", justify="right")
    table.add_column("Volume (m³)", justify="right")
    table.add_column("Mass limit (t)", justify="right", style="green")

    for vehicle_id, fairing in standards_config.launch_vehicles.items():
        table.add_row(
            vehicle_id,
            fairing.label,
            f"{fairing.diameter:.1f}",
            f"{fairing.height:.1f}",
            f"{fairing.volume:.0f}" if fairing.volume else "-",
            f"{fairing.mass_limit / 1000:.1f}",
        )

    console.print(table)


@app.command(name="template")
def template_command(
    name: Optional[str] = typer.Argument(None, help="Template name; lists templates if omitted"),
    out: Optional[Path] = typer.Option(
        None, "--out", "-o", help="Write the design JSON to this file"
    ),
):
    """Print or save a sample habitat design."""
    if name is None:
        for template_name in list_templates():
            console.print(f"• [cyan]{template_name}[/]")
        return

    try:
        design = get_template(name)
    except KeyError as e:
        console.print(f"[red]Error:[/] {e.args[0]}")
        raise typer.Exit(1)

    if out is None:
        print_json(design.model_dump_json())
        return

    design.save_to_file(out)
    console.print(f"✓ Saved [cyan]{name}[/] to [blue]{out}[/]")


if __name__ == "__main__":
    app()
