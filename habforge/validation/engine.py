"""Design validation entry points."""

from typing import Iterable, List, Optional

from loguru import logger

from ..config import EngineConfig, ScorePenalties, config
from ..errors import HabForgeError
from ..models import Finding, HabitatDesign, Severity
from ..standards.schema import StandardsConfig
from .rules import CHECKERS


def validate_design(
    design: HabitatDesign,
    standards: StandardsConfig,
    engine_config: Optional[EngineConfig] = None,
) -> List[Finding]:
    """Evaluate a design snapshot against a standards configuration.

    Runs every rule checker in a fixed order. A checker that fails on bad
    input (incomplete shell dimensions, a shape without formulas, a duration
    outside the category table) is logged and skipped; the others still run,
    so a best-effort finding list is always returned.

    Args:
        design: Design snapshot; never modified
        standards: Standards table to validate against
        engine_config: Thresholds and factors; the global configuration when omitted

    Returns:
        Findings in checker order
    """
    findings: List[Finding] = []
    for checker_cls in CHECKERS:
        checker = checker_cls(design, standards, engine_config)
        try:
            results = checker.check()
        except HabForgeError as e:
            logger.warning(f"Skipping {checker.name} check for {design.name}: {e}")
            continue
        findings.extend(results)

    logger.debug(f"Validated {design.name}: {len(findings)} findings")
    return findings


def calculate_compliance_score(
    findings: Iterable[Finding], penalties: Optional[ScorePenalties] = None
) -> int:
    """Score from 0 to 100: a flat deduction per finding by severity."""
    penalties = penalties or config.score
    deduction = sum(penalties.for_severity(Severity(f.severity).value) for f in findings)
    return max(0, min(100, 100 - deduction))
