# ================================================================
# PROJECT: NOISEMAP - LOCAL NOISE VISUALIZER
#
# FILE: UTILS/PRESETS.PY - NAMED VISUALIZATION PRESETS
# DESCRIPTION: DEFINES PRESET OBJECTS AND BUILDS PARAMETERS WITH CLI OVERRIDES
# ================================================================
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from noisemap import VisualizationParameters


# ============================================================
# CLASS VISUALIZATIONPRESET: GROUPS NAME, DESCRIPTION AND SETTINGS
# ============================================================
@dataclass(frozen=True)
class VisualizationPreset:
    """Summary of a registered preset."""

    name: str
    description: str
    parameters: VisualizationParameters


# ===============================================================
# CONSTANT DEFAULT_PRESETS: MAPS THE PROJECT'S MAIN PRESETS
# ===============================================================
DEFAULT_PRESETS: List[VisualizationPreset] = [
    VisualizationPreset("interactive", "Mid-range slider position", VisualizationParameters()),
    VisualizationPreset(
        "comparison",
        "Full sensitivity for before/after maps",
        VisualizationParameters(sensitivity=100),
    ),
    VisualizationPreset(
        "subtle",
        "Only strong deviations, flatter contrast",
        VisualizationParameters(sensitivity=25, gain=1.0, gamma=0.5),
    ),
    VisualizationPreset(
        "strong",
        "Nearly every deviation, steep contrast",
        VisualizationParameters(sensitivity=90, gain=2.0, gamma=0.25),
    ),
]

PRESETS_BY_NAME: Dict[str, VisualizationPreset] = {p.name: p for p in DEFAULT_PRESETS}


# ======================================================================
# FUNCTION GET_PRESET: LOOKS UP A PRESET BY NAME
# ======================================================================
def get_preset(name: str) -> VisualizationPreset:
    try:
        return PRESETS_BY_NAME[name.lower()]
    except KeyError:
        known = ", ".join(sorted(PRESETS_BY_NAME))
        raise KeyError(f"Unknown preset {name!r}. Available: {known}") from None


# ======================================================================
# FUNCTION BUILD_PARAMETERS: APPLIES EXPLICIT OVERRIDES ON TOP OF A PRESET
# ======================================================================
def build_parameters(
    preset: Optional[str] = None,
    sensitivity: Optional[float] = None,
    gain: Optional[float] = None,
    gamma: Optional[float] = None,
    threshold_max: Optional[float] = None,
) -> VisualizationParameters:
    """Returns the preset parameters with any non-None override applied."""

    base = get_preset(preset).parameters if preset else VisualizationParameters()
    overrides = {
        "sensitivity": sensitivity,
        "gain": gain,
        "gamma": gamma,
        "threshold_max": threshold_max,
    }
    values = {
        field: getattr(base, field) if value is None else value
        for field, value in overrides.items()
    }
    return VisualizationParameters(**values)
