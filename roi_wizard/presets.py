from dataclasses import asdict, dataclass
from enum import Enum
from functools import total_ordering
from typing import Dict


@total_ordering
class Preset(Enum):
    LOW = "Low"
    AVERAGE = "Average"
    AGGRESSIVE = "Aggressive"

    @property
    def rank(self) -> int:
        return list(Preset).index(self)

    def __lt__(self, other):
        if not isinstance(other, Preset):
            return NotImplemented
        return self.rank < other.rank


@dataclass(frozen=True)
class PresetDefaults:
    adoption_rate: float
    hours_saved_per_week: float
    confidence_discount: float


PRESETS: Dict[Preset, PresetDefaults] = {
    Preset.LOW: PresetDefaults(adoption_rate=0.30, hours_saved_per_week=1.0, confidence_discount=0.50),
    Preset.AVERAGE: PresetDefaults(adoption_rate=0.60, hours_saved_per_week=2.0, confidence_discount=0.70),
    Preset.AGGRESSIVE: PresetDefaults(adoption_rate=0.85, hours_saved_per_week=4.0, confidence_discount=0.90),
}

# preset default -> InputAggregate field it overwrites
FIELD_MAP = {
    "adoption_rate": "adoption_rate",
    "hours_saved_per_week": "hours_per_week",
    "confidence_discount": "confidence_discount",
}

PRESET_NOTES = {
    Preset.LOW: "Cautious rollout; few daily users and modest time savings.",
    Preset.AVERAGE: "Typical adoption after a structured training program.",
    Preset.AGGRESSIVE: "Champions network and workflow redesign; heavy daily use.",
}


def apply_preset(preset: Preset) -> PresetDefaults:
    return PRESETS[preset]


def preset_fields(preset: Preset) -> Dict[str, float]:
    """Aggregate field name -> default value for ``preset``."""
    return {FIELD_MAP[k]: v for k, v in asdict(apply_preset(preset)).items()}
