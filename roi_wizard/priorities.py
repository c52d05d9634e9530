from enum import Enum
from typing import Dict, Iterable

from roi_wizard.errors import EmptySelectionError


class Priority(Enum):
    THROUGHPUT = "throughput"
    RETENTION = "retention"
    UPSKILLING = "upskilling"


PRIORITIES = {
    Priority.THROUGHPUT: {
        "label": "Throughput",
        "note": "Ship faster; reduce cycle time",
        "weight": 3.0,
    },
    Priority.RETENTION: {
        "label": "Retention",
        "note": "Reduce regretted attrition",
        "weight": 2.0,
    },
    Priority.UPSKILLING: {
        "label": "Upskilling",
        "note": "Raise AI competency coverage",
        "weight": 1.0,
    },
}


def select_priorities(selected: Iterable[Priority]) -> Dict[Priority, float]:
    """Normalize the weights of ``selected`` so they sum to 1.0.

    An empty selection has no defined weights and raises ``EmptySelectionError``.
    """
    chosen = [p for p in Priority if p in set(selected)]
    if not chosen:
        raise EmptySelectionError("At least one priority must be selected")
    total = sum(PRIORITIES[p]["weight"] for p in chosen)
    return {p: PRIORITIES[p]["weight"] / total for p in chosen}


def normalized_weight(selected: Iterable[Priority], priority: Priority) -> float:
    return select_priorities(selected).get(priority, 0.0)
