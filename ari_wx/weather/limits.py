"""Runway wind operating limits by surface condition and approach category."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class RunwaySurface(Enum):
    DRY = "DRY"
    WET = "WET"
    CONTAM = "CONTAM"


class ApproachCategory(Enum):
    CATI = "CATI"
    CATII = "CATII"
    CATIII = "CATIII"


@dataclass(frozen=True)
class WindLimits:
    """Maximum tailwind and crosswind in knots."""

    max_tailwind: float
    max_crosswind: float
    max_crosswind_gust: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            'max_tailwind': self.max_tailwind,
            'max_crosswind': self.max_crosswind,
            'max_crosswind_gust': self.max_crosswind_gust,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'WindLimits':
        return cls(
            max_tailwind=data['max_tailwind'],
            max_crosswind=data['max_crosswind'],
            max_crosswind_gust=data.get('max_crosswind_gust'),
        )


@dataclass
class OperatingLimits:
    """
    Wind limits table supplied by the operator.

    ``normal`` applies to manual landings and is keyed by surface.
    ``autoland`` is keyed by approach category, then surface. CAT I has no
    autoland entry and falls back to the normal table.

    Nothing in the package reads a global copy of this table: callers build
    one (or use ``default()``) and pass it where limits are checked.
    """

    normal: Dict[RunwaySurface, WindLimits] = field(default_factory=dict)
    autoland: Dict[ApproachCategory, Dict[RunwaySurface, WindLimits]] = field(default_factory=dict)

    def for_conditions(
        self,
        surface: RunwaySurface,
        approach: ApproachCategory = ApproachCategory.CATI,
        autoland: bool = False,
    ) -> Optional[WindLimits]:
        """
        Select the applicable limits.

        Args:
            surface: Runway surface condition
            approach: Approach category flown
            autoland: Whether an autoland is planned

        Returns:
            WindLimits, or None if the table has no matching entry
        """
        if autoland and approach in self.autoland:
            limits = self.autoland[approach].get(surface)
            if limits is not None:
                return limits
        return self.normal.get(surface)

    def to_dict(self) -> dict:
        return {
            'normal': {s.value: l.to_dict() for s, l in self.normal.items()},
            'autoland': {
                a.value: {s.value: l.to_dict() for s, l in table.items()}
                for a, table in self.autoland.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'OperatingLimits':
        """Build from a dict such as one loaded from a JSON config file."""
        normal = {
            RunwaySurface(s): WindLimits.from_dict(l)
            for s, l in data.get('normal', {}).items()
        }
        autoland = {
            ApproachCategory(a): {
                RunwaySurface(s): WindLimits.from_dict(l) for s, l in table.items()
            }
            for a, table in data.get('autoland', {}).items()
        }
        return cls(normal=normal, autoland=autoland)

    @classmethod
    def default(cls) -> 'OperatingLimits':
        """Reference figures for a typical transport-category operation."""
        return cls.from_dict({
            'normal': {
                'DRY': {'max_tailwind': 10, 'max_crosswind': 35},
                'WET': {'max_tailwind': 5, 'max_crosswind': 25},
                'CONTAM': {'max_tailwind': 0, 'max_crosswind': 15},
            },
            'autoland': {
                'CATII': {
                    'DRY': {'max_tailwind': 10, 'max_crosswind': 25},
                    'WET': {'max_tailwind': 5, 'max_crosswind': 20},
                    'CONTAM': {'max_tailwind': 0, 'max_crosswind': 15},
                },
                'CATIII': {
                    'DRY': {'max_tailwind': 5, 'max_crosswind': 20},
                    'WET': {'max_tailwind': 0, 'max_crosswind': 15},
                    'CONTAM': {'max_tailwind': 0, 'max_crosswind': 10},
                },
            },
        })
