"""
Fire behavior inputs

FireBehaviorSample is an immutable snapshot of one fire behavior calculation.
It is validated at the boundary so bad values never reach the emitter.
"""

import json
import math
import numbers
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Union


METERS_TO_FEET = 3.28084


class InvalidFireBehaviorError(ValueError):
    """A fire behavior value is missing, non-numeric, non-finite or negative"""


# Service document keys for each field: (path, is_metric_length)
_SERVICE_KEYS = {
    'flame_length': (('flameLength',), False),
    'fireline_intensity': (('firelineIntensity',), False),
    'rate_of_spread_max': (('rateOfSpreadMax',), False),
    'rate_of_spread_flanking': (('rateOfSpreadFlanking',), False),
    'effective_wind_speed': (('effectiveWindSpeed',), False),
    'heat_release': (('fuelBed', 'heatRelease'), False),
    'fuel_bed_depth': (('fuelBed', 'fuelModel', 'fuelBedDepth'), True),
    'characteristic_sav': (('fuelBed', 'characteristicSAV'), False),
    'flame_residence_time': (('fuelBed', 'flameResidenceTime'), False),
    'reaction_velocity': (('fuelBed', 'reactionVelocity'), False),
}

_CAMEL_CASE = {
    'flameLength': 'flame_length',
    'firelineIntensity': 'fireline_intensity',
    'rateOfSpreadMax': 'rate_of_spread_max',
    'rateOfSpreadFlanking': 'rate_of_spread_flanking',
    'effectiveWindSpeed': 'effective_wind_speed',
    'heatRelease': 'heat_release',
    'fuelBedDepth': 'fuel_bed_depth',
    'characteristicSAV': 'characteristic_sav',
    'flameResidenceTime': 'flame_residence_time',
    'reactionVelocity': 'reaction_velocity',
}


@dataclass(frozen=True)
class FireBehaviorSample:
    """Result of one surface fire calculation"""
    flame_length: float = 0.0               # ft
    fireline_intensity: float = 0.0         # Btu/ft/s
    rate_of_spread_max: float = 0.0         # ft/min
    rate_of_spread_flanking: float = 0.0    # ft/min
    effective_wind_speed: float = 0.0       # mph
    heat_release: float = 0.0               # Btu/ft2
    fuel_bed_depth: float = 0.0             # ft
    characteristic_sav: float = 0.0         # 1/ft
    flame_residence_time: float = 0.0       # min
    reaction_velocity: float = 0.0          # 1/min

    def validate(self) -> 'FireBehaviorSample':
        """
        Check every field is a finite, non-negative number.

        Returns:
            self, for chaining

        Raises:
            InvalidFireBehaviorError: naming the first bad field
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidFireBehaviorError(f"{f.name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidFireBehaviorError(f"{f.name} must be finite, got {value}")
            if value < 0:
                raise InvalidFireBehaviorError(f"{f.name} must be non-negative, got {value}")
        return self

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FireBehaviorSample':
        """
        Create from a flat mapping with snake_case or camelCase keys.

        Unknown keys are ignored; missing ones default to zero.
        """
        valid_fields = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            name = _CAMEL_CASE.get(key, key)
            if name in valid_fields:
                values[name] = _to_float(name, value)
        return cls(**values)

    @classmethod
    def from_service_json(cls, doc: Dict[str, Any]) -> 'FireBehaviorSample':
        """
        Create from a surface fire document returned by the calculation
        service, where each leaf is an object with a string "value".

        Raises:
            InvalidFireBehaviorError: if a required leaf is missing
        """
        values = {}
        for name, (path, metric) in _SERVICE_KEYS.items():
            node = doc
            for key in path:
                if not isinstance(node, dict) or key not in node:
                    raise InvalidFireBehaviorError(f"Missing '{'.'.join(path)}' in fire behavior document")
                node = node[key]
            value = _to_float(name, node)
            values[name] = value * METERS_TO_FEET if metric else value
        return cls(**values)


def _to_float(name: str, value: Any) -> float:
    if isinstance(value, dict):
        value = value.get('value')
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidFireBehaviorError(f"{name} must be a number, got {value!r}") from None


def load_fire_behavior(path: Union[str, Path]) -> FireBehaviorSample:
    """
    Load and validate a sample from a JSON file.

    Accepts either a flat mapping of values or a service document
    (detected by its nested "fuelBed" object).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, 'r') as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise InvalidFireBehaviorError(f"Expected a JSON object in {path}")

    if isinstance(data.get('fuelBed'), dict):
        sample = FireBehaviorSample.from_service_json(data)
    else:
        sample = FireBehaviorSample.from_dict(data)
    return sample.validate()
