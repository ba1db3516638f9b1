"""
Fire Presets Library - Named fire behavior scenarios and emitter calibration
Allows users to run a representative flame with a single flag
"""

import yaml
from pathlib import Path
from typing import Dict, List, Optional, Any, Union
from dataclasses import dataclass, field, fields, asdict

from ..fire.behavior import FireBehaviorSample
from ..fire.emitter import EmitterCalibration
from .utils import ColorUtils


# ============================================================================
# Preset Data Structures
# ============================================================================

@dataclass
class FirePreset:
    """A named fire behavior scenario"""

    name: str
    description: str = ""

    # FireBehaviorSample fields (snake_case or camelCase)
    behavior: Dict[str, float] = field(default_factory=dict)

    # Particle colors, any format ColorUtils.parse accepts
    start_color: str = "yellow"
    end_color: Optional[str] = "red"

    # Tags for organization
    tags: List[str] = field(default_factory=list)

    def sample(self) -> FireBehaviorSample:
        """Validated fire behavior sample for this preset"""
        return FireBehaviorSample.from_dict(self.behavior).validate()

    def colors(self):
        start = ColorUtils.parse(self.start_color)
        end = ColorUtils.parse(self.end_color) if self.end_color else None
        return start, end

    def to_dict(self) -> Dict[str, Any]:
        """Mapping for YAML, without empty fields"""
        return {k: v for k, v in asdict(self).items() if v}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FirePreset':
        """Create from a mapping, ignoring unknown keys"""
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)


# ============================================================================
# Built-in Presets
# ============================================================================

BUILTIN_PRESETS: Dict[str, Dict[str, Any]] = {
    "grass": {
        "description": "Short grass (FM1), fast running low flames",
        "behavior": {
            "flame_length": 4.0,
            "fireline_intensity": 114.5,
            "rate_of_spread_max": 76.3,
            "rate_of_spread_flanking": 7.6,
            "effective_wind_speed": 5.0,
            "heat_release": 90.0,
            "fuel_bed_depth": 1.0,
            "characteristic_sav": 3500.0,
            "flame_residence_time": 0.11,
            "reaction_velocity": 15.0,
        },
        "start_color": "gold",
        "end_color": "orangered",
        "tags": ["grass", "fast"],
    },
    "chaparral": {
        "description": "Chaparral (FM4), hot and dry afternoon",
        "behavior": {
            "flame_length": 23.14,
            "fireline_intensity": 5178.0,
            "rate_of_spread_max": 114.65,
            "rate_of_spread_flanking": 11.5,
            "effective_wind_speed": 10.0,
            "heat_release": 2710.0,
            "fuel_bed_depth": 6.0,
            "characteristic_sav": 1739.0,
            "flame_residence_time": 0.22,
            "reaction_velocity": 8.5,
        },
        "start_color": "yellow",
        "end_color": "red",
        "tags": ["shrub", "extreme"],
    },
    "timber_litter": {
        "description": "Closed timber litter (FM8), slow creeping surface fire",
        "behavior": {
            "flame_length": 1.0,
            "fireline_intensity": 5.67,
            "rate_of_spread_max": 1.36,
            "rate_of_spread_flanking": 0.14,
            "effective_wind_speed": 2.0,
            "heat_release": 250.0,
            "fuel_bed_depth": 0.2,
            "characteristic_sav": 1900.0,
            "flame_residence_time": 0.2,
            "reaction_velocity": 5.0,
        },
        "start_color": "orange",
        "end_color": "darkred",
        "tags": ["timber", "low"],
    },
    "slash": {
        "description": "Heavy logging slash (FM13)",
        "behavior": {
            "flame_length": 12.0,
            "fireline_intensity": 1246.0,
            "rate_of_spread_max": 21.4,
            "rate_of_spread_flanking": 2.1,
            "effective_wind_speed": 5.0,
            "heat_release": 3500.0,
            "fuel_bed_depth": 3.0,
            "characteristic_sav": 1500.0,
            "flame_residence_time": 0.26,
            "reaction_velocity": 6.0,
        },
        "start_color": "yellow",
        "end_color": "red",
        "tags": ["slash", "extreme"],
    },
    "smoldering": {
        "description": "Smoldering duff, barely flaming",
        "behavior": {
            "flame_length": 0.5,
            "fireline_intensity": 1.26,
            "rate_of_spread_max": 1.26,
            "rate_of_spread_flanking": 0.13,
            "effective_wind_speed": 0.0,
            "heat_release": 60.0,
            "fuel_bed_depth": 0.5,
            "characteristic_sav": 1200.0,
            "flame_residence_time": 0.3,
            "reaction_velocity": 2.0,
        },
        "start_color": "orange",
        "end_color": "darkgray",
        "tags": ["low"],
    },
}


# ============================================================================
# Preset Manager
# ============================================================================

class PresetManager:
    """
    Built-in fire presets plus user presets read from a YAML directory.

    A user file holds either one preset (named by its 'name' key or the
    file stem) or several under a top-level 'presets' mapping. User presets
    shadow built-ins of the same name.
    """

    def __init__(self, user_presets_dir: Optional[Path] = None):
        self.user_presets_dir = Path(user_presets_dir or Path.home() / '.wildfirefx' / 'presets')
        self._builtin: Dict[str, FirePreset] = {
            name: FirePreset.from_dict({**data, 'name': name})
            for name, data in BUILTIN_PRESETS.items()
        }
        self._user: Dict[str, FirePreset] = {}
        self._sources: Dict[str, Path] = {}
        self.reload()

    def reload(self) -> None:
        """Re-read the user preset directory; unreadable files are skipped"""
        self._user.clear()
        self._sources.clear()
        if not self.user_presets_dir.is_dir():
            return

        for path in sorted(self.user_presets_dir.glob('*.yaml')):
            try:
                for preset in self._read_file(path):
                    self._user[preset.name] = preset
                    self._sources[preset.name] = path
            except (OSError, yaml.YAMLError, TypeError, AttributeError) as e:
                print(f"Warning: Could not load preset file {path}: {e}")

    @staticmethod
    def _read_file(path: Path) -> List[FirePreset]:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            return []
        if 'presets' in data:
            return [FirePreset.from_dict({**entry, 'name': name})
                    for name, entry in data['presets'].items()]
        return [FirePreset.from_dict({**data, 'name': data.get('name', path.stem)})]

    def get(self, name: str) -> Optional[FirePreset]:
        return self._user.get(name) or self._builtin.get(name)

    def exists(self, name: str) -> bool:
        return name in self._user or name in self._builtin

    def is_builtin(self, name: str) -> bool:
        return name in self._builtin and name not in self._user

    def list_all(self) -> List[str]:
        return sorted(self._builtin.keys() | self._user.keys())

    def list_by_tag(self, tag: str) -> List[str]:
        """Names of presets carrying a tag (case-insensitive)"""
        wanted = tag.lower()
        return [
            name for name in self.list_all()
            if wanted in {t.lower() for t in self.get(name).tags}
        ]

    def save_preset(self, preset: FirePreset, filename: Optional[str] = None) -> Path:
        """
        Write a preset to its own YAML file in the user directory.

        Returns:
            Path of the written file
        """
        stem = Path(filename).stem if filename else preset.name
        path = self.user_presets_dir / f"{stem}.yaml"
        self.user_presets_dir.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            yaml.dump(preset.to_dict(), f, default_flow_style=False, sort_keys=False)

        self._user[preset.name] = preset
        self._sources[preset.name] = path
        return path

    def delete_preset(self, name: str) -> bool:
        """
        Remove a user preset and its entry on disk.

        Built-ins cannot be deleted. A preset stored alongside others in a
        'presets' file is dropped from that file; the file itself is removed
        once it holds nothing else.

        Returns:
            True if a user preset was removed
        """
        if name not in self._user:
            return False

        path = self._sources.pop(name)
        del self._user[name]

        siblings = [n for n, p in self._sources.items() if p == path]
        if siblings:
            with open(path, 'w') as f:
                yaml.dump(
                    {'presets': {n: self._user[n].to_dict() for n in siblings}},
                    f, default_flow_style=False, sort_keys=False
                )
        elif path.exists():
            path.unlink()
        return True


# ============================================================================
# Calibration Files
# ============================================================================

def load_calibration(path: Union[str, Path]) -> EmitterCalibration:
    """
    Load emitter calibration overrides from YAML.

    Missing keys keep their defaults. The file may hold the coefficients at
    the top level or under a 'calibration' key.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Calibration file must hold a mapping: {path}")
    if isinstance(data.get('calibration'), dict):
        data = data['calibration']

    return EmitterCalibration.from_dict(data)


def save_calibration(calibration: EmitterCalibration, path: Union[str, Path]) -> Path:
    """Write calibration coefficients to YAML"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        yaml.dump({'calibration': calibration.to_dict()}, f, default_flow_style=False, sort_keys=False)
    return path
