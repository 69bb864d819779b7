"""
Config: parse envpred.yaml into run options.

Example envpred.yaml:

    delta: 8
    distribution: irregular
    interpolate_missing: false
    noise_method: irregular
    n_states: 11
    show_warnings: true
    min_recommended_months: 120
"""

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from envpred.core.spectral import Distribution, NoiseMethod
from envpred.validation import InvalidArgumentError, validate_delta, validate_n_states

CONFIG_FILENAME = 'envpred.yaml'


@dataclass(frozen=True)
class PredictabilityConfig:
    """Options for one predictability run."""
    delta: float = 1.0
    distribution: str = Distribution.REGULAR.value
    interpolate_missing: bool = False
    noise_method: str = NoiseMethod.REGULAR.value
    n_states: int = 11
    show_warnings: bool = True
    min_recommended_months: int = 120

    def __post_init__(self):
        # Normalise and validate; frozen, so go through object.__setattr__
        object.__setattr__(self, 'delta', validate_delta(self.delta))
        object.__setattr__(self, 'distribution', Distribution.parse(self.distribution).value)
        object.__setattr__(self, 'noise_method', NoiseMethod.parse(self.noise_method).value)
        object.__setattr__(self, 'n_states', validate_n_states(self.n_states))
        if not isinstance(self.min_recommended_months, int) or self.min_recommended_months < 0:
            raise InvalidArgumentError(
                f"min_recommended_months must be a non-negative integer, "
                f"got {self.min_recommended_months!r}"
            )

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> 'PredictabilityConfig':
        """Build from a mapping; unknown keys are rejected."""
        raw = dict(raw or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise InvalidArgumentError(
                f"Unknown config keys: {', '.join(unknown)}. "
                f"Available: {', '.join(sorted(known))}"
            )
        return cls(**raw)

    def override(self, **changes) -> 'PredictabilityConfig':
        """Copy with non-None changes applied."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: str) -> PredictabilityConfig:
    """
    Load run options from YAML.

    Tries:
        1. path itself (if it's a .yaml/.yml file)
        2. path/envpred.yaml
    """
    p = Path(path)

    if p.is_file() and p.suffix in ('.yaml', '.yml'):
        config_path = p
    else:
        config_path = p / CONFIG_FILENAME

    if not config_path.exists():
        raise FileNotFoundError(f"No {CONFIG_FILENAME} in {path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    if raw is not None and not isinstance(raw, dict):
        raise InvalidArgumentError(f"{config_path} must contain a mapping")

    return PredictabilityConfig.from_dict(raw)
