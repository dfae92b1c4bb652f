"""Risk policy configuration: weights, divisors and thresholds."""

from pathlib import Path
from typing import Dict, Optional, Tuple
import yaml

from ..core.errors import ConfigurationError

# Category key -> criterion name, in reporting order
CATEGORY_NAMES = {
    'road_conditions': 'Road Conditions',
    'accident_prone': 'Accident-Prone Areas',
    'sharp_turns': 'Sharp Turns',
    'blind_spots': 'Blind Spots',
    'traffic_density': 'Traffic Density',
    'weather': 'Weather',
    'emergency_services': 'Emergency Services',
    'network_coverage': 'Network Coverage',
    'amenities': 'Amenities',
    'security': 'Security',
}

WEIGHT_TOLERANCE = 1e-9


class RiskCriteria:
    """Parse and manage route risk policy constants."""

    # Default policy (used if no config file provided)
    DEFAULT_WEIGHTS = {
        'road_conditions': 0.15,
        'accident_prone': 0.15,
        'sharp_turns': 0.12,
        'blind_spots': 0.12,
        'traffic_density': 0.10,
        'weather': 0.10,
        'emergency_services': 0.08,
        'network_coverage': 0.08,
        'amenities': 0.05,
        'security': 0.05,
    }

    # Raw 1-10 record score -> 1-5 category score
    DEFAULT_DIVISORS = {
        'road_conditions': 2.0,
        'accident_prone': 2.5,
        'sharp_turns': 2.0,
        'blind_spots': 2.5,
        'traffic_density': 3.0,
        'weather': 3.0,
        'network_coverage': 2.5,
        'security': 2.0,
    }

    DEFAULT_TIER_THRESHOLDS = {
        'critical': 9.0,
        'high': 7.0,
        'medium': 5.0,
        'low': 3.0,
    }

    # Higher score is worse: D is the riskiest grade
    DEFAULT_GRADE_THRESHOLDS = {
        'D': 4.0,
        'C': 3.0,
        'B': 2.0,
    }

    GRADE_LABELS = {
        'D': 'High Risk',
        'C': 'Mild Risk',
        'B': 'Low Risk',
        'A': 'Minimal Risk',
    }

    DEFAULT_CLUSTERING = {
        'min_threshold_km': 2.0,
        'threshold_fraction': 0.05,
    }

    DEFAULT_SEGMENTS = {
        'summary': 4,
        'progression': 10,
    }

    DEFAULT_VERDICT = {
        'urgent': {'critical_count': 5, 'max_risk': 9.5},
        'critical_caution': {'critical_count': 3, 'max_risk': 9.0},
        'high_caution': {'critical_count': 1, 'max_risk': 8.0},
        'enhanced': {'avg_risk': 6.0},
    }

    DEFAULT_MINUTES_PER_KM = 1.5

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize risk criteria.

        Args:
            config_file: Path to YAML config file. If None, uses defaults.
        """
        self.weights = self.DEFAULT_WEIGHTS.copy()
        self.divisors = self.DEFAULT_DIVISORS.copy()
        self.tier_thresholds = self.DEFAULT_TIER_THRESHOLDS.copy()
        self.grade_thresholds = self.DEFAULT_GRADE_THRESHOLDS.copy()
        self.clustering = self.DEFAULT_CLUSTERING.copy()
        self.segments = self.DEFAULT_SEGMENTS.copy()
        self.verdict = {k: v.copy() for k, v in self.DEFAULT_VERDICT.items()}
        self.minutes_per_km = self.DEFAULT_MINUTES_PER_KM

        if config_file:
            self._load_config(config_file)

        self._validate()

    @classmethod
    def from_yaml(cls, yaml_path: Optional[str]) -> 'RiskCriteria':
        """
        Load criteria from YAML file, falling back to defaults on failure.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            RiskCriteria instance
        """
        if not yaml_path:
            return cls()

        yaml_file = Path(yaml_path)

        if not yaml_file.exists():
            print(f"⚠️  Criteria file not found: {yaml_path}")
            print(f"   Using default risk criteria")
            return cls()

        try:
            return cls(config_file=yaml_path)
        except (ValueError, ConfigurationError) as e:
            print(f"⚠️  Error loading criteria file: {e}")
            print(f"   Using default risk criteria")
            return cls()

    def _load_config(self, config_file: str):
        """Load configuration from YAML file."""
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")

        try:
            with open(config_path) as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")

        if not isinstance(config, dict):
            raise ValueError(f"Config file must contain a mapping: {config_file}")

        # Weights replace the whole table so they can be re-balanced
        if 'weights' in config:
            self.weights = {k: float(v) for k, v in config['weights'].items()}

        if 'divisors' in config:
            self.divisors.update(config['divisors'])

        if 'tier_thresholds' in config:
            self.tier_thresholds.update(config['tier_thresholds'])

        if 'grade_thresholds' in config:
            self.grade_thresholds.update(config['grade_thresholds'])

        if 'clustering' in config:
            self.clustering.update(config['clustering'])

        if 'segments' in config:
            self.segments.update(config['segments'])

        if 'verdict' in config:
            for level, values in config['verdict'].items():
                self.verdict.setdefault(level, {}).update(values)

        if 'minutes_per_km' in config:
            self.minutes_per_km = float(config['minutes_per_km'])

    def _validate(self):
        unknown = set(self.weights) - set(CATEGORY_NAMES)
        if unknown:
            raise ConfigurationError(
                f"Unknown risk categories in weights: {sorted(unknown)}"
            )

        total = sum(self.weights.values())
        if abs(total - 1.0) > WEIGHT_TOLERANCE:
            raise ConfigurationError(
                f"Category weights must sum to 1.0 (got {total:.6f})"
            )

        for key, divisor in self.divisors.items():
            if divisor <= 0:
                raise ConfigurationError(f"Divisor for {key} must be positive")

    def get_weight(self, category: str) -> float:
        """Get aggregation weight for a category (0 when omitted)."""
        return self.weights.get(category, 0.0)

    def get_divisor(self, category: str) -> float:
        """Get raw-score divisor for a category."""
        return self.divisors.get(category, 2.0)

    def get_tier(self, risk_score: float) -> str:
        """Get tier name for a raw 1-10 risk score."""
        if risk_score >= self.tier_thresholds['critical']:
            return 'critical'
        elif risk_score >= self.tier_thresholds['high']:
            return 'high'
        elif risk_score >= self.tier_thresholds['medium']:
            return 'medium'
        elif risk_score >= self.tier_thresholds['low']:
            return 'low'
        return 'minimal'

    def get_grade(self, score: float) -> Tuple[str, str]:
        """Get (grade letter, label) for an overall 1-5 score."""
        for grade in ('D', 'C', 'B'):
            if score >= self.grade_thresholds[grade]:
                return grade, self.GRADE_LABELS[grade]
        return 'A', self.GRADE_LABELS['A']

    def get_risk_category(self, score: float) -> str:
        """Get the textual risk label for a 1-5 score."""
        return self.get_grade(score)[1]

    def cluster_threshold_km(self, total_distance_km: float) -> float:
        """Along-route distance within which hazards join the same cluster."""
        return max(
            self.clustering['min_threshold_km'],
            self.clustering['threshold_fraction'] * total_distance_km,
        )

    def estimated_duration_minutes(self, route) -> float:
        """Route duration, estimated from distance when the route has none."""
        if route.estimated_duration_minutes:
            return float(route.estimated_duration_minutes)
        return route.total_distance_km * self.minutes_per_km

    def to_dict(self) -> Dict:
        return {
            'weights': dict(self.weights),
            'divisors': dict(self.divisors),
            'tier_thresholds': dict(self.tier_thresholds),
            'grade_thresholds': dict(self.grade_thresholds),
            'clustering': dict(self.clustering),
            'segments': dict(self.segments),
            'verdict': {k: dict(v) for k, v in self.verdict.items()},
            'minutes_per_km': self.minutes_per_km,
        }
