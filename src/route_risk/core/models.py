"""Input data models: route metadata and hazard records."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .errors import ConfigurationError
from .utils import haversine_distance_km, load_gpx_route


@dataclass(frozen=True)
class RoutePoint:
    """A sampled point on the route geometry."""

    lat: float
    lon: float
    distance_from_start_km: float


@dataclass(frozen=True)
class RouteMetadata:
    """Route-level facts that every analysis reads but never changes."""

    total_distance_km: float
    terrain: str = "mixed"
    route_points: Tuple[RoutePoint, ...] = ()
    estimated_duration_minutes: Optional[float] = None
    route_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self):
        if self.total_distance_km is None:
            raise ConfigurationError(
                "total_distance_km is required for route analysis"
            )
        # Zero/negative distances are accepted and handled as a zero-length route
        object.__setattr__(
            self, "total_distance_km", max(0.0, float(self.total_distance_km))
        )
        object.__setattr__(self, "terrain", (self.terrain or "mixed").lower())
        object.__setattr__(self, "route_points", tuple(self.route_points))

    def __repr__(self) -> str:
        return (
            f"RouteMetadata(id={self.route_id}, "
            f"distance={self.total_distance_km:.1f}km, terrain={self.terrain})"
        )

    @classmethod
    def from_gpx(
        cls,
        gpx_path: str,
        terrain: str = "mixed",
        estimated_duration_minutes: Optional[float] = None,
        route_id: Optional[str] = None,
    ) -> "RouteMetadata":
        """
        Build route metadata from a GPX track.

        The total distance is the summed Haversine length of the track and
        every route point carries its cumulative distance from the start.
        """
        coords = load_gpx_route(gpx_path)

        points = []
        cumulative = 0.0
        for i, (lat, lon) in enumerate(coords):
            if i > 0:
                cumulative += haversine_distance_km(coords[i - 1], (lat, lon))
            points.append(RoutePoint(lat, lon, cumulative))

        return cls(
            total_distance_km=cumulative,
            terrain=terrain,
            route_points=tuple(points),
            estimated_duration_minutes=estimated_duration_minutes,
            route_id=route_id,
        )


@dataclass
class HazardRecord:
    """
    One observed hazard along the route.

    `risk_score` is on the raw category scale (usually 1-10). Kind-specific
    values (turn angle, visibility distance, accident severity, signal
    strength, ...) live in `attributes`.
    """

    kind: str
    lat: float
    lon: float
    distance_from_start_km: Optional[float] = None
    risk_score: Optional[float] = None
    attributes: Dict[str, Any] = field(default_factory=dict)
    record_id: Optional[str] = None

    def __repr__(self) -> str:
        score = "n/a" if self.risk_score is None else f"{self.risk_score:.1f}"
        return (
            f"HazardRecord(kind={self.kind}, "
            f"km={self.distance_from_start_km}, risk={score})"
        )

    def get(self, name: str, default: Any = None) -> Any:
        """Read a kind-specific attribute."""
        value = self.attributes.get(name, default)
        return default if value is None else value

    @property
    def coordinates(self) -> Tuple[float, float]:
        return self.lat, self.lon
