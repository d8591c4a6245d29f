from dataclasses import dataclass, field
from typing import Optional, Tuple

@dataclass(frozen=True)
class GeoBounds:
    north: Optional[float] = None
    south: Optional[float] = None
    east: Optional[float] = None
    west: Optional[float] = None

    def is_complete(self) -> bool:
        return None not in (self.north, self.south, self.east, self.west)

#query side of a match, never persisted
@dataclass(frozen=True)
class LocationQuery:
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    city: Optional[str] = None
    state: Optional[str] = None
    district: Optional[str] = None
    pincode: Optional[str] = None
    ward: Optional[str] = None
    area: Optional[str] = None

#verified official as read from the profile directory
@dataclass(frozen=True)
class OfficialCandidate:
    official_id: str
    full_name: str
    city: Optional[str] = None
    state: Optional[str] = None
    district: Optional[str] = None
    pincode: Optional[str] = None
    ward: Optional[str] = None
    area: Optional[str] = None
    geo_bounds: Optional[GeoBounds] = None
    phone: Optional[str] = None
    email: Optional[str] = None

@dataclass(frozen=True)
class ScoredCandidate:
    candidate: OfficialCandidate
    score: int
    match_reasons: Tuple[str, ...] = ()

    @property
    def official_id(self) -> str:
        return self.candidate.official_id

@dataclass(frozen=True)
class MatchResult:
    best_match: Optional[ScoredCandidate] = None
    alternatives: Tuple[ScoredCandidate, ...] = ()
    total_checked: int = 0
    ranking: Tuple[ScoredCandidate, ...] = field(default=(), repr=False)
