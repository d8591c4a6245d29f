from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from .match_record import ScoredCandidate

class LocationModel(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    city: Optional[str] = None
    state: Optional[str] = None
    district: Optional[str] = None
    pincode: Optional[str] = None
    ward: Optional[str] = None
    area: Optional[str] = None

class OfficialLocation(BaseModel):
    city: Optional[str] = None
    state: Optional[str] = None
    district: Optional[str] = None
    pincode: Optional[str] = None
    ward: Optional[str] = None
    area: Optional[str] = None

class MatchedOfficial(BaseModel):
    user_id: str
    full_name: str
    score: int
    match_reasons: List[str]
    location: OfficialLocation

    @classmethod
    def from_scored(cls, scored: ScoredCandidate) -> "MatchedOfficial":
        c = scored.candidate
        return cls(
            user_id=c.official_id,
            full_name=c.full_name,
            score=scored.score,
            match_reasons=list(scored.match_reasons),
            location=OfficialLocation(
                city=c.city,
                state=c.state,
                district=c.district,
                pincode=c.pincode,
                ward=c.ward,
                area=c.area,
            ),
        )

class MatchResponse(BaseModel):
    matched_official: Optional[MatchedOfficial] = None
    alternatives: List[MatchedOfficial] = Field(default_factory=list)
    total_officials_checked: int = 0
    message: Optional[str] = None

class AssignRequest(BaseModel):
    location: Dict[str, Any]
    issue_title: Optional[str] = None
    issue_type: Optional[str] = None
    citizen_phone: Optional[str] = None

class AssignResponse(MatchResponse):
    issue_id: str
    assigned_official_id: Optional[str] = None
    notifications: List[Dict[str, Any]] = Field(default_factory=list)

class NotificationRequest(BaseModel):
    issue_id: str
    issue_title: str
    issue_type: str
    location: LocationModel
    assigned_official_id: Optional[str] = None
    citizen_phone: Optional[str] = None

class NotifyOfficialsRequest(BaseModel):
    issue_id: str
    issue_title: str
    issue_type: str
    location: LocationModel
