"""
Data records exchanged with the collaborators around the engine.

Items come in from the reporting side and are never mutated here.
FeatureSets are derived per scoring call and thrown away afterwards.
Matches go out to whatever persists them; to_dict() produces the
camelCase shape those collaborators already understand.
"""

import enum
import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .errors import InvalidCoordinateError

logger = logging.getLogger(__name__)

LOST = "lost"
FOUND = "found"
ITEM_TYPES = (LOST, FOUND)

ACTIVE = "active"


class MatchStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 string (or pass a datetime through). Naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        ts = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(text)
        except ValueError:
            logger.warning(f"Unparseable timestamp {value!r}, treating as missing")
            return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float

    @classmethod
    def from_value(cls, value) -> Optional["Location"]:
        """
        Build a Location from a dict/tuple/Location.

        Returns None when no location was given at all. Raises
        InvalidCoordinateError when coordinates are present but not
        usable numbers.
        """
        if value is None:
            return None
        if isinstance(value, Location):
            return value
        if isinstance(value, dict):
            lat, lng = value.get("lat"), value.get("lng", value.get("lon"))
            if lat is None and lng is None:
                return None
        else:
            try:
                lat, lng = value
            except (TypeError, ValueError):
                raise InvalidCoordinateError(f"Cannot read coordinates from {value!r}")

        try:
            lat_f, lng_f = float(lat), float(lng)
        except (TypeError, ValueError):
            raise InvalidCoordinateError(f"Non-numeric coordinates lat={lat!r} lng={lng!r}")

        if not (math.isfinite(lat_f) and math.isfinite(lng_f)):
            raise InvalidCoordinateError(f"Non-finite coordinates lat={lat!r} lng={lng!r}")
        if not (-90.0 <= lat_f <= 90.0 and -180.0 <= lng_f <= 180.0):
            raise InvalidCoordinateError(f"Coordinates out of range lat={lat_f} lng={lng_f}")

        return cls(lat_f, lng_f)


@dataclass(frozen=True)
class Item:
    """A lost or found report. Read-only input to the engine."""

    id: str
    type: str
    description: str = ""
    category: str = ""
    location: Optional[Location] = None
    image_ref: Optional[str] = None
    user_email: str = ""
    created_at: Optional[datetime] = None
    status: str = ACTIVE

    def __post_init__(self):
        if self.type not in ITEM_TYPES:
            raise ValueError(f"Item type must be one of {ITEM_TYPES}, got {self.type!r}")
        # Naive timestamps are taken as UTC
        object.__setattr__(self, "created_at", parse_timestamp(self.created_at))

    @property
    def is_lost(self) -> bool:
        return self.type == LOST

    @property
    def opposite_type(self) -> str:
        return FOUND if self.type == LOST else LOST

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        """
        Build an Item from a collaborator record.

        Accepts both camelCase (userEmail, imageUrl, createdAt) and
        snake_case keys. Invalid coordinates are logged and dropped.
        """
        try:
            location = Location.from_value(data.get("location"))
        except InvalidCoordinateError as e:
            logger.warning(f"Item {data.get('id')}: {e}; location ignored")
            location = None

        image_ref = (data.get("imageRef") or data.get("imageUrl")
                     or data.get("image_ref") or None)

        return cls(
            id=str(data["id"]),
            type=data["type"],
            description=data.get("description") or "",
            category=data.get("category") or "",
            location=location,
            image_ref=image_ref,
            user_email=data.get("userEmail") or data.get("user_email") or "",
            created_at=data.get("createdAt", data.get("created_at")),
            status=data.get("status") or ACTIVE,
        )


@dataclass
class FeatureSet:
    """Text-analysis attributes of one description."""

    tokens: List[str] = field(default_factory=list)
    stems: List[str] = field(default_factory=list)
    nouns: List[str] = field(default_factory=list)
    adjectives: List[str] = field(default_factory=list)
    entities: List[str] = field(default_factory=list)
    colors: List[str] = field(default_factory=list)
    brands: List[str] = field(default_factory=list)
    materials: List[str] = field(default_factory=list)
    conditions: List[str] = field(default_factory=list)
    key_phrases: List[str] = field(default_factory=list)
    sentiment_score: float = 0.0

    @classmethod
    def empty(cls) -> "FeatureSet":
        return cls()

    @property
    def word_count(self) -> int:
        return len(self.tokens)

    @property
    def unique_words(self) -> int:
        return len(set(self.tokens))


@dataclass
class Explanation:
    reasons: List[str]
    confidence_label: str
    score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "explanations": list(self.reasons),
            "confidence": self.confidence_label,
            "score": self.score,
        }


@dataclass
class ScoreResult:
    """Outcome of scoring one (lost, found) pair."""

    score: float
    image_similarity: Optional[float]
    signals: Dict[str, float]
    weights: Dict[str, float]
    explanation: Explanation
    legacy: Dict[str, float] = field(default_factory=dict)


@dataclass
class Match:
    lost_item_id: str
    found_item_id: str
    score: float
    explanation: Explanation
    lost_user_email: str = ""
    found_user_email: str = ""
    image_similarity: Optional[float] = None
    status: MatchStatus = MatchStatus.PENDING
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=_utcnow)
    verified_at: Optional[datetime] = None

    @property
    def pair(self):
        return (self.lost_item_id, self.found_item_id)

    def involves_user(self, user_email: str) -> bool:
        return user_email in (self.lost_user_email, self.found_user_email)

    def verify(self, is_verified: bool) -> None:
        self.status = MatchStatus.VERIFIED if is_verified else MatchStatus.REJECTED
        self.verified_at = _utcnow()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "lostItemId": self.lost_item_id,
            "foundItemId": self.found_item_id,
            "lostUserEmail": self.lost_user_email,
            "foundUserEmail": self.found_user_email,
            "score": self.score,
            "imageSimilarity": self.image_similarity,
            "explanation": self.explanation.to_dict(),
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class PairOutcome:
    """Success/failure wrapper for one candidate pair in a batch."""

    candidate: Item
    result: Optional[ScoreResult] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None
