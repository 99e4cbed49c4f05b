"""Priority classification of queue candidates."""

from dataclasses import dataclass
from enum import Enum as PyEnum


class Affiliation(str, PyEnum):
    INTERNAL = "internal"  # ENSA students
    EXTERNAL = "external"


class OpportunityType(str, PyEnum):
    PFA = "pfa"
    PFE = "pfe"
    EMPLOYMENT = "employment"
    OBSERVATION = "observation"


class QueueBucket(str, PyEnum):
    """Coarse groups used when interleaving the queue."""

    COMMITTEE = "committee"
    EXTERNAL = "external"
    INTERNAL = "internal"


PROJECT_OPPORTUNITIES = frozenset({OpportunityType.PFA, OpportunityType.PFE})

# Higher is served sooner.
COMMITTEE_PROJECT_SCORE = 10
COMMITTEE_SCORE = 9
INTERNAL_PROJECT_SCORE = 8
EXTERNAL_PROJECT_SCORE = 7
INTERNAL_EMPLOYMENT_SCORE = 6
EXTERNAL_EMPLOYMENT_SCORE = 5
INTERNAL_OBSERVATION_SCORE = 4
EXTERNAL_OBSERVATION_SCORE = 3
FALLBACK_SCORE = 1

_SCORES: dict[tuple[Affiliation, OpportunityType], int] = {
    (Affiliation.INTERNAL, OpportunityType.PFA): INTERNAL_PROJECT_SCORE,
    (Affiliation.INTERNAL, OpportunityType.PFE): INTERNAL_PROJECT_SCORE,
    (Affiliation.EXTERNAL, OpportunityType.PFA): EXTERNAL_PROJECT_SCORE,
    (Affiliation.EXTERNAL, OpportunityType.PFE): EXTERNAL_PROJECT_SCORE,
    (Affiliation.INTERNAL, OpportunityType.EMPLOYMENT): INTERNAL_EMPLOYMENT_SCORE,
    (Affiliation.EXTERNAL, OpportunityType.EMPLOYMENT): EXTERNAL_EMPLOYMENT_SCORE,
    (Affiliation.INTERNAL, OpportunityType.OBSERVATION): INTERNAL_OBSERVATION_SCORE,
    (Affiliation.EXTERNAL, OpportunityType.OBSERVATION): EXTERNAL_OBSERVATION_SCORE,
}


@dataclass(frozen=True)
class CandidateProfile:
    """The attributes of a candidate that drive queue ordering."""

    is_committee: bool = False
    affiliation: Affiliation | None = None
    opportunity_type: OpportunityType | None = None


def _coerce(enum_cls, value):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        return None


def _normalize(candidate) -> tuple[bool, Affiliation | None, OpportunityType | None]:
    is_committee = bool(getattr(candidate, "is_committee", False))
    affiliation = _coerce(Affiliation, getattr(candidate, "affiliation", None))
    opportunity = _coerce(OpportunityType, getattr(candidate, "opportunity_type", None))
    return is_committee, affiliation, opportunity


def classify(candidate) -> int:
    """
    Compute the priority score of a candidate.

    Accepts anything exposing ``is_committee``, ``affiliation`` and
    ``opportunity_type`` (a ``CandidateProfile``, an ORM row, a namespace).
    Unknown or missing values fall through to the lowest class, so the
    function never raises.
    """
    is_committee, affiliation, opportunity = _normalize(candidate)

    if is_committee and opportunity in PROJECT_OPPORTUNITIES:
        return COMMITTEE_PROJECT_SCORE
    if is_committee:
        return COMMITTEE_SCORE
    if opportunity is None:
        return FALLBACK_SCORE
    # A missing affiliation scores as external.
    key = (affiliation or Affiliation.EXTERNAL, opportunity)
    return _SCORES.get(key, FALLBACK_SCORE)


def queue_bucket(candidate) -> QueueBucket:
    """
    Interleaving group of a candidate: committee, external or internal.

    Only an explicit external affiliation lands in the external bucket.
    """
    is_committee, affiliation, _ = _normalize(candidate)
    if is_committee:
        return QueueBucket.COMMITTEE
    if affiliation == Affiliation.EXTERNAL:
        return QueueBucket.EXTERNAL
    return QueueBucket.INTERNAL
