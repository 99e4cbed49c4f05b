"""
Tests for candidate priority classification.

Tests:
- Score of every class
- Missing and unknown attributes
- Interleave bucket of a candidate
"""

from types import SimpleNamespace

import pytest

from core.queueing.priority import (
    Affiliation,
    CandidateProfile,
    OpportunityType,
    QueueBucket,
    classify,
    queue_bucket,
)


class TestClassify:
    """Test priority scores."""

    @pytest.mark.parametrize("is_committee,affiliation,opportunity,expected", [
        (True, Affiliation.INTERNAL, OpportunityType.PFA, 10),
        (True, Affiliation.EXTERNAL, OpportunityType.PFE, 10),
        (True, Affiliation.INTERNAL, OpportunityType.EMPLOYMENT, 9),
        (True, None, None, 9),
        (False, Affiliation.INTERNAL, OpportunityType.PFA, 8),
        (False, Affiliation.INTERNAL, OpportunityType.PFE, 8),
        (False, Affiliation.EXTERNAL, OpportunityType.PFA, 7),
        (False, Affiliation.EXTERNAL, OpportunityType.PFE, 7),
        (False, Affiliation.INTERNAL, OpportunityType.EMPLOYMENT, 6),
        (False, Affiliation.EXTERNAL, OpportunityType.EMPLOYMENT, 5),
        (False, Affiliation.INTERNAL, OpportunityType.OBSERVATION, 4),
        (False, Affiliation.EXTERNAL, OpportunityType.OBSERVATION, 3),
    ])
    def test_scores(self, is_committee, affiliation, opportunity, expected):
        candidate = CandidateProfile(is_committee, affiliation, opportunity)
        assert classify(candidate) == expected

    def test_missing_opportunity_is_lowest_class(self):
        candidate = CandidateProfile(False, Affiliation.INTERNAL, None)
        assert classify(candidate) == 1

    def test_missing_affiliation_scores_as_external(self):
        assert classify(CandidateProfile(False, None, OpportunityType.PFA)) == 7
        assert classify(CandidateProfile(False, None, OpportunityType.OBSERVATION)) == 3

    def test_accepts_raw_strings(self):
        """ORM rows and payloads may carry plain values."""
        candidate = SimpleNamespace(
            is_committee=False, affiliation="INTERNAL", opportunity_type="employment"
        )
        assert classify(candidate) == 6

    def test_unknown_values_never_raise(self):
        candidate = SimpleNamespace(
            is_committee=False, affiliation="alumni", opportunity_type="freelance"
        )
        assert classify(candidate) == 1

    def test_object_without_attributes(self):
        assert classify(object()) == 1

    def test_deterministic(self):
        candidate = CandidateProfile(False, Affiliation.EXTERNAL, OpportunityType.EMPLOYMENT)
        assert {classify(candidate) for _ in range(10)} == {5}


class TestQueueBucket:
    """Test interleave buckets."""

    def test_committee_wins_over_affiliation(self):
        candidate = CandidateProfile(True, Affiliation.EXTERNAL, OpportunityType.PFA)
        assert queue_bucket(candidate) == QueueBucket.COMMITTEE

    def test_external(self):
        candidate = CandidateProfile(False, Affiliation.EXTERNAL, OpportunityType.PFA)
        assert queue_bucket(candidate) == QueueBucket.EXTERNAL

    def test_internal(self):
        candidate = CandidateProfile(False, Affiliation.INTERNAL, OpportunityType.PFA)
        assert queue_bucket(candidate) == QueueBucket.INTERNAL

    def test_missing_affiliation_interleaves_as_internal(self):
        candidate = CandidateProfile(False, None, OpportunityType.PFA)
        assert queue_bucket(candidate) == QueueBucket.INTERNAL
