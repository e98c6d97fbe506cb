"""
Tests for SlotScorer - bandwidth scoring of free slots.

Tests cover:
- Level thresholds and rounding helpers
- Neighbour lookup
- Adjacency, disliked-type and density penalties
- The short-slot floor
"""

import pytest

from conftest import utc
from models.entities import BandwidthLevel, BusyInterval, FreeInterval, MeetingType, MergedBusyBlock
from services.slot_scorer import (
    DayContext,
    SlotScorer,
    bandwidth_level_for,
    find_neighbors,
    round_half_up,
)


def typed(start, end, meeting_type=MeetingType.OTHER, weight=0.6):
    return BusyInterval(start=start, end=end, meeting_type=meeting_type, meeting_type_weight=weight)


def context(persona, daily_load_score=0.0, total_meetings=0, preference=0.6, workday_minutes=480):
    return DayContext(
        persona=persona,
        daily_load_score=daily_load_score,
        total_meetings=total_meetings,
        workday_minutes=workday_minutes,
        meeting_preference_score=preference,
        persona_meeting_aversion=max(0.0, 1 - persona.load_target),
    )


class TestHelpers:
    """Tests for scoring helpers."""

    @pytest.mark.parametrize("score, level", [
        (1.0, BandwidthLevel.HIGH),
        (0.7, BandwidthLevel.HIGH),
        (0.6999, BandwidthLevel.MEDIUM),
        (0.4, BandwidthLevel.MEDIUM),
        (0.3999, BandwidthLevel.LOW),
        (0.0, BandwidthLevel.LOW),
    ])
    def test_level_thresholds(self, score, level):
        assert bandwidth_level_for(score) is level

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4999) == 2
        assert round_half_up(44.99999) == 45

    def test_find_neighbors(self):
        blocks = [
            typed(utc(9), utc(11)),
            typed(utc(9, 30), utc(10)),
            typed(utc(13), utc(14)),
            typed(utc(12), utc(12, 30)),
        ]
        before, after = find_neighbors(FreeInterval(utc(11), utc(12)), blocks)
        assert before.end == utc(11)
        assert after.start == utc(12)

    def test_find_neighbors_none(self):
        before, after = find_neighbors(FreeInterval(utc(9), utc(17)), [])
        assert before is None
        assert after is None


class TestAdjacencyPenalty:
    """Tests for the type-agnostic adjacency penalty."""

    def test_no_neighbours(self, balanced):
        scorer = SlotScorer([], [], context(balanced))
        assert scorer.adjacency_penalty(FreeInterval(utc(9), utc(17))) == 0

    def test_touching_both_sides_is_maximal(self, balanced):
        merged = [MergedBusyBlock(utc(9), utc(9, 30)), MergedBusyBlock(utc(9, 45), utc(10))]
        scorer = SlotScorer(merged, [], context(balanced))
        penalty = scorer.adjacency_penalty(FreeInterval(utc(9, 30), utc(9, 45)))
        assert penalty == pytest.approx(2 * 0.18 * 0.45)

    def test_gap_scales_penalty(self, balanced):
        merged = [MergedBusyBlock(utc(9), utc(10))]
        scorer = SlotScorer(merged, [], context(balanced))
        penalty = scorer.adjacency_penalty(FreeInterval(utc(10, 5), utc(11)))
        assert penalty == pytest.approx((10 / 15) * 0.18 * 0.45)

    def test_gap_of_fifteen_minutes_is_free(self, balanced):
        merged = [MergedBusyBlock(utc(9), utc(10))]
        scorer = SlotScorer(merged, [], context(balanced))
        assert scorer.adjacency_penalty(FreeInterval(utc(10, 15), utc(11))) == 0


class TestDislikedTypePenalty:
    """Tests for the type-aware proximity penalty."""

    def test_low_weight_neighbour_penalized(self, maker):
        blocks = [typed(utc(9), utc(10), weight=0.45)]
        scorer = SlotScorer([], blocks, context(maker))
        penalty = scorer.disliked_type_penalty(FreeInterval(utc(10), utc(11)))
        assert penalty == pytest.approx(1.0 * 0.55 * 0.12 * 0.75)

    def test_proximity_falls_off(self, maker):
        blocks = [typed(utc(12), utc(13), weight=0.45)]
        scorer = SlotScorer([], blocks, context(maker))
        penalty = scorer.disliked_type_penalty(FreeInterval(utc(11), utc(11, 30)))
        assert penalty == pytest.approx((15 / 45) * 0.55 * 0.12 * 0.75)

    def test_far_neighbour_ignored(self, maker):
        blocks = [typed(utc(9), utc(10), weight=0.45)]
        scorer = SlotScorer([], blocks, context(maker))
        assert scorer.disliked_type_penalty(FreeInterval(utc(10, 45), utc(12))) == 0

    def test_fully_liked_type_free(self, balanced):
        blocks = [typed(utc(9), utc(10), MeetingType.INVESTORS, weight=1.0)]
        scorer = SlotScorer([], blocks, context(balanced))
        assert scorer.disliked_type_penalty(FreeInterval(utc(10), utc(11))) == 0

    def test_nearest_typed_block_used(self, maker):
        blocks = [
            typed(utc(9), utc(11), MeetingType.INVESTORS, weight=0.75),
            typed(utc(9, 30), utc(10), MeetingType.OTHER, weight=0.45),
        ]
        scorer = SlotScorer([], blocks, context(maker))
        penalty = scorer.disliked_type_penalty(FreeInterval(utc(11), utc(12)))
        assert penalty == pytest.approx(1.0 * 0.25 * 0.12 * 0.75)


class TestDensityPenalty:
    """Tests for the day-density penalty."""

    def test_empty_day(self, balanced):
        assert SlotScorer([], [], context(balanced)).density_penalty() == 0

    def test_formula(self, balanced):
        ctx = context(balanced, daily_load_score=0.5, total_meetings=4, preference=0.8)
        raw = (0.5 * 0.2 + min(0.3, 0.5 * 0.06)) * 0.75
        expected = raw * (1 - 0.8 * 0.25)
        assert SlotScorer([], [], ctx).density_penalty() == pytest.approx(expected)

    def test_capped(self, maker):
        ctx = context(maker, daily_load_score=1.0, total_meetings=100, preference=0.0)
        assert SlotScorer([], [], ctx).density_penalty() == pytest.approx(0.45)

    def test_zero_length_workday(self, balanced):
        ctx = context(balanced, total_meetings=3, workday_minutes=0)
        assert SlotScorer([], [], ctx).density_penalty() == 0


class TestScore:
    """Tests for full slot scores."""

    def test_long_idle_slot_is_high(self, balanced):
        slot = SlotScorer([], [], context(balanced)).score(FreeInterval(utc(9), utc(17)))
        assert slot.duration_minutes == 480
        assert slot.penalty_breakdown.uninterrupted_score == 1
        # Only the aversion-to-type term applies on an empty day
        assert slot.bandwidth_score == pytest.approx(1 - 0.4 * 0.5 * 0.12)
        assert slot.bandwidth_level is BandwidthLevel.HIGH

    def test_short_slot_floor_under_maximal_penalties(self, maker):
        merged = [MergedBusyBlock(utc(9), utc(12)), MergedBusyBlock(utc(12, 45), utc(17))]
        blocks = [typed(utc(9), utc(12), weight=0.45), typed(utc(12, 45), utc(17), weight=0.45)]
        ctx = context(maker, daily_load_score=435 / 480, total_meetings=2, preference=0.45)
        slot = SlotScorer(merged, blocks, ctx).score(FreeInterval(utc(12), utc(12, 45)))

        floor = 0.08 + 0.45 * 0.08 - 0.75 * 0.04
        assert slot.duration_minutes == 45
        assert slot.penalty_breakdown.raw_bandwidth_score < 0
        assert slot.penalty_breakdown.minimum_short_slot_score == pytest.approx(floor)
        assert slot.bandwidth_score == pytest.approx(floor)
        assert slot.bandwidth_level is BandwidthLevel.LOW

    @pytest.mark.parametrize("end", [utc(12, 29), utc(13)])
    def test_floor_only_between_30_and_60_minutes(self, maker, end):
        merged = [MergedBusyBlock(utc(9), utc(12)), MergedBusyBlock(end, utc(17))]
        ctx = context(maker, daily_load_score=0.9, total_meetings=8, preference=0.45)
        slot = SlotScorer(merged, [], ctx).score(FreeInterval(utc(12), end))
        assert slot.penalty_breakdown.minimum_short_slot_score == 0

    def test_breakdown_is_consistent(self, balanced):
        merged = [MergedBusyBlock(utc(9), utc(10))]
        blocks = [typed(utc(9), utc(10), weight=0.6)]
        ctx = context(balanced, daily_load_score=0.125, total_meetings=1, preference=0.6)
        slot = SlotScorer(merged, blocks, ctx).score(FreeInterval(utc(10), utc(11)))
        b = slot.penalty_breakdown

        expected_raw = (
            b.uninterrupted_score - b.adjacency_penalty - b.density_penalty
            - b.aversion_load_penalty - b.aversion_type_penalty - b.disliked_type_penalty
        )
        assert b.raw_bandwidth_score == pytest.approx(expected_raw)
        assert b.final_bandwidth_score == slot.bandwidth_score
        assert 0 <= slot.bandwidth_score <= 1

    def test_reversed_slot_rejected(self, balanced):
        scorer = SlotScorer([], [], context(balanced))
        with pytest.raises(ValueError, match="ends before it starts"):
            scorer.score(FreeInterval(utc(11), utc(10)))

    def test_score_all_drops_empty_slots(self, balanced):
        scorer = SlotScorer([], [], context(balanced))
        slots = scorer.score_all([FreeInterval(utc(10), utc(10)), FreeInterval(utc(11), utc(12))])
        assert len(slots) == 1
        assert slots[0].start == utc(11)
