"""Tests for move enrichment and its cache."""

from orae.models.replay_data import Player
from orae.services.move_enrichment_service import MoveEnrichmentService, quality_score

from helpers import make_move, scenario_moves, scored_moves


def test_enriched_fields(config):
    service = MoveEnrichmentService(config)
    enriched = service.enrich(scenario_moves())

    assert [move.position_key for move in enriched] == ["1,3", "2,2", "2,1"]
    assert [move.display_position for move in enriched] == ["B4", "C3", "C2"]
    assert [move.time_diff for move in enriched] == [0, 2000, 1500]
    assert enriched[0].is_first_move and not enriched[0].is_last_move
    assert enriched[2].is_last_move and not enriched[2].is_first_move


def test_single_move_is_first_and_last(config):
    enriched = MoveEnrichmentService(config).enrich([make_move(0, 0)])

    assert enriched[0].is_first_move and enriched[0].is_last_move


def test_cache_hit_returns_same_object(config):
    service = MoveEnrichmentService(config)
    moves = scenario_moves()

    first = service.enrich(moves)
    second = service.enrich(list(moves))

    assert first is second
    assert len(service) == 1


def test_each_key_component_causes_a_miss(config):
    service = MoveEnrichmentService(config)
    base = scored_moves([None] * 3)
    first = service.enrich(base)

    longer = scored_moves([None] * 4)
    shifted_start = scored_moves([None] * 3, start_timestamp=500)
    shifted_end = base[:2] + [make_move(2, 0, Player.BLACK, move_number=3, timestamp=9999)]

    assert service.enrich(longer) is not first
    assert service.enrich(shifted_start) is not first
    assert service.enrich(shifted_end) is not first
    assert len(service) == 4


def test_fifo_eviction_at_capacity(config):
    service = MoveEnrichmentService(config)
    logs = [scored_moves([None] * 2, start_timestamp=1000 * i) for i in range(1, 12)]

    first = service.enrich(logs[0])
    for log in logs[1:10]:
        service.enrich(log)
    assert len(service) == 10
    assert service.enrich(logs[0]) is first

    service.enrich(logs[10])
    assert len(service) == 10
    assert service.cache_key(logs[0]) not in service.cached_keys()
    assert service.enrich(logs[0]) is not first


def test_quality_bounds():
    assert quality_score(make_move(0, 0, optimal=True, score=-90)) == 100
    assert quality_score(make_move(0, 0, score=80)) == 100
    assert quality_score(make_move(0, 0, score=-80)) == 0
    assert quality_score(make_move(0, 0, score=10)) == 60
    assert quality_score(make_move(0, 0)) == 50


def test_quality_is_100_only_for_optimal_or_saturated(config):
    moves = scored_moves([-60, -10, 0, 25, 49])
    for move in MoveEnrichmentService(config).enrich(moves):
        assert 0 <= move.quality_score <= 100
        assert move.quality_score < 100


def test_malformed_score_defaults_to_neutral():
    move = make_move(0, 0)
    assert quality_score(move, score="high") == 50
    assert quality_score(move, score=float("nan")) == 50


def test_placeholder_evaluation_is_flagged(config):
    config['move_analysis']['use_placeholder_evaluation'] = True
    enriched = MoveEnrichmentService(config).enrich([make_move(3, 4), make_move(4, 4, score=7)])

    assert enriched[0].is_placeholder_evaluation
    assert -50 <= enriched[0].evaluation_score <= 49
    assert not enriched[1].is_placeholder_evaluation
    assert enriched[1].evaluation_score == 7


def test_clear(config):
    service = MoveEnrichmentService(config)
    first = service.enrich(scenario_moves())
    service.clear()

    assert len(service) == 0
    assert service.enrich(scenario_moves()) is not first
