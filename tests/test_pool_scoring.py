import pytest

from draftvalue.config import SlotBoosts, get_slots
from draftvalue.config_loader import EngineSettings
from draftvalue.models import Anchors, PlayerRecord
from draftvalue.pool import (
    ScoreCriteria,
    build_pool,
    eligible_slots,
    empty_slot_ids,
    fit_raw,
    is_eligible,
    need_boost,
    normalize_fit,
    reference_price,
    score_candidates,
    slot_hint,
)


def _player(name, positions, *, role="hitter", projection=None, market=None, stats=None):
    prefix = "pit" if role == "pitcher" else "hit"
    return PlayerRecord(
        key=f"{prefix}:{name.lower()}",
        display_name=name,
        role=role,
        positions=frozenset(positions),
        anchors=Anchors(projection=projection, market=market),
        category_stats=stats or {},
    )


OPS_ONLY = {"OPS": 1.0, "TB": 0, "HR": 0, "RBI": 0, "R": 0, "AVG": 0, "SB": 0}


def test_second_baseman_eligibility():
    second = _player("Marte", {"2B"})

    assert is_eligible(second, "MI")
    assert is_eligible(second, "2B")
    assert is_eligible(second, "UT")
    for slot_id in ("OF1", "C", "CI", "P1", "P9"):
        assert not is_eligible(second, slot_id)
    assert not is_eligible(second, "DH")


def test_pitchers_only_fill_pitching_slots():
    arm = _player("Skubal", {"SP"}, role="pitcher")

    assert eligible_slots(arm, ["C", "UT", "P3", "P1"]) == ["P3", "P1"]


def test_outfield_slots_accept_any_outfielder():
    center = _player("Crow-Armstrong", {"CF"})

    assert eligible_slots(center, ["LF", "CF", "OF1", "OF2", "UT", "bogus"]) == ["CF", "OF1", "OF2", "UT"]


def test_need_boost_uses_matching_slot_tier():
    second = _player("Marte", {"2B"})
    boosts = SlotBoosts()

    boost = need_boost(second, ["MI", "OF1"])

    assert boost > 0
    assert boost == boosts.composite
    assert boost != boosts.outfield
    assert need_boost(second, ["OF1", "C"]) == 0


def test_need_boost_honours_custom_boosts():
    arm = _player("Clase", {"RP"}, role="pitcher")

    assert need_boost(arm, ["P1"], boosts=SlotBoosts(pitching=6)) == 6


def test_slot_hint_priority():
    utility = _player("Betts", {"SS", "OF"})

    assert slot_hint(utility, ["UT", "OF1", "SS", "MI"]) == "Fills MI"
    assert slot_hint(utility, ["UT", "OF2"]) == "Fills OF"
    assert slot_hint(_player("Cole", {"SP"}, role="pitcher"), ["P4"]) == "Fills P"
    assert slot_hint(utility, ["C"]) == ""


def test_empty_slot_ids_from_assignments():
    empty = empty_slot_ids({"C": "hit:smith", "MI": "", "P1": "pit:cole"})

    assert "C" not in empty
    assert "P1" not in empty
    assert empty[0] == "1B"
    assert "MI" in empty
    assert len(empty) == len(get_slots("HAG").slot_ids) - 2
    assert empty_slot_ids(["C1", "C2"], league="ROTO")[0] == "1B"


def test_normalize_fit_degenerate_set_is_zero():
    assert normalize_fit([4.2, 4.2, 4.2]) == [0.0, 0.0, 0.0]
    assert normalize_fit([]) == []
    assert normalize_fit([1.0, 2.0, 3.0]) == [pytest.approx(0.0), pytest.approx(50.0), pytest.approx(100.0)]


def test_fit_raw_skips_zero_weights_and_other_role():
    record = _player("A", {"1B"}, stats={"OPS": 0.9, "HR": 30, "ERA": 3.0})

    assert fit_raw(record, OPS_ONLY) == pytest.approx(0.9)
    assert fit_raw(record, OPS_ONLY, has_category_stats=False) == 0
    assert fit_raw(record, OPS_ONLY, components={record.key: {"OPS": 0.75}}) == pytest.approx(0.75)


def test_reference_price_fallbacks():
    record = _player("A", {"1B"}, projection=20, market=24)

    assert reference_price(record) == 24
    assert reference_price(record, {record.key: "31"}) == 31
    assert reference_price(record, {record.key: "n/a"}) == 24
    assert reference_price(_player("B", {"1B"}, projection=12, market=0)) == 12


def _three_hitters():
    return [
        _player("A", {"1B"}, projection=20, stats={"OPS": 0.900, "R": 90}),
        _player("B", {"2B"}, projection=15, stats={"OPS": 0.800, "R": 80}),
        _player("C", {"SS"}, projection=10, stats={"OPS": 0.700, "R": 70}),
    ]


def test_three_hitter_ranking():
    pool = build_pool(_three_hitters())

    result = score_candidates(pool, weights=OPS_ONLY)

    assert pool.has_category_stats
    assert [player.record.display_name for player in result.ranked] == ["A", "B", "C"]
    assert [player.fit_norm for player in result.ranked] == [
        pytest.approx(100.0),
        pytest.approx(50.0),
        pytest.approx(0.0),
    ]
    top = result.ranked[0]
    assert top.value_edge == 0
    assert top.need_boost == 0
    assert top.adjusted_price == pytest.approx(20)
    assert top.eligible_slot_hint == ""
    assert result.needs == []


def test_equal_fit_gives_zero_fit_norm():
    records = [
        _player(name, {"OF"}, projection=value, stats={"OPS": 0.8, "R": 80})
        for name, value in (("X", 5), ("Y", 9), ("Z", 7))
    ]

    result = score_candidates(records, weights=OPS_ONLY)

    assert all(player.fit_norm == 0 for player in result.ranked)
    assert all(player.score == 0 for player in result.ranked)
    # Ties keep input order.
    assert [player.record.display_name for player in result.ranked] == ["X", "Y", "Z"]


def test_scorer_excludes_rostered_and_targeted_and_filters_price():
    records = _three_hitters()

    result = score_candidates(
        records,
        weights=OPS_ONLY,
        rostered_keys=["hit:a"],
        targeted_keys=["hit:b", ""],
        criteria=ScoreCriteria(max_price=12),
    )

    assert [player.key for player in result.ranked] == ["hit:c"]

    priced_out = score_candidates(records, weights=OPS_ONLY, criteria=ScoreCriteria(max_price=12))
    assert [player.key for player in priced_out.ranked] == ["hit:c"]


def test_live_price_drives_value_edge_and_value_view():
    records = _three_hitters()

    result = score_candidates(records, weights=OPS_ONLY, live_prices={"hit:c": 2, "hit:a": 60})
    by_key = {player.key: player for player in result.ranked}

    assert by_key["hit:c"].price == 2
    assert by_key["hit:c"].value_edge == pytest.approx(8)
    assert by_key["hit:a"].value_edge == pytest.approx(-15)
    assert result.value[0].key == "hit:c"
    assert result.fit[0].key == "hit:a"


def test_need_view_and_boosted_score():
    records = _three_hitters()

    result = score_candidates(records, weights=OPS_ONLY, empty_slots=["MI", "P1"])

    assert [player.key for player in result.needs] == ["hit:b", "hit:c"]
    b = next(player for player in result.ranked if player.key == "hit:b")
    assert b.need_boost == SlotBoosts().composite
    assert b.eligible_slots == ("MI",)
    assert b.eligible_slot_hint == "Fills MI"
    assert b.score == pytest.approx(50.0 + SlotBoosts().composite)


def test_market_mode_changes_baseline():
    record = _player("A", {"1B"}, projection=20, market=30, stats={"OPS": 0.9, "R": 90})

    projection = score_candidates([record], weights=OPS_ONLY).ranked[0]
    market = score_candidates([record], weights=OPS_ONLY, criteria=ScoreCriteria(mode="market")).ranked[0]

    assert projection.baseline_value == 20
    assert projection.value_edge == pytest.approx(-10)
    assert market.baseline_value == 30
    assert market.value_edge == 0


def test_stable_key_tiebreak():
    records = [
        _player("Zed", {"OF"}, projection=5, stats={"OPS": 0.8, "R": 1}),
        _player("Abe", {"OF"}, projection=5, stats={"OPS": 0.8, "R": 1}),
    ]

    default = score_candidates(records, weights=OPS_ONLY)
    keyed = score_candidates(
        records,
        weights=OPS_ONLY,
        criteria=ScoreCriteria.from_settings(EngineSettings(stable_key_tiebreak=True)),
    )

    assert [player.key for player in default.ranked] == ["hit:zed", "hit:abe"]
    assert [player.key for player in keyed.ranked] == ["hit:abe", "hit:zed"]


def test_result_top_and_to_dict():
    result = score_candidates(_three_hitters(), weights=OPS_ONLY)

    top = result.top(limit=2)
    payload = top[0].to_dict()

    assert len(top) == 2
    assert payload["name"] == "A"
    assert payload["positions"] == ["1B"]
    assert result.top("fit", limit=0) == []


def test_build_pool_reads_sample_threshold_from_settings():
    records = [_player(f"H{i}", {"OF"}, projection=i, stats={"OPS": 0.6 + i / 100, "R": 60 + i}) for i in range(10)]

    default = build_pool(records)
    tuned = build_pool(records, settings=EngineSettings(min_percentile_samples=10))

    assert default.components == {}
    assert tuned.components["hit:h9"]["OPS"] == pytest.approx(1.0)
    assert tuned.components["hit:h0"]["R"] == pytest.approx(0.0)


def test_slot_role_gates_acceptance():
    slots = get_slots("HAG")

    assert slots.slot("P1").role == "pitcher"
    assert slots.slot("UT").role == "hitter"
    assert not slots.slot("UT").accepts("pitcher", frozenset({"SP"}))
    assert not slots.slot("P1").accepts("hitter", frozenset({"P"}))
    assert slots.slot("P1").accepts("pitcher", frozenset())
