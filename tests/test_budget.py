import csv
from io import StringIO

import pytest

from draftvalue.models import Anchors, PlayerRecord, RosterEntry, Target
from draftvalue.pool import (
    auto_max_bid,
    build_pool,
    export_recommendations_to_csv,
    export_targets_to_csv,
    planned_spend,
    price_targets,
    score_candidates,
    sort_targets,
    target_from_record,
    tier_from_number,
    tier_summary,
)


def _pool():
    return build_pool(
        [
            PlayerRecord(
                key="hit:juan soto",
                display_name="Juan Soto",
                role="hitter",
                positions=frozenset({"OF"}),
                anchors=Anchors(projection=42),
                category_stats={"OPS": 0.95, "HR": 35},
            ),
            PlayerRecord(
                key="pit:tarik skubal",
                display_name="Tarik Skubal",
                role="pitcher",
                positions=frozenset({"SP"}),
                anchors=Anchors(projection=36),
                category_stats={"K": 230, "ERA": 2.6},
            ),
        ]
    )


def test_auto_max_bid_keeps_a_dollar_per_open_slot():
    power = auto_max_bid(120, 23, 13)

    assert power.slots_left == 10
    assert power.max_bid == 111
    assert power.reserve_required == 10
    assert power.avg_per_slot == pytest.approx(12)


def test_auto_max_bid_edge_cases():
    assert auto_max_bid(5, 23, 23).slots_left == 1
    assert auto_max_bid(5, 23, 23).max_bid == 5
    assert auto_max_bid(3, 23, 10).max_bid == 0
    assert auto_max_bid(40, 10, 5, reserve_per_slot=0).max_bid == 40
    assert auto_max_bid("junk", 10, 5).max_bid == 0  # type: ignore[arg-type]


def test_planned_spend_buckets():
    roster = [
        RosterEntry(key="hit:juan soto", role="hitter", positions="OF", under_contract=True, price=40),
        RosterEntry(key="pit:emmanuel clase", role="pitcher", positions="RP", under_contract=True, price=12),
        RosterEntry(key="pit:nobody", role="pitcher", positions="SP", under_contract=False, price=99),
    ]
    targets = [
        Target(key="pit:tarik skubal", name="Tarik Skubal", role="pitcher", plan=30),
        Target(name="Closer Guy", role="pitcher", positions="RP", plan=8),
        Target(name="Bat", role="hitter", plan=5),
    ]

    spend = planned_spend(roster, targets, pool=_pool())

    assert spend.hit == pytest.approx(45)
    assert spend.sp == pytest.approx(30)
    assert spend.rp == pytest.approx(20)
    assert spend.total == pytest.approx(95)
    assert spend.share("hit") == pytest.approx(45 / 95)


def test_sort_targets_modes():
    targets = [
        Target(name="Cal Raleigh", tier="B", plan=20, hard_max=30),
        Target(name="Aaron Judge", tier="A", plan=50, hard_max=55),
        Target(name="Bo Bichette", tier="B", plan=25, hard_max=26),
        Target(name="Ace", tier="C", plan=60, hard_max=61),
    ]

    assert [t.name for t in sort_targets(targets)] == ["Aaron Judge", "Bo Bichette", "Cal Raleigh", "Ace"]
    assert [t.name for t in sort_targets(targets, "plan_desc")][0] == "Ace"
    assert [t.name for t in sort_targets(targets, "max_desc")][:2] == ["Ace", "Aaron Judge"]
    assert [t.name for t in sort_targets(targets, "name_asc")] == [
        "Aaron Judge",
        "Ace",
        "Bo Bichette",
        "Cal Raleigh",
    ]
    assert sort_targets(targets, "unknown") == sort_targets(targets)


def test_price_targets_joins_by_key_then_name():
    targets = [
        Target(key="hit:juan soto", name="Soto", plan=40, hard_max=43, tier="A"),
        Target(name="Skubal, Tarik", role="pitcher", plan=36, tier="A"),
        Target(name="Unknown Prospect", plan=3, tier="C"),
    ]

    soto, skubal, prospect = price_targets(targets, _pool(), {})

    assert soto.record is not None and soto.record.display_name == "Juan Soto"
    assert soto.pricing.adjusted_price == pytest.approx(44)
    assert soto.adjusted_price == pytest.approx(43)
    assert skubal.record is not None and skubal.record.key == "pit:tarik skubal"
    assert prospect.record is None
    assert prospect.adjusted_price == pytest.approx(3)

    summary = tier_summary([soto, skubal, prospect])
    assert summary["A"].count == 2
    assert summary["A"].hit == 1
    assert summary["A"].pit == 1
    assert summary["A"].plan == pytest.approx(76)
    assert summary["A"].adj == pytest.approx(43 + 36)
    assert summary["C"].count == 1
    assert summary["total"].count == 3
    assert list(summary) == ["A", "B", "C", "total"]


def test_tier_summary_accepts_plain_targets():
    summary = tier_summary([Target(name="x", plan=10, hard_max=12)])

    assert summary["B"].count == 1
    assert summary["B"].max == pytest.approx(12)
    assert summary["B"].adj == 0


def test_export_recommendations_csv():
    result = score_candidates(_build_hitters(), weights={})
    text = export_recommendations_to_csv(result.ranked)

    rows = list(csv.reader(StringIO(text)))

    assert rows[0][:3] == ["Key", "Name", "Team"]
    assert len(rows) == 3
    assert rows[1][1] == "Juan Soto"


def test_export_targets_csv():
    priced = price_targets([Target(key="hit:juan soto", name="Juan Soto", plan=40, hard_max=43)], _pool(), {})

    rows = list(csv.reader(StringIO(export_targets_to_csv(priced))))

    assert rows[1][0] == "hit:juan soto"
    assert rows[1][2] == "hit"
    assert rows[1][8] == "43.0"


def _build_hitters():
    return [
        PlayerRecord(key="hit:juan soto", display_name="Juan Soto", role="hitter", anchors=Anchors(projection=42)),
        PlayerRecord(key="hit:mookie betts", display_name="Mookie Betts", role="hitter", anchors=Anchors(projection=30)),
    ]


@pytest.mark.parametrize(
    "raw, tier",
    [(1, "A"), ("1.5", "A"), (1.6, "B"), (3.5, "B"), (4, "C"), ("n/a", None), (None, None)],
)
def test_tier_from_number(raw, tier):
    assert tier_from_number(raw) == tier


def _cole():
    return PlayerRecord(
        key="pit:gerrit cole",
        display_name="Gerrit Cole",
        role="pitcher",
        positions=frozenset({"SP"}),
        anchors=Anchors(projection=28, market=35, shadow=33),
        flags=("injury",),
        draftable=True,
        tier=1.2,
    )


def test_target_from_record_fills_from_source_columns():
    target = target_from_record(_cole())

    assert target.key == "pit:gerrit cole"
    assert target.name == "Gerrit Cole"
    assert target.role == "pitcher"
    assert target.positions == "SP"
    assert target.plan == pytest.approx(28)
    assert target.hard_max == pytest.approx(33)
    assert target.tier == "A"
    assert target.notes == "Val $28 • Shad $33 • Draftable yes • Flags: injury"


def test_target_from_record_keeps_existing_fields():
    existing = Target(id="t1", name="Cole", plan=30, notes="ace")

    target = target_from_record(_cole(), existing=existing)

    assert target.id == "t1"
    assert target.name == "Cole"
    assert target.plan == pytest.approx(30)
    assert target.hard_max == pytest.approx(33)
    assert target.notes == "ace | Val $28 • Shad $33 • Draftable yes • Flags: injury"
    assert target_from_record(_cole(), existing=target).notes == target.notes


def test_target_from_record_quick_add():
    record = PlayerRecord(
        key="hit:juan soto",
        display_name="Juan Soto",
        role="hitter",
        positions=frozenset({"OF"}),
        anchors=Anchors(projection=41.6, market=47),
        tier=3,
    )

    quick = target_from_record(record, quick_add=True)
    market = target_from_record(record, quick_add=True, mode="market")
    empty = target_from_record(
        PlayerRecord(key="hit:nobody", display_name="Nobody", role="hitter"),
        quick_add=True,
    )

    assert quick.plan == pytest.approx(42)
    assert quick.hard_max == pytest.approx(47)
    assert quick.tier == "B"
    assert quick.notes == ""
    assert market.plan == pytest.approx(47)
    assert market.hard_max == pytest.approx(52)
    assert empty.plan == 0
    assert empty.hard_max == 0
