from pathlib import Path

import pytest

from draftvalue.config_loader import ColumnProfile
from draftvalue.ingest import (
    SourceRow,
    load_records_from_csv,
    parse_number,
    parse_positions,
    rows_to_records,
)


def test_parse_number_strips_money_and_rejects_junk():
    assert parse_number("$1,250.5") == pytest.approx(1250.5)
    assert parse_number(" 12 ") == pytest.approx(12.0)
    assert parse_number("n/a") is None
    assert parse_number("") is None
    assert parse_number("nan") is None
    assert parse_number(True) is None
    assert parse_number(7) == pytest.approx(7.0)


def test_parse_positions_splits_free_text():
    assert parse_positions("2b/ss, OF") == frozenset({"2B", "SS", "OF"})
    assert parse_positions(None) == frozenset()


def test_rows_to_records_resolves_aliases_and_stats():
    rows = [
        {
            "Name": "José Ramírez",
            "Type": "hit",
            "POS": "3B",
            "Team": "CLE",
            "Proj Anchor": "$32",
            "Market Estimate": "35",
            "OPS": "0.850",
            "HR": "n/a",
            "sbn": "28",
            "Flags": "injury; keeper",
        },
        {"Name": "", "Type": "hit"},
    ]

    records = rows_to_records(rows, source="board")

    assert len(records) == 1
    record = records[0]
    assert record.key == "hit:jose ramirez"
    assert record.role == "hitter"
    assert record.positions == frozenset({"3B"})
    assert record.anchors.projection == pytest.approx(32)
    assert record.anchors.market == pytest.approx(35)
    assert record.category_stats == {"OPS": pytest.approx(0.85), "SB": pytest.approx(28)}
    assert "HR" not in record.category_stats
    assert record.flags == ("injury", "keeper")
    assert record.source == "board"


def test_shadow_value_promotes_to_projection_when_missing():
    rows = [
        {"Name": "Gerrit Cole", "Type": "pit", "POS": "SP", "auction_value_26": "0", "auction_value_26_shadow": "24"},
        {"Name": "Emmanuel Clase", "POS": "RP", "auction_value_26": "18", "auction_value_26_shadow": "5"},
    ]

    cole, clase = rows_to_records(rows)

    assert cole.anchors.projection == pytest.approx(24)
    assert clase.anchors.projection == pytest.approx(18)
    assert clase.role == "pitcher"
    assert clase.key == "unk:emmanuel clase"
    assert clase.anchors.shadow == pytest.approx(5)


def test_profile_aliases_take_priority_and_join_columns():
    profile = ColumnProfile(aliases={"name": ["First|Last"], "projection": ["Value"]}, source="custom")
    row = SourceRow.from_mapping(
        {"First": "Bobby", "Last": "Witt Jr.", "Value": "44", "Proj Anchor": "10", "POS": "SS"},
        profile,
    )

    assert row.raw_name == "Bobby Witt Jr."
    assert row.raw_projection == "44"

    records = rows_to_records([{"First": "Bobby", "Last": "Witt Jr.", "Value": "44"}], profile=profile)
    assert records[0].source == "custom"


def test_external_id_column_sets_key():
    records = rows_to_records([{"mlbam_id": "660271", "Name": "Shohei Ohtani", "Type": "hit"}])
    assert records[0].key == "id:660271"


def test_load_records_from_csv(tmp_path: Path):
    path = tmp_path / "projections.csv"
    path.write_text(
        "\ufeffName ,Type,POS,Proj Anchor,HR,RBI\n"
        "Aaron Judge,hit,OF,\"$1,0\",45,110\n"
        "Tarik Skubal,pit,SP,38,,\n",
        encoding="utf-8",
    )

    records = load_records_from_csv(path)

    assert [record.display_name for record in records] == ["Aaron Judge", "Tarik Skubal"]
    assert records[0].anchors.projection == pytest.approx(10)
    assert records[0].category_stats == {"HR": pytest.approx(45), "RBI": pytest.approx(110)}
    assert records[1].category_stats == {}
    assert records[1].source == "projections"


def test_untyped_row_keeps_unknown_key_and_logs_inferred_role(caplog):
    with caplog.at_level("DEBUG", logger="draftvalue.ingest.sources"):
        (cole,) = rows_to_records([{"Name": "Gerrit Cole", "POS": "SP"}])

    assert cole.key == "unk:gerrit cole"
    assert cole.role == "pitcher"
    assert "inferred pitcher" in caplog.text


def test_tier_column_is_numeric():
    rows = [
        {"Name": "Aaron Judge", "Type": "hit", "tier": "1"},
        {"Name": "Cal Raleigh", "Type": "hit", "Tier": "two"},
    ]

    judge, raleigh = rows_to_records(rows)

    assert judge.tier == pytest.approx(1.0)
    assert raleigh.tier is None
