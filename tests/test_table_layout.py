"""
飲み方テーブルのレイアウトテスト
ゴールデンセットと個別ケース
"""
import sys
from pathlib import Path

import pytest
import yaml

sys.path.append(str(Path(__file__).parent.parent))

from prescription_sheet.slot_projector import SlotProjector
from prescription_sheet.table_layout_builder import TableLayoutBuilder, build, build_many

GOLDEN_CASES = yaml.safe_load(
    (Path(__file__).parent / "golden" / "cases.yaml").read_text(encoding="utf-8")
)


@pytest.mark.parametrize("case", GOLDEN_CASES, ids=[case["name"] for case in GOLDEN_CASES])
def test_golden_cases(case):
    layout = build(case["medication"], case["days"], case["unit"])
    expect = case["expect"]

    assert layout["kind"] == expect["kind"]
    assert [column["value"] for column in layout["columns"]] == expect["values"]
    assert layout["dosage_summary"] == expect["dosage_summary"]
    assert layout["timing_text"] == expect["timing_text"]
    assert layout["days_display"] == expect["days_display"]


def _medication(**overrides):
    medication = {
        "id": 10,
        "name": "テスト錠",
        "genre": "その他",
        "dosageAmount": "1",
        "dosageTiming": [],
    }
    medication.update(overrides)
    return medication


def test_normal_layout_shape():
    layout = build(_medication(dosageTiming=["朝食後"]), 3, "日分")
    assert [column["label"] for column in layout["columns"]] == ["起床後", "朝", "昼", "夕", "就寝前", "指示通り"]
    assert len(layout["rows"]) == 2
    assert [cell["text"] for cell in layout["rows"][0]] == ["起床後", "朝", "昼", "夕", "就寝前", "指示通り"]
    assert [cell["text"] for cell in layout["rows"][1]] == ["", "1", "", "", "", ""]


def test_header_cells_have_grid_borders():
    layout = build(_medication(dosageTiming=["朝食後"]))
    header, values = layout["rows"]
    assert all(cell["border_right"] and cell["border_bottom"] for cell in header)
    assert not any(cell["border_right"] or cell["border_bottom"] for cell in values)


@pytest.mark.parametrize("genre", ["外用薬", "漢方薬", "頭痛", "未登録"])
def test_special_layout_ignores_genre(genre):
    layout = build(_medication(genre=genre, dosageTiming=["症状出現時", "12時間後"]), 2, "回分")
    assert layout["kind"] == "special"
    assert [column["label"] for column in layout["columns"]] == ["症状出現時", "12時間後"]
    assert [column["value"] for column in layout["columns"]] == ["1", "1"]


def test_special_layout_summary_still_uses_genre():
    layout = build(_medication(genre="外用薬", dosageTiming=["症状出現時", "12時間後"]))
    assert layout["dosage_summary"] == "1回適量"


def test_json_and_native_timing_give_same_layout():
    native = build(_medication(dosageTiming=["朝食後", "就寝前"]), 7, "日分")
    encoded = build(_medication(dosageTiming='["朝食後","就寝前"]'), 7, "日分")
    assert native == encoded


def test_timing_text_keeps_unknown_tags_in_input_order():
    layout = build(_medication(dosageTiming=["就寝前", "夜中", "朝食後"]))
    assert layout["timing_text"] == "就寝前\n夜中\n朝食後"
    assert [column["value"] for column in layout["columns"]] == ["", "1", "", "", "1", ""]


def test_missing_dosage_amount_degrades_to_empty():
    medication = _medication(dosageTiming=["朝食後"])
    del medication["dosageAmount"]
    layout = build(medication)
    assert layout["columns"][1]["value"] == ""
    assert layout["dosage_summary"] == "1回 錠"


def test_missing_timing_and_genre():
    layout = build({"id": 11, "dosageAmount": "1"})
    assert layout["kind"] == "normal"
    assert all(column["value"] == "" for column in layout["columns"])
    assert layout["dosage_summary"] == "1回 1錠"
    assert layout["timing_text"] == ""


def test_days_and_unit_pass_through():
    layout = build(_medication(), 30, "回分")
    assert layout["days"] == 30
    assert layout["unit"] == "回分"
    assert layout["days_display"] == "30回分"


def test_unit_defaults_to_days():
    assert build(_medication(), 4)["days_display"] == "4日分"


def test_build_is_idempotent_and_does_not_mutate_input():
    medication = _medication(dosageTiming=["毎食後", "就寝前"])
    snapshot = dict(medication, dosageTiming=list(medication["dosageTiming"]))
    assert build(medication, 2, "日分") == build(medication, 2, "日分")
    assert medication == snapshot


def test_build_many_preserves_order():
    selections = [
        {"medication": _medication(id=3, dosageTiming=["朝食後"]), "days": 1, "unit": "日分"},
        {"medication": _medication(id=1, dosageTiming=["症状出現時", "12時間後"]), "days": 2, "unit": "回分"},
        {"medication": _medication(id=2), "days": 3},
    ]
    layouts = build_many(selections)
    assert [layout["id"] for layout in layouts] == [3, 1, 2]
    assert [layout["kind"] for layout in layouts] == ["normal", "special", "normal"]
    assert layouts[2]["days_display"] == "3日分"


def test_builder_with_custom_projector():
    projector = SlotProjector(rules=[{"id": "always", "content": "※"}])
    layout = TableLayoutBuilder(projector).build(_medication())
    assert [column["value"] for column in layout["columns"]] == ["※"] * 6
