"""
飲み方テーブルのレイアウト組み立て
分類・スロット投影・単位解決を合成して、罫線付きグリッドの記述を返す
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from .dose_unit_resolver import format_dose_summary
from .schedule_classifier import SPECIAL, classify
from .slot_projector import SlotProjector, project
from .timing_vocabulary import NORMAL_SLOTS, SPECIAL_SLOTS, normalize_dosage_timing

logger = logging.getLogger(__name__)

DEFAULT_COUNT_UNIT = "日分"


def _header_cell(label: str) -> Dict[str, Any]:
    # 見出し行は右と下に罫線
    return {"text": label, "border_right": True, "border_bottom": True}


def _value_cell(value: str) -> Dict[str, Any]:
    return {"text": value, "border_right": False, "border_bottom": False}


def _grid(columns: List[Dict[str, str]]) -> List[List[Dict[str, Any]]]:
    return [
        [_header_cell(column["label"]) for column in columns],
        [_value_cell(column["value"]) for column in columns],
    ]


class TableLayoutBuilder:
    """処方説明書1行分のレイアウトビルダー"""

    def __init__(self, projector: Optional[SlotProjector] = None):
        self.projector = projector

    def _project(self, genre: Any, tags, amount: str) -> Dict[str, str]:
        if self.projector is None:
            return project(genre, tags, amount)
        return self.projector.project(genre, tags, amount)

    def build(self, medication: Dict[str, Any], days: Any = 1, unit: Optional[str] = None) -> Dict[str, Any]:
        """
        薬剤1件からテーブルレイアウトを作成

        Args:
            medication: 薬剤レコード（id, name, genre, dosageAmount, dosageTiming）
            days: 日数・回数（そのまま表示）
            unit: 日数の単位（未指定なら日分）

        Returns:
            kind, columns, rows, dosage_summary, timing_text, days_display を持つ辞書
        """
        tags, raw_tags = normalize_dosage_timing(medication.get("dosageTiming"))
        amount = medication.get("dosageAmount")
        amount_text = "" if amount is None else str(amount)
        genre = medication.get("genre")

        kind = classify(tags)
        if kind == SPECIAL:
            columns = [{"label": slot, "value": amount_text} for slot in SPECIAL_SLOTS]
        else:
            projected = self._project(genre, tags, amount_text)
            columns = [{"label": slot, "value": projected.get(slot, "")} for slot in NORMAL_SLOTS]

        count_unit = DEFAULT_COUNT_UNIT if unit is None else unit
        layout = {
            "id": medication.get("id"),
            "kind": kind,
            "columns": columns,
            "rows": _grid(columns),
            "dosage_summary": format_dose_summary(genre, amount_text),
            "timing_text": "\n".join(raw_tags),
            "days": days,
            "unit": count_unit,
            "days_display": f"{days}{count_unit}",
        }
        logger.debug(f"Built {kind} layout for medication {medication.get('id')}")
        return layout

    def build_many(self, selections: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """選択順を保ったまま複数件のレイアウトを作成"""
        layouts = []
        for selection in selections:
            layouts.append(
                self.build(selection["medication"], selection.get("days", 1), selection.get("unit"))
            )
        return layouts


_default_builder = TableLayoutBuilder()


def build(medication: Dict[str, Any], days: Any = 1, unit: Optional[str] = None) -> Dict[str, Any]:
    return _default_builder.build(medication, days, unit)


def build_many(selections: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return _default_builder.build_many(selections)
