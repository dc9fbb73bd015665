"""
処方説明書の組み立て
選択された薬剤ごとの行と、調剤日・注意事項・クリニック情報をまとめる
"""
import logging
from datetime import date
from typing import Any, Dict, Iterable, Optional

from .medication_selection import resolve_count_unit
from .sheet_config import DEFAULTS, load_sheet_config
from .table_layout_builder import TableLayoutBuilder

logger = logging.getLogger(__name__)


class PrescriptionSheetBuilder:
    """処方説明書ビルダー"""

    def __init__(self, config: Optional[Dict[str, Any]] = None, layout_builder: Optional[TableLayoutBuilder] = None):
        self.config = config if config is not None else load_sheet_config()
        self.layout_builder = layout_builder or TableLayoutBuilder()

    def _format_title(self, patient_name: str) -> str:
        """タイトル行（テンプレート不正時は既定テンプレート）"""
        try:
            return self.config["title_template"].format(patient_name=patient_name)
        except (KeyError, IndexError, ValueError) as e:
            logger.error(f"Invalid title_template {self.config['title_template']!r}: {e}")
            return DEFAULTS["title_template"].format(patient_name=patient_name)

    def build_row(self, selection: Dict[str, Any]) -> Dict[str, Any]:
        """1薬剤分の行"""
        medication = selection["medication"]
        unit = selection.get("unit") or resolve_count_unit(medication, self.config)
        layout = self.layout_builder.build(medication, selection.get("days", 1), unit)
        return {
            "id": medication.get("id"),
            "name": medication.get("name", ""),
            "layout": layout,
            "effects": medication.get("effects", ""),
            "precautions": medication.get("precautions", ""),
        }

    def build_sheet(self,
                    selections: Iterable[Dict[str, Any]],
                    patient_name: Optional[str] = None,
                    prescribed_on: Optional[date] = None) -> Dict[str, Any]:
        """
        処方説明書全体を作成

        Args:
            selections: {medication, days, unit} のシーケンス（この順で行を並べる）
            patient_name: 患者名（未指定なら設定の既定名）
            prescribed_on: 調剤年月日（未指定なら本日）

        Returns:
            title, headers, rows, prescribed_on, notice, clinic を持つ辞書
        """
        name = patient_name if patient_name is not None else self.config["patient_name"]
        rows = [self.build_row(selection) for selection in selections]
        prescribed_on = prescribed_on or date.today()

        logger.info(f"Built prescription sheet with {len(rows)} rows")
        return {
            "title": self._format_title(name),
            "patient_name": name,
            "headers": list(self.config["headers"]),
            "rows": rows,
            "prescribed_on": prescribed_on.isoformat(),
            "notice": self.config["notice"],
            "clinic": dict(self.config["clinic"]),
        }
