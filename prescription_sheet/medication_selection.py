"""
処方対象の選択
日数と日数単位（日分・回分）を薬剤に紐付ける
"""
import logging
from typing import Any, Dict, Optional

from .sheet_config import load_sheet_config

logger = logging.getLogger(__name__)


def resolve_count_unit(medication: Dict[str, Any], config: Dict[str, Any]) -> str:
    """
    日数欄の単位を決める

    薬剤自身のcountUnit → 設定のcount_units[薬剤ID] → default_count_unit
    """
    own_unit = medication.get("countUnit")
    if own_unit:
        return own_unit

    medication_id = medication.get("id")
    if medication_id is not None:
        configured = config.get("count_units", {}).get(str(medication_id))
        if configured:
            logger.debug(f"Count unit for medication {medication_id} from config: {configured}")
            return configured

    return config.get("default_count_unit", "日分")


def make_selection(medication: Dict[str, Any],
                   days: Any = 1,
                   unit: Optional[str] = None,
                   config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    プレビュー用の選択（medication, days, unit）を作成

    Raises:
        ValueError: daysが1以上の整数でない場合
    """
    if isinstance(days, float) and days.is_integer():
        days = int(days)
    if isinstance(days, bool) or not isinstance(days, int):
        try:
            days = int(str(days).strip())
        except ValueError as e:
            raise ValueError(f"days must be an integer: {days!r}") from e
    if days < 1:
        raise ValueError(f"days must be 1 or more: {days}")

    if unit is None:
        unit = resolve_count_unit(medication, config if config is not None else load_sheet_config())

    return {"medication": medication, "days": days, "unit": unit}
