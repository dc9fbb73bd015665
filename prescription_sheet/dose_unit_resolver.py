"""
用法用量の単位解決
ジャンルから単位（錠・包）と「1回 ○錠」表記を決める
"""
import logging
from typing import Any, Callable, Dict

from .timing_vocabulary import HERBAL_GENRE, TOPICAL_GENRE

logger = logging.getLogger(__name__)

TABLET_UNIT = "錠"
PACKET_UNIT = "包"
TOPICAL_DOSE_TEXT = "1回適量"


def _per_dose(unit: str) -> Callable[[Any], str]:
    def format_dose(amount: Any) -> str:
        amount_text = "" if amount is None else str(amount)
        return f"1回 {amount_text}{unit}"
    return format_dose


def _topical_dose(_amount: Any) -> str:
    return TOPICAL_DOSE_TEXT


def resolve(genre: Any) -> Dict[str, Any]:
    """
    ジャンルに応じた単位と1回量フォーマッタを返す

    Returns:
        {"unit_suffix": str, "format_dose": amount -> str}
    """
    if genre == TOPICAL_GENRE:
        return {"unit_suffix": "", "format_dose": _topical_dose}
    if genre == HERBAL_GENRE:
        return {"unit_suffix": PACKET_UNIT, "format_dose": _per_dose(PACKET_UNIT)}

    logger.debug(f"Genre {genre!r} uses tablet unit")
    return {"unit_suffix": TABLET_UNIT, "format_dose": _per_dose(TABLET_UNIT)}


def format_dose_summary(genre: Any, amount: Any) -> str:
    """用法用量欄の1行目"""
    return resolve(genre)["format_dose"](amount)
