"""
服用タイミング語彙
生タグ・表示スロット・ジャンルの固定語彙と入力正規化
"""
import json
import logging
from typing import Any, FrozenSet, List, Tuple

logger = logging.getLogger(__name__)

# 登録画面で選択できる服用タイミング（生タグ）
DOSAGE_TIMINGS = [
    "起床時", "朝食前", "朝食後", "昼食前", "昼食後", "夕食前", "夕食後", "就寝前",
    "発熱・疼痛時", "発熱時", "嘔気時", "頭痛時", "指示通り", "毎食前", "毎食後",
    "毎食間", "症状出現時", "12時間後",
]

GENRES = ["解熱鎮痛", "ピル", "ビタミン", "対症療法", "頭痛", "抗生物質", "漢方薬", "外用薬", "その他"]

TOPICAL_GENRE = "外用薬"
HERBAL_GENRE = "漢方薬"

# 通常スケジュールの表示スロット（列順）
NORMAL_SLOTS = ["起床後", "朝", "昼", "夕", "就寝前", "指示通り"]

# 頓用（症状出現時＋12時間後）スケジュールの表示スロット
SPECIAL_SLOTS = ["症状出現時", "12時間後"]

ONSET_TAG = "症状出現時"
INTERVAL_TAG = "12時間後"

MEAL_SLOTS = ["朝", "昼", "夕"]
EVERY_MEAL_TAGS = ["毎食間", "毎食前", "毎食後"]

# スロット → 対応する生タグ
SLOT_TAGS = {
    "起床後": ["起床時"],
    "朝": ["朝食前", "朝食後"],
    "昼": ["昼食前", "昼食後"],
    "夕": ["夕食前", "夕食後"],
    "就寝前": ["就寝前"],
    "指示通り": ["発熱・疼痛時", "嘔気時", "頭痛時", "指示通り"],
}

_KNOWN_TIMINGS = frozenset(DOSAGE_TIMINGS)
_KNOWN_GENRES = frozenset(GENRES)


def is_known_timing(tag: Any) -> bool:
    return tag in _KNOWN_TIMINGS


def is_known_genre(genre: Any) -> bool:
    return genre in _KNOWN_GENRES


def _decode_timing_string(value: str) -> List[Any]:
    """JSON文字列の服用タイミングをリストに戻す（失敗時は空）"""
    if not value.strip():
        return []
    try:
        decoded = json.loads(value)
    except ValueError as e:
        logger.warning(f"Unparsable dosageTiming {value!r}: {e}")
        return []

    if not isinstance(decoded, list):
        logger.warning(f"dosageTiming is not a JSON array: {value!r}")
        return []
    return decoded


def normalize_dosage_timing(value: Any) -> Tuple[FrozenSet[str], List[str]]:
    """
    dosageTimingをタグ集合に正規化

    Args:
        value: 文字列のシーケンス、JSON配列文字列、またはNone

    Returns:
        (タグ集合, 入力順の生タグリスト)
    """
    if value is None:
        items: List[Any] = []
    elif isinstance(value, str):
        items = _decode_timing_string(value)
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = list(value)
    else:
        logger.warning(f"Unsupported dosageTiming type: {type(value).__name__}")
        items = []

    raw_tags = [item for item in items if isinstance(item, str)]
    if len(raw_tags) != len(items):
        logger.warning(f"Dropped {len(items) - len(raw_tags)} non-string dosageTiming entries")

    unknown = [tag for tag in raw_tags if not is_known_timing(tag)]
    if unknown:
        logger.debug(f"Unknown dosage timings ignored by classifier: {unknown}")

    return frozenset(raw_tags), raw_tags
