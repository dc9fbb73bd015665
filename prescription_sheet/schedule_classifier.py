"""
服用スケジュール分類
通常（6枠）か頓用（症状出現時＋12時間後の2枠）かを判定
"""
import logging
from typing import Iterable

from .timing_vocabulary import INTERVAL_TAG, ONSET_TAG

logger = logging.getLogger(__name__)

NORMAL = "normal"
SPECIAL = "special"


def is_special_schedule(tags: Iterable[str]) -> bool:
    """症状出現時と12時間後が両方あれば頓用スケジュール"""
    tag_set = set(tags)
    return ONSET_TAG in tag_set and INTERVAL_TAG in tag_set


def classify(tags: Iterable[str]) -> str:
    """タグ集合からスケジュール種別を返す（順序・重複は無関係）"""
    kind = SPECIAL if is_special_schedule(tags) else NORMAL
    logger.debug(f"Schedule classified as {kind}")
    return kind
