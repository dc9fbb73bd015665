"""
薬剤一覧ユーティリティ
登録データの服用タイミング整理とジャンル別グルーピング
"""
import logging
from typing import Any, Dict, List, Sequence, Tuple

from .timing_vocabulary import is_known_genre, is_known_timing, normalize_dosage_timing

logger = logging.getLogger(__name__)


def sanitize_medication(medication: Dict[str, Any]) -> Dict[str, Any]:
    """
    編集用に薬剤レコードを整える

    dosageTimingは語彙にあるタグだけのリストにする（入力順・重複除去）。
    未知のジャンルは書き換えずにログだけ残す。
    """
    _, raw_tags = normalize_dosage_timing(medication.get("dosageTiming"))
    known = [tag for tag in dict.fromkeys(raw_tags) if is_known_timing(tag)]

    dropped = len(set(raw_tags)) - len(known)
    if dropped:
        logger.info(f"Medication {medication.get('id')}: dropped {dropped} unknown dosage timings")

    genre = medication.get("genre")
    if not is_known_genre(genre):
        logger.warning(f"Medication {medication.get('id')} has unknown genre: {genre!r}")

    sanitized = dict(medication)
    sanitized["dosageTiming"] = known
    return sanitized


def group_by_genre(medications: Sequence[Dict[str, Any]],
                   genre_order: Sequence[str]) -> List[Tuple[str, List[Dict[str, Any]]]]:
    """
    ジャンル別にまとめる

    genre_orderにあるジャンルはその順、それ以外は末尾に名前順。
    同じジャンル内は入力順を保つ。
    """
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for medication in medications:
        genre = medication.get("genre") or ""
        grouped.setdefault(genre, []).append(medication)

    order_index = {genre: i for i, genre in enumerate(genre_order)}

    def sort_key(genre: str):
        if genre in order_index:
            return (0, order_index[genre], "")
        return (1, 0, genre)

    return [(genre, grouped[genre]) for genre in sorted(grouped, key=sort_key)]
