"""
飲み方スロット投影
通常スケジュールの6枠へ、優先順位付きルールで服用量を割り当てる
"""
import logging
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from .timing_vocabulary import (
    EVERY_MEAL_TAGS,
    MEAL_SLOTS,
    NORMAL_SLOTS,
    SLOT_TAGS,
    TOPICAL_GENRE,
)

logger = logging.getLogger(__name__)

# contentにこの値を指定すると1回量（dosageAmount）を表示する
AMOUNT = "$amount"

TOPICAL_AMOUNT_TEXT = "適\n量"

# 上から順に評価し、スロットごとに最初に当てはまったルールだけが効く
DEFAULT_SLOT_RULES: List[Dict[str, Any]] = [
    {
        "id": "topical_as_directed",
        "genre": TOPICAL_GENRE,
        "content": "",
        "content_by_slot": {"指示通り": TOPICAL_AMOUNT_TEXT},
    },
    {
        "id": "every_meal",
        "slots": MEAL_SLOTS,
        "requires_any": EVERY_MEAL_TAGS,
        "content": AMOUNT,
    },
    {
        "id": "direct_match",
        "slot_tags": SLOT_TAGS,
        "content": AMOUNT,
    },
]


class SlotProjector:
    """優先順位付きルールによるスロット投影"""

    def __init__(self, rules: Optional[List[Dict[str, Any]]] = None, slots: Optional[List[str]] = None):
        self.slots = list(slots or NORMAL_SLOTS)
        self.rules = []
        for rule in (DEFAULT_SLOT_RULES if rules is None else rules):
            if self.validate_rule(rule):
                self.rules.append(rule)
        logger.debug(f"SlotProjector initialized with {len(self.rules)} rules")

    def validate_rule(self, rule: Dict[str, Any]) -> bool:
        """ルールの妥当性を検証"""
        if "id" not in rule:
            logger.error(f"Slot rule missing id: {rule}")
            return False
        if "content" not in rule:
            logger.error(f"Slot rule {rule['id']} has no content")
            return False
        return True

    def project(self, genre: Any, tags: Iterable[str], amount: Any) -> Dict[str, str]:
        """
        6枠それぞれの表示文字列を求める

        Args:
            genre: 薬剤ジャンル
            tags: 服用タイミングの生タグ（集合として扱う）
            amount: 1回量の文字列

        Returns:
            スロット名 → 表示文字列（該当なしは空文字）
        """
        tag_set = frozenset(tags)
        amount_text = "" if amount is None else str(amount)

        projected = {}
        for slot in self.slots:
            rule = self.match_rule(slot, genre, tag_set)
            if rule is None:
                projected[slot] = ""
                continue
            projected[slot] = self._render_content(rule, slot, amount_text)
        return projected

    def match_rule(self, slot: str, genre: Any, tag_set: FrozenSet[str]) -> Optional[Dict[str, Any]]:
        """スロットに最初に当てはまるルールを返す"""
        for rule in self.rules:
            if self._evaluate_rule(rule, slot, genre, tag_set):
                logger.debug(f"Slot {slot}: rule {rule['id']} applied")
                return rule
        return None

    def _evaluate_rule(self, rule: Dict[str, Any], slot: str, genre: Any, tag_set: FrozenSet[str]) -> bool:
        """個別ルールの評価"""
        if "genre" in rule and genre != rule["genre"]:
            return False

        if "slots" in rule and slot not in rule["slots"]:
            return False

        if "requires_any" in rule and not tag_set.intersection(rule["requires_any"]):
            return False

        if "slot_tags" in rule and not tag_set.intersection(rule["slot_tags"].get(slot, [])):
            return False

        return True

    def _render_content(self, rule: Dict[str, Any], slot: str, amount_text: str) -> str:
        content = rule.get("content_by_slot", {}).get(slot, rule["content"])
        return amount_text if content == AMOUNT else content


_default_projector = SlotProjector()


def project(genre: Any, tags: Iterable[str], amount: Any) -> Dict[str, str]:
    """既定ルールでの投影"""
    return _default_projector.project(genre, tags, amount)
