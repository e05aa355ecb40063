"""Label-to-icon mapping used for display.

Each classifier kind has an :class:`IconTable`: an ordered tuple of rules and a
fallback. The first rule with any keyword contained in the label (ignoring
case) decides the category, so rule order matters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from modelrelay.classify.models import ClassifierKind


class IconCategory(StrEnum):
    VERY_SATISFIED = "sentiment_very_satisfied"
    NEUTRAL = "sentiment_neutral"
    DISSATISFIED = "sentiment_dissatisfied"
    MOOD = "mood"
    FLIGHT_TAKEOFF = "flight_takeoff"
    CHAT_BUBBLE = "chat_bubble"


@dataclass(frozen=True)
class IconRule:
    keywords: frozenset[str]
    category: IconCategory

    def matches(self, label: str) -> bool:
        lower = label.lower()
        return any(keyword.lower() in lower for keyword in self.keywords)


@dataclass(frozen=True)
class IconTable:
    rules: tuple[IconRule, ...]
    default: IconCategory

    def resolve(self, label: str) -> IconCategory:
        for rule in self.rules:
            if rule.matches(label):
                return rule.category
        return self.default


EMOTION_ICONS = IconTable(
    rules=(
        IconRule(
            frozenset({"positive", "happy", "joy", "excited", "satisfied"}),
            IconCategory.VERY_SATISFIED,
        ),
        IconRule(frozenset({"neutral", "calm", "okay"}), IconCategory.NEUTRAL),
        IconRule(
            frozenset({"negative", "sad", "angry", "frustrated", "upset", "disappointed"}),
            IconCategory.DISSATISFIED,
        ),
    ),
    default=IconCategory.MOOD,
)

ICON_TABLES: dict[ClassifierKind, IconTable] = {
    ClassifierKind.IMAGE: IconTable(rules=(), default=IconCategory.FLIGHT_TAKEOFF),
    ClassifierKind.INTENT: IconTable(rules=(), default=IconCategory.CHAT_BUBBLE),
    ClassifierKind.EMOTION: EMOTION_ICONS,
}


def icon_for(kind: ClassifierKind, label: str) -> IconCategory:
    """Return the icon category for ``label`` under ``kind``'s table.

    Only emotion labels go through the keyword rules; image and intent labels
    always get their kind's fixed icon.
    """
    return ICON_TABLES[kind].resolve(label)
