"""
Collection Badge System

Badges are unlocked by predicates over the whole collection rather than a
single counter: photo coverage, notes, storage locations, tags, time of
day, weekday, season, rarity mix, category balance, bursts of activity,
generated icons.

Each predicate receives a BadgeContext that is built once per evaluation,
so per-item work (rarity, grouping) is not repeated for every badge.
Time-window badges measure back from the newest item, which keeps every
predicate a pure function of its inputs.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, List, Optional, Sequence, Tuple
import logging
import re

from monocollector.collection.rarity import determine_rarity
from monocollector.models.achievement import BadgeTier, CollectionBadge
from monocollector.models.collection import Rarity
from monocollector.models.item import Category, Item
from monocollector.utils.datetime_helpers import season_of

logger = logging.getLogger(__name__)

DAY_SECONDS = 24 * 60 * 60

_EMOJI_PATTERN = re.compile(
    "[\U0001F600-\U0001F64F\U0001F300-\U0001F5FF\U0001F680-\U0001F6FF"
    "\U0001F1E0-\U0001F1FF☀-⛿✀-➿]"
)


@dataclass
class BadgeContext:
    """Derived view of a collection shared by all badge predicates"""
    items: Sequence[Item]
    categories: Sequence[Category]
    streak: int
    rarities: List[Rarity] = field(default_factory=list)
    rarity_counts: Counter = field(default_factory=Counter)
    category_counts: Counter = field(default_factory=Counter)
    location_counts: Counter = field(default_factory=Counter)
    day_counts: Counter = field(default_factory=Counter)
    unique_tags: set = field(default_factory=set)
    timestamps: List[float] = field(default_factory=list)  # ascending

    @classmethod
    def build(
        cls,
        items: Sequence[Item],
        categories: Sequence[Category],
        streak: int,
        rarities: Optional[Sequence[Rarity]] = None,
    ) -> "BadgeContext":
        if rarities is None:
            rarities = [determine_rarity(item.name, item.created_at) for item in items]

        ctx = cls(items=items, categories=categories, streak=max(0, streak), rarities=list(rarities))
        ctx.rarity_counts = Counter(ctx.rarities)
        ctx.category_counts = Counter(item.category for item in items)
        ctx.location_counts = Counter(item.location for item in items if item.location)
        ctx.day_counts = Counter(item.created_at.date() for item in items)
        ctx.unique_tags = {tag for item in items for tag in item.tags}
        ctx.timestamps = sorted(item.created_at.timestamp() for item in items)
        return ctx

    def count(self, predicate: Callable[[Item], bool]) -> int:
        return sum(1 for item in self.items if predicate(item))

    def items_in_window(self, days: int) -> int:
        """Items created within `days` days before (and including) the newest item"""
        if not self.timestamps:
            return 0
        cutoff = self.timestamps[-1] - days * DAY_SECONDS
        return sum(1 for ts in self.timestamps if ts >= cutoff)

    def chronological(self) -> List[Item]:
        return sorted(self.items, key=lambda item: item.created_at.timestamp())


@dataclass(frozen=True)
class BadgeRule:
    """A badge and the predicate that unlocks it"""
    badge: CollectionBadge
    condition: Callable[[BadgeContext], bool]


def _rule(badge_id: str, name: str, description: str, icon: str, tier: BadgeTier,
          condition: Callable[[BadgeContext], bool]) -> BadgeRule:
    return BadgeRule(
        badge=CollectionBadge(id=badge_id, name=name, description=description, icon=icon, tier=tier),
        condition=condition,
    )


# ============================================
# Item helpers used by several predicates
# ============================================

def _has_notes(item: Item) -> bool:
    return bool(item.notes)


def _is_complete(item: Item) -> bool:
    return bool(item.image and item.notes and item.location)


def _time_slot(hour: int) -> str:
    if 6 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"


def _quick_start(ctx: BadgeContext) -> bool:
    if len(ctx.items) < 5:
        return False
    first = ctx.timestamps[0]
    return sum(1 for ts in ctx.timestamps if ts - first < DAY_SECONDS) >= 5


def _all_categories_at_least(n: int) -> Callable[[BadgeContext], bool]:
    def check(ctx: BadgeContext) -> bool:
        if not ctx.items or not ctx.categories:
            return False
        return all(ctx.category_counts[c.id] >= n for c in ctx.categories)
    return check


def _same_category_run(ctx: BadgeContext, length: int = 5) -> bool:
    ordered = [item.category for item in ctx.chronological()]
    return any(len(set(ordered[i:i + length])) == 1 for i in range(len(ordered) - length + 1))


def _category_switch_run(ctx: BadgeContext, length: int = 5) -> bool:
    ordered = [item.category for item in ctx.chronological()]
    return any(len(set(ordered[i:i + length])) == length for i in range(len(ordered) - length + 1))


def _rarity_at_least(ctx: BadgeContext, *rarities: Rarity) -> int:
    return sum(ctx.rarity_counts[r] for r in rarities)


# ============================================
# Badge table
# ============================================

_ITEM_COUNT_BADGES: Tuple[Tuple[str, str, str, int, BadgeTier], ...] = (
    ("badge-starter", "スターター", "🚀", 1, BadgeTier.BRONZE),
    ("badge-collector-10", "コレクター10", "🎯", 10, BadgeTier.BRONZE),
    ("badge-collector-25", "コレクター25", "📋", 25, BadgeTier.BRONZE),
    ("badge-collector-50", "ハーフセンチュリー", "🏅", 50, BadgeTier.SILVER),
    ("badge-collector-75", "セブンティファイブ", "🎪", 75, BadgeTier.SILVER),
    ("badge-century", "センチュリー", "💯", 100, BadgeTier.GOLD),
    ("badge-collector-150", "ワンフィフティ", "🎡", 150, BadgeTier.GOLD),
    ("badge-collector-200", "ダブルセンチュリー", "🏛️", 200, BadgeTier.GOLD),
    ("badge-collector-300", "トリプルセンチュリー", "🏰", 300, BadgeTier.PLATINUM),
    ("badge-half-millennium", "ハーフミレニアム", "🎖️", 500, BadgeTier.PLATINUM),
    ("badge-collector-750", "セブンフィフティ", "🗼", 750, BadgeTier.PLATINUM),
    ("badge-millennium", "ミレニアム", "🌟", 1000, BadgeTier.DIAMOND),
    ("badge-collector-2000", "ツーサウザンド", "⛩️", 2000, BadgeTier.DIAMOND),
    ("badge-collector-3000", "スリーサウザンド", "🏯", 3000, BadgeTier.DIAMOND),
    ("badge-legend-5000", "レジェンド", "👑", 5000, BadgeTier.DIAMOND),
    ("badge-infinity", "インフィニティ", "♾️", 10000, BadgeTier.DIAMOND),
)

_STREAK_BADGES: Tuple[Tuple[str, str, str, int, BadgeTier], ...] = (
    ("badge-three-days", "スリーデイズ", "🔥", 3, BadgeTier.BRONZE),
    ("badge-five-days", "ファイブデイズ", "🖐️", 5, BadgeTier.BRONZE),
    ("badge-dedicated", "献身的コレクター", "💪", 7, BadgeTier.SILVER),
    ("badge-ten-days", "テンデイズ", "🔟", 10, BadgeTier.SILVER),
    ("badge-two-weeks", "ツーウィークス", "📅", 14, BadgeTier.SILVER),
    ("badge-twenty-one-days", "ハビットビルダー", "🧠", 21, BadgeTier.SILVER),
    ("badge-monthly-warrior", "月間ウォリアー", "⚔️", 30, BadgeTier.PLATINUM),
    ("badge-forty-five-days", "フォーティファイブ", "🌟", 45, BadgeTier.GOLD),
    ("badge-sixty-days", "シックスティデイズ", "🎯", 60, BadgeTier.PLATINUM),
    ("badge-ninety-days", "クォーターイヤー", "🏅", 90, BadgeTier.PLATINUM),
    ("badge-hundred-days", "100日マスター", "💯", 100, BadgeTier.DIAMOND),
    ("badge-half-year-streak", "ハーフイヤーストリーク", "🎖️", 180, BadgeTier.DIAMOND),
    ("badge-yearly-streak", "イヤリーストリーク", "🏆", 365, BadgeTier.DIAMOND),
    ("badge-two-year-streak", "ツーイヤーストリーク", "🌠", 730, BadgeTier.DIAMOND),
)


def _item_count_rules() -> List[BadgeRule]:
    return [
        _rule(badge_id, name, f"{n}アイテム達成", icon, tier, lambda ctx, n=n: len(ctx.items) >= n)
        for badge_id, name, icon, n, tier in _ITEM_COUNT_BADGES
    ]


def _streak_rules() -> List[BadgeRule]:
    return [
        _rule(badge_id, name, f"{n}日連続でアイテム追加", icon, tier, lambda ctx, n=n: ctx.streak >= n)
        for badge_id, name, icon, n, tier in _STREAK_BADGES
    ]


_OTHER_RULES: List[BadgeRule] = [
    # === First steps ===
    _rule("badge-first-item", "ファーストステップ", "最初のアイテムを登録", "👶", BadgeTier.BRONZE,
          lambda ctx: len(ctx.items) >= 1),
    _rule("badge-quick-start", "クイックスタート", "初日に5アイテム以上登録", "⚡", BadgeTier.SILVER,
          _quick_start),

    # === Categories ===
    _rule("badge-organizer", "オーガナイザー", "5つのカテゴリを使用", "📁", BadgeTier.SILVER,
          lambda ctx: len(ctx.category_counts) >= 5),
    _rule("badge-multi-category", "マルチカテゴリ", "8つのカテゴリを使用", "🗂️", BadgeTier.GOLD,
          lambda ctx: len(ctx.category_counts) >= 8),
    _rule("badge-perfectionist", "パーフェクショニスト", "全カテゴリにアイテム登録", "✅", BadgeTier.PLATINUM,
          _all_categories_at_least(1)),
    _rule("badge-even-spread", "イーブンスプレッド", "全カテゴリに各3アイテム以上登録", "⚖️", BadgeTier.PLATINUM,
          _all_categories_at_least(3)),
    _rule("badge-category-specialist", "カテゴリスペシャリスト", "1つのカテゴリに50アイテム以上登録", "🎯", BadgeTier.GOLD,
          lambda ctx: any(c >= 50 for c in ctx.category_counts.values())),
    _rule("badge-category-master", "カテゴリマスター", "1つのカテゴリに100アイテム以上登録", "🏆", BadgeTier.PLATINUM,
          lambda ctx: any(c >= 100 for c in ctx.category_counts.values())),
    _rule("badge-category-dominator", "カテゴリドミネーター", "1つのカテゴリに200アイテム以上登録", "👊", BadgeTier.DIAMOND,
          lambda ctx: any(c >= 200 for c in ctx.category_counts.values())),
    _rule("badge-balanced-3", "バランサー", "3つのカテゴリに各10アイテム以上登録", "⚖️", BadgeTier.SILVER,
          lambda ctx: sum(1 for c in ctx.category_counts.values() if c >= 10) >= 3),
    _rule("badge-balanced-5", "マスターバランサー", "5つのカテゴリに各10アイテム以上登録", "🎭", BadgeTier.GOLD,
          lambda ctx: sum(1 for c in ctx.category_counts.values() if c >= 10) >= 5),
    _rule("badge-balanced-category-7", "セブンバランサー", "7つのカテゴリに各5アイテム以上登録", "🎯", BadgeTier.GOLD,
          lambda ctx: sum(1 for c in ctx.category_counts.values() if c >= 5) >= 7),
    _rule("badge-same-category-row", "カテゴリフォーカス", "同じカテゴリに5連続でアイテム登録", "🎯", BadgeTier.SILVER,
          _same_category_run),
    _rule("badge-category-switcher", "カテゴリスイッチャー", "5連続で異なるカテゴリにアイテム登録", "🔀", BadgeTier.GOLD,
          _category_switch_run),

    # === Photos & notes ===
    _rule("badge-photographer", "フォトグラファー", "全アイテムに画像を登録", "📸", BadgeTier.GOLD,
          lambda ctx: len(ctx.items) >= 10 and all(item.image for item in ctx.items)),
    _rule("badge-visual-collector", "ビジュアルコレクター", "50アイテム以上に画像を登録", "🖼️", BadgeTier.SILVER,
          lambda ctx: ctx.count(lambda i: bool(i.image)) >= 50),
    _rule("badge-gallery-owner", "ギャラリーオーナー", "100アイテム以上に画像を登録", "🎨", BadgeTier.GOLD,
          lambda ctx: ctx.count(lambda i: bool(i.image)) >= 100),
    _rule("badge-visual-master", "ビジュアルマスター", "200アイテム以上に画像を登録", "🎬", BadgeTier.PLATINUM,
          lambda ctx: ctx.count(lambda i: bool(i.image)) >= 200),
    _rule("badge-detailer", "ディテーラー", "全アイテムにメモを追加", "📝", BadgeTier.GOLD,
          lambda ctx: len(ctx.items) >= 10 and all(_has_notes(item) for item in ctx.items)),
    _rule("badge-note-taker", "ノートテイカー", "30アイテム以上にメモを追加", "📒", BadgeTier.SILVER,
          lambda ctx: ctx.count(_has_notes) >= 30),
    _rule("badge-chronicler", "クロニクラー", "100アイテム以上にメモを追加", "📚", BadgeTier.GOLD,
          lambda ctx: ctx.count(_has_notes) >= 100),
    _rule("badge-detail-oriented", "ディテール志向", "50文字以上のメモを20個作成", "📖", BadgeTier.GOLD,
          lambda ctx: ctx.count(lambda i: len(i.notes) >= 50) >= 20),
    _rule("badge-story-teller", "ストーリーテラー", "100文字以上のメモを10個作成", "📚", BadgeTier.GOLD,
          lambda ctx: ctx.count(lambda i: len(i.notes) >= 100) >= 10),
    _rule("badge-photo-memo-combo", "フォトメモコンボ", "画像とメモの両方があるアイテムを50個登録", "📱", BadgeTier.GOLD,
          lambda ctx: ctx.count(lambda i: bool(i.image) and _has_notes(i)) >= 50),
    _rule("badge-complete-10", "コンプリートビギナー", "10アイテムに画像・メモ・保管場所を登録", "🏅", BadgeTier.SILVER,
          lambda ctx: ctx.count(_is_complete) >= 10),
    _rule("badge-complete-25", "コンプリート25", "25アイテムに画像・メモ・保管場所を登録", "🏆", BadgeTier.GOLD,
          lambda ctx: ctx.count(_is_complete) >= 25),
    _rule("badge-complete-50", "コンプリートマスター", "50アイテムに画像・メモ・保管場所を登録", "🎖️", BadgeTier.GOLD,
          lambda ctx: ctx.count(_is_complete) >= 50),
    _rule("badge-complete-100", "コンプリートレジェンド", "100アイテムに画像・メモ・保管場所を登録", "🏆", BadgeTier.PLATINUM,
          lambda ctx: ctx.count(_is_complete) >= 100),

    # === Generated icons ===
    _rule("badge-icon-creator", "アイコンクリエイター", "オリジナルアイコンを持つアイテムを登録", "🖌️", BadgeTier.BRONZE,
          lambda ctx: ctx.count(lambda i: bool(i.generated_icon)) >= 1),
    _rule("badge-icon-gallery", "アイコンギャラリー", "オリジナルアイコンを持つアイテムを10個登録", "🖼️", BadgeTier.SILVER,
          lambda ctx: ctx.count(lambda i: bool(i.generated_icon)) >= 10),

    # === Storage locations ===
    _rule("badge-location-starter", "ロケーションスターター", "5種類以上の保管場所を使用", "🏠", BadgeTier.BRONZE,
          lambda ctx: len(ctx.location_counts) >= 5),
    _rule("badge-location-master", "ロケーションマスター", "10種類以上の保管場所を使用", "📍", BadgeTier.GOLD,
          lambda ctx: len(ctx.location_counts) >= 10),
    _rule("badge-location-legend", "ロケーションレジェンド", "25種類以上の保管場所を使用", "🗺️", BadgeTier.PLATINUM,
          lambda ctx: len(ctx.location_counts) >= 25),
    _rule("badge-diverse-locations", "多拠点コレクター", "各保管場所に最低3アイテム（5箇所以上）", "🏢", BadgeTier.GOLD,
          lambda ctx: sum(1 for c in ctx.location_counts.values() if c >= 3) >= 5),
    _rule("badge-location-specialist", "ロケーションスペシャリスト", "1つの保管場所に20アイテム以上登録", "🏡", BadgeTier.SILVER,
          lambda ctx: any(c >= 20 for c in ctx.location_counts.values())),

    # === Rarity ===
    _rule("badge-rare-collector", "レアコレクター", "レア以上のアイテムを10個所持", "💎", BadgeTier.SILVER,
          lambda ctx: _rarity_at_least(ctx, Rarity.RARE, Rarity.EPIC, Rarity.LEGENDARY) >= 10),
    _rule("badge-epic-collector", "エピックコレクター", "エピック以上のアイテムを10個所持", "🔮", BadgeTier.GOLD,
          lambda ctx: _rarity_at_least(ctx, Rarity.EPIC, Rarity.LEGENDARY) >= 10),
    _rule("badge-legendary-collector", "レジェンダリーコレクター", "レジェンダリーのアイテムを5個所持", "🌟", BadgeTier.PLATINUM,
          lambda ctx: ctx.rarity_counts[Rarity.LEGENDARY] >= 5),
    _rule("badge-rarity-master", "レアリティマスター", "全レア度のアイテムを所持", "🌈", BadgeTier.GOLD,
          lambda ctx: all(ctx.rarity_counts[r] > 0 for r in Rarity)),
    _rule("badge-common-collector", "コモンコレクター", "コモンアイテムを100個所持", "📋", BadgeTier.SILVER,
          lambda ctx: ctx.rarity_counts[Rarity.COMMON] >= 100),
    _rule("badge-uncommon-master", "アンコモンマスター", "アンコモンアイテムを50個所持", "🌿", BadgeTier.GOLD,
          lambda ctx: ctx.rarity_counts[Rarity.UNCOMMON] >= 50),

    # === Tags ===
    _rule("badge-tag-starter", "タグスターター", "タグ付きアイテムを5個登録", "🏷️", BadgeTier.BRONZE,
          lambda ctx: ctx.count(lambda i: bool(i.tags)) >= 5),
    _rule("badge-tag-lover", "タグラバー", "タグ付きアイテムを20個登録", "🔖", BadgeTier.SILVER,
          lambda ctx: ctx.count(lambda i: bool(i.tags)) >= 20),
    _rule("badge-multi-tag", "マルチタグ", "3つ以上のタグがついたアイテムを10個登録", "🎴", BadgeTier.GOLD,
          lambda ctx: ctx.count(lambda i: len(i.tags) >= 3) >= 10),
    _rule("badge-tag-variety", "タグバラエティ", "10種類以上のユニークなタグを使用", "🎨", BadgeTier.SILVER,
          lambda ctx: len(ctx.unique_tags) >= 10),
    _rule("badge-tag-expert", "タグエキスパート", "25種類以上のユニークなタグを使用", "🎭", BadgeTier.GOLD,
          lambda ctx: len(ctx.unique_tags) >= 25),

    # === Time of day ===
    _rule("badge-morning-collector", "モーニングコレクター", "朝(6-9時)に20アイテム登録", "🌅", BadgeTier.SILVER,
          lambda ctx: ctx.count(lambda i: 6 <= i.created_at.hour < 9) >= 20),
    _rule("badge-night-collector", "ナイトコレクター", "深夜(21-4時)に30アイテム登録", "🌙", BadgeTier.GOLD,
          lambda ctx: ctx.count(lambda i: i.created_at.hour >= 21 or i.created_at.hour < 4) >= 30),
    _rule("badge-all-hours", "オールアワーズ", "全時間帯(朝昼夕夜)でアイテム登録", "⏰", BadgeTier.GOLD,
          lambda ctx: len({_time_slot(i.created_at.hour) for i in ctx.items}) == 4),

    # === Weekdays (Monday = 0) ===
    _rule("badge-monday-starter", "マンデースターター", "月曜日に10アイテム登録", "📅", BadgeTier.BRONZE,
          lambda ctx: ctx.count(lambda i: i.created_at.weekday() == 0) >= 10),
    _rule("badge-weekend-master", "ウィークエンドマスター", "週末(土日)に50アイテム登録", "🏖️", BadgeTier.GOLD,
          lambda ctx: ctx.count(lambda i: i.created_at.weekday() >= 5) >= 50),
    _rule("badge-all-days", "オールデイズ", "全曜日でアイテム登録", "📆", BadgeTier.SILVER,
          lambda ctx: len({i.created_at.weekday() for i in ctx.items}) == 7),

    # === Seasons & calendar ===
    _rule("badge-four-seasons", "フォーシーズンズ", "全季節でアイテム登録", "🌍", BadgeTier.GOLD,
          lambda ctx: len({season_of(i.created_at.month) for i in ctx.items}) == 4),
    _rule("badge-lucky-seven", "ラッキーセブン", "7日、17日、27日にアイテム登録", "🍀", BadgeTier.GOLD,
          lambda ctx: {7, 17, 27} <= {i.created_at.day for i in ctx.items}),
    _rule("badge-new-year-week", "ニューイヤーウィーク", "1月1日〜7日の全日にアイテム登録", "🎍", BadgeTier.PLATINUM,
          lambda ctx: set(range(1, 8)) <= {i.created_at.day for i in ctx.items if i.created_at.month == 1}),

    # === Activity bursts ===
    _rule("badge-daily-10", "デイリーテン", "1日に10アイテム登録", "📊", BadgeTier.SILVER,
          lambda ctx: max(ctx.day_counts.values(), default=0) >= 10),
    _rule("badge-daily-25", "デイリートゥエンティファイブ", "1日に25アイテム登録", "📈", BadgeTier.GOLD,
          lambda ctx: max(ctx.day_counts.values(), default=0) >= 25),
    _rule("badge-active-week", "アクティブウィーク", "1週間で50アイテム登録", "📈", BadgeTier.GOLD,
          lambda ctx: ctx.items_in_window(7) >= 50),
    _rule("badge-active-month", "アクティブマンス", "1ヶ月で200アイテム登録", "🚀", BadgeTier.PLATINUM,
          lambda ctx: ctx.items_in_window(30) >= 200),

    # === Names ===
    _rule("badge-short-names", "ミニマリスト", "3文字以下の名前のアイテムを10個登録", "✂️", BadgeTier.SILVER,
          lambda ctx: ctx.count(lambda i: len(i.name) <= 3) >= 10),
    _rule("badge-long-names", "ロングネーマー", "20文字以上の名前のアイテムを10個登録", "📜", BadgeTier.SILVER,
          lambda ctx: ctx.count(lambda i: len(i.name) >= 20) >= 10),
    _rule("badge-emoji-names", "絵文字マニア", "絵文字を含む名前のアイテムを10個登録", "😎", BadgeTier.GOLD,
          lambda ctx: ctx.count(lambda i: bool(_EMOJI_PATTERN.search(i.name))) >= 10),
]


BADGE_RULES: Tuple[BadgeRule, ...] = (*_item_count_rules(), *_streak_rules(), *_OTHER_RULES)

ALL_BADGES: Tuple[CollectionBadge, ...] = tuple(rule.badge for rule in BADGE_RULES)

BADGES_BY_ID: dict[str, CollectionBadge] = {badge.id: badge for badge in ALL_BADGES}


def evaluate_badges(ctx: BadgeContext, rules: Sequence[BadgeRule] = BADGE_RULES) -> List[CollectionBadge]:
    """Badges whose predicate holds, in table order"""
    return [rule.badge for rule in rules if rule.condition(ctx)]
