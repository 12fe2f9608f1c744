"""Landing page content: typed sections, LOVE_* overrides and the gate quiz.

The effective configuration is the built-in ``LOVE_CONTENT`` with values from
the environment layered on top. Scalars override when non-blank (booleans and
dates only when they parse); list sections are JSON arrays and an invalid
array keeps the default. It is computed once per process by
``get_love_config``.
"""

import datetime
import json
import logging
import os
import uuid
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class FeaturedPhoto(_Section):
    src: str
    caption: Optional[str] = None


class HeroSection(_Section):
    title: str
    subtitle: Optional[str] = None
    intro: str
    cta: str
    cta_after: str
    featured_photo: FeaturedPhoto


class RelationshipSection(_Section):
    start_date: datetime.date
    heading: Optional[str] = None
    subheading: Optional[str] = None
    future_title: Optional[str] = None
    future_text: Optional[str] = None
    show_wheel: bool = False
    wheel_items: List[str] = []


class LoveLetterSection(_Section):
    heading: str
    paragraphs: List[str]


class GateQuestionType(str, Enum):
    MULTIPLE_CHOICE = "MultipleChoice"
    TEXT = "Text"


class GateQuestion(_Section):
    prompt: str
    type: GateQuestionType = GateQuestionType.MULTIPLE_CHOICE
    choices: Optional[List[str]] = None
    answer_index: Optional[int] = None
    answer_text: Optional[str] = None
    is_case_sensitive: bool = False


class GateSection(_Section):
    title: str
    subtitle: str
    error_message: str
    questions: List[GateQuestion]


class MemoryEntry(_Section):
    title: str
    description: str
    date: str
    icon: str


class GalleryItem(_Section):
    src: str
    caption: Optional[str] = None


class HighlightItem(_Section):
    icon: str
    title: str
    description: str


class BucketListMediaItem(_Section):
    type: Optional[str] = None
    src: str
    caption: Optional[str] = None
    alt: Optional[str] = None
    format: Optional[str] = None


class BucketListItem(_Section):
    id: str = ""
    title: str
    meta: Optional[str] = None
    description: Optional[str] = None
    completed: bool = False
    media: List[BucketListMediaItem] = []


class BucketListSection(_Section):
    eyebrow: str
    heading: str
    subheading: str
    items: List[BucketListItem]


class SongItem(_Section):
    url: str
    artist: str


class SongsSection(_Section):
    eyebrow: str
    heading: str
    subheading: str
    items: List[SongItem]


class LoveConfig(_Section):
    hero: HeroSection
    relationship: RelationshipSection
    love_letter: LoveLetterSection
    gate: GateSection
    memories: List[MemoryEntry]
    memories_visible: bool = False
    travel_visible: bool = False
    gallery: List[GalleryItem]
    highlights: List[HighlightItem]
    bucket_list: BucketListSection
    songs: SongsSection


class Keys:
    HERO_TITLE = "LOVE_HERO_TITLE"
    HERO_SUBTITLE = "LOVE_HERO_SUBTITLE"
    HERO_INTRO = "LOVE_HERO_INTRO"
    HERO_CTA = "LOVE_HERO_CTA"
    HERO_CTA_AFTER = "LOVE_HERO_CTA_AFTER"

    REL_START_DATE = "LOVE_REL_START_DATE"
    REL_HEADING = "LOVE_REL_HEADING"
    REL_SUBHEADING = "LOVE_REL_SUBHEADING"
    REL_FUTURE_TITLE = "LOVE_REL_FUTURE_TITLE"
    REL_FUTURE_TEXT = "LOVE_REL_FUTURE_TEXT"
    REL_SHOW_WHEEL = "LOVE_REL_SHOW_WHEEL"
    REL_WHEEL_ITEMS = "LOVE_REL_WHEEL_ITEMS"

    LETTER_HEADING = "LOVE_LETTER_HEADING"
    LETTER_PARAGRAPHS = "LOVE_LETTER_PARAGRAPHS"

    GATE_TITLE = "LOVE_GATE_TITLE"
    GATE_SUBTITLE = "LOVE_GATE_SUBTITLE"
    GATE_ERROR_MESSAGE = "LOVE_GATE_ERROR_MESSAGE"
    GATE_QUESTIONS = "LOVE_GATE_QUESTIONS"

    MEMORIES_VISIBLE = "LOVE_MEMORIES_VISIBLE"
    MEMORIES = "LOVE_MEMORIES"
    HIGHLIGHT_ITEMS = "LOVE_HIGHLIGHT_ITEMS"
    TRAVEL_VISIBLE = "LOVE_TRAVEL_VISIBLE"
    GALLERY_ITEMS = "LOVE_GALLERY_ITEMS"

    BUCKET_EYEBROW = "LOVE_BUCKET_EYEBROW"
    BUCKET_HEADING = "LOVE_BUCKET_HEADING"
    BUCKET_SUBHEADING = "LOVE_BUCKET_SUBHEADING"
    BUCKET_ITEMS = "LOVE_BUCKET_ITEMS"

    SONGS_EYEBROW = "LOVE_SONGS_EYEBROW"
    SONGS_HEADING = "LOVE_SONGS_HEADING"
    SONGS_SUBHEADING = "LOVE_SONGS_SUBHEADING"
    SONGS_ITEMS = "LOVE_SONGS_ITEMS"


def _raw(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    return value


def _get_string(env: Mapping[str, str], key: str, fallback: Optional[str]) -> Optional[str]:
    value = _raw(env, key)
    return value if value is not None else fallback


def _get_bool(env: Mapping[str, str], key: str, fallback: bool) -> bool:
    value = (_raw(env, key) or "").strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    return fallback


def _get_date(env: Mapping[str, str], key: str, fallback: datetime.date) -> datetime.date:
    value = _raw(env, key)
    if value is None:
        return fallback
    try:
        return datetime.date.fromisoformat(value.strip())
    except ValueError:
        logger.warning("Ignoring %s: %r is not an ISO date", key, value)
        return fallback


def _get_json_list(env: Mapping[str, str], key: str, item_type: Type[T], fallback: Sequence[T]) -> List[T]:
    value = _raw(env, key)
    if value is None:
        return list(fallback)
    try:
        parsed = TypeAdapter(List[item_type]).validate_json(value)
    except ValidationError as exc:
        logger.warning("Ignoring %s: %s", key, exc.errors()[0].get("msg") if exc.errors() else exc)
        return list(fallback)
    return parsed


def _normalize_bucket_items(items: Sequence[BucketListItem]) -> List[BucketListItem]:
    return [
        item if item.id.strip() else item.model_copy(update={"id": uuid.uuid4().hex})
        for item in items
    ]


def load_love_config(env: Optional[Mapping[str, str]] = None) -> LoveConfig:
    """Build the effective configuration from defaults and LOVE_* variables."""
    from services.love_content import LOVE_CONTENT

    env = os.environ if env is None else env
    defaults = LOVE_CONTENT

    hero = defaults.hero.model_copy(
        update={
            "title": _get_string(env, Keys.HERO_TITLE, defaults.hero.title),
            "subtitle": _get_string(env, Keys.HERO_SUBTITLE, defaults.hero.subtitle),
            "intro": _get_string(env, Keys.HERO_INTRO, defaults.hero.intro),
            "cta": _get_string(env, Keys.HERO_CTA, defaults.hero.cta),
            "cta_after": _get_string(env, Keys.HERO_CTA_AFTER, defaults.hero.cta_after),
        }
    )

    rel = defaults.relationship
    relationship = rel.model_copy(
        update={
            "start_date": _get_date(env, Keys.REL_START_DATE, rel.start_date),
            "heading": _get_string(env, Keys.REL_HEADING, rel.heading),
            "subheading": _get_string(env, Keys.REL_SUBHEADING, rel.subheading),
            "future_title": _get_string(env, Keys.REL_FUTURE_TITLE, rel.future_title),
            "future_text": _get_string(env, Keys.REL_FUTURE_TEXT, rel.future_text),
            "show_wheel": _get_bool(env, Keys.REL_SHOW_WHEEL, rel.show_wheel),
            "wheel_items": _get_json_list(env, Keys.REL_WHEEL_ITEMS, str, rel.wheel_items),
        }
    )

    love_letter = defaults.love_letter.model_copy(
        update={
            "heading": _get_string(env, Keys.LETTER_HEADING, defaults.love_letter.heading),
            "paragraphs": _get_json_list(env, Keys.LETTER_PARAGRAPHS, str, defaults.love_letter.paragraphs),
        }
    )

    gate = defaults.gate.model_copy(
        update={
            "title": _get_string(env, Keys.GATE_TITLE, defaults.gate.title),
            "subtitle": _get_string(env, Keys.GATE_SUBTITLE, defaults.gate.subtitle),
            "error_message": _get_string(env, Keys.GATE_ERROR_MESSAGE, defaults.gate.error_message),
            "questions": _get_json_list(env, Keys.GATE_QUESTIONS, GateQuestion, defaults.gate.questions),
        }
    )

    bucket_list = defaults.bucket_list.model_copy(
        update={
            "eyebrow": _get_string(env, Keys.BUCKET_EYEBROW, defaults.bucket_list.eyebrow),
            "heading": _get_string(env, Keys.BUCKET_HEADING, defaults.bucket_list.heading),
            "subheading": _get_string(env, Keys.BUCKET_SUBHEADING, defaults.bucket_list.subheading),
            "items": _normalize_bucket_items(
                _get_json_list(env, Keys.BUCKET_ITEMS, BucketListItem, defaults.bucket_list.items)
            ),
        }
    )

    songs = defaults.songs.model_copy(
        update={
            "eyebrow": _get_string(env, Keys.SONGS_EYEBROW, defaults.songs.eyebrow),
            "heading": _get_string(env, Keys.SONGS_HEADING, defaults.songs.heading),
            "subheading": _get_string(env, Keys.SONGS_SUBHEADING, defaults.songs.subheading),
            "items": _get_json_list(env, Keys.SONGS_ITEMS, SongItem, defaults.songs.items),
        }
    )

    return defaults.model_copy(
        update={
            "hero": hero,
            "relationship": relationship,
            "love_letter": love_letter,
            "gate": gate,
            "memories": _get_json_list(env, Keys.MEMORIES, MemoryEntry, defaults.memories),
            "memories_visible": _get_bool(env, Keys.MEMORIES_VISIBLE, defaults.memories_visible),
            "travel_visible": _get_bool(env, Keys.TRAVEL_VISIBLE, defaults.travel_visible),
            "gallery": _get_json_list(env, Keys.GALLERY_ITEMS, GalleryItem, defaults.gallery),
            "highlights": _get_json_list(env, Keys.HIGHLIGHT_ITEMS, HighlightItem, defaults.highlights),
            "bucket_list": bucket_list,
            "songs": songs,
        }
    )


@lru_cache(maxsize=1)
def get_love_config() -> LoveConfig:
    return load_love_config()


def to_json(config: LoveConfig, indented: bool = True) -> str:
    payload = config.model_dump(mode="json", by_alias=True)
    return json.dumps(payload, indent=2 if indented else None, ensure_ascii=False)


def public_content(config: LoveConfig) -> Dict[str, Any]:
    """Content safe to send to the browser: gate answers are removed."""
    payload = config.model_dump(mode="json")
    for question in payload["gate"]["questions"]:
        question.pop("answer_index", None)
        question.pop("answer_text", None)
    return payload


def _answer_matches(question: GateQuestion, answer: Union[int, str, None]) -> bool:
    if answer is None:
        return False
    if question.type == GateQuestionType.MULTIPLE_CHOICE:
        if question.answer_index is None:
            return False
        try:
            return int(answer) == question.answer_index
        except (TypeError, ValueError):
            return False

    expected = (question.answer_text or "").strip()
    given = str(answer).strip()
    if not expected:
        return False
    if question.is_case_sensitive:
        return given == expected
    return given.casefold() == expected.casefold()


def check_gate_answers(gate: GateSection, answers: Sequence[Union[int, str, None]]) -> bool:
    """True when every gate question is answered correctly, in order."""
    if len(answers) < len(gate.questions):
        return False
    return all(_answer_matches(question, answer) for question, answer in zip(gate.questions, answers))


def days_together(start: datetime.date, today: Optional[datetime.date] = None) -> int:
    current = today or datetime.date.today()
    return max((current - start).days, 0)
