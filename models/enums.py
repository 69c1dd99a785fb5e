"""
Enumerations shared by the models and services.
Values are the lowercase strings stored in records.
"""
from enum import Enum


class JobStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


class JobType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"


class Stage(str, Enum):
    APPLIED = "applied"
    SCREEN = "screen"
    TECH = "tech"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


# Pipeline order by convention; transitions between any two stages are accepted.
STAGE_ORDER = [s.value for s in Stage]


class TimelineAction(str, Enum):
    STAGE_CHANGE = "stage_change"
    NOTE_ADDED = "note_added"


class QuestionType(str, Enum):
    SINGLE_CHOICE = "single-choice"
    MULTI_CHOICE = "multi-choice"
    SHORT_TEXT = "short-text"
    LONG_TEXT = "long-text"
    NUMERIC = "numeric"
    FILE_UPLOAD = "file-upload"


CHOICE_TYPES = {QuestionType.SINGLE_CHOICE.value, QuestionType.MULTI_CHOICE.value}
TEXT_TYPES = {QuestionType.SHORT_TEXT.value, QuestionType.LONG_TEXT.value}


class Condition(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"


def values_of(enum_cls) -> set:
    return {member.value for member in enum_cls}
