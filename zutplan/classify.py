"""
Event classification.

Derives a coarse category (lecture, lab, exam, cancelled, ...) from the
lesson form, its short code, the lesson status code and the subject text.

Classification is FIRST MATCH over CLASSIFICATION_RULES. The order matters:
status codes win over everything else, so a cancelled exam is "cancelled" and
a remote laboratory is "remote".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from zutplan.model import EventCategory

DEFAULT_LABEL = "Zajęcia"

CATEGORY_LABELS: dict[EventCategory, str] = {
    EventCategory.LECTURE: "Wykład",
    EventCategory.LAB: "Laboratorium",
    EventCategory.AUDITORY: "Ćwiczenia audytoryjne",
    EventCategory.EXAM: "Egzamin",
    EventCategory.REMOTE: "Zdalne",
    EventCategory.CANCELLED: "Odwołane",
    EventCategory.PASS: "Zaliczenie",
    EventCategory.PROJECT: "Projekt",
    EventCategory.SEMINAR: "Seminarium",
    EventCategory.DIPLOMA: "Dyplomowe",
    EventCategory.LECTORATE: "Lektorat",
    EventCategory.CONVERSATORY: "Konwersatorium",
    EventCategory.CONSULTATION: "Konsultacje",
    EventCategory.FIELD: "Terenowe",
}


@dataclass(frozen=True)
class ClassifierInput:
    """
    Lower-cased text the rules look at.

    hay = lesson form + subject (or title), for keyword matches.
    """

    form: str
    short: str
    status: str
    hay: str

    @classmethod
    def build(
        cls,
        lesson_form: str = "",
        lesson_form_short: str = "",
        lesson_status_short: str = "",
        subject: str = "",
    ) -> "ClassifierInput":
        form = (lesson_form or "").strip().lower()
        return cls(
            form=form,
            short=(lesson_form_short or "").strip().lower(),
            status=(lesson_status_short or "").strip().lower(),
            hay=f"{form} {(subject or '').strip().lower()}",
        )


@dataclass(frozen=True)
class Rule:
    name: str
    predicate: Callable[[ClassifierInput], bool]
    category: EventCategory


CLASSIFICATION_RULES: tuple[Rule, ...] = (
    Rule("status-exam", lambda c: c.status == "e", EventCategory.EXAM),
    Rule("status-cancelled", lambda c: c.status == "o", EventCategory.CANCELLED),
    Rule("status-remote", lambda c: c.status == "zz", EventCategory.REMOTE),
    Rule("lab", lambda c: "laboratorium" in c.hay or c.short == "l", EventCategory.LAB),
    Rule("auditory", lambda c: "audytoryjne" in c.hay or c.short == "a", EventCategory.AUDITORY),
    Rule(
        "lecture",
        lambda c: "wyklad" in c.hay or "wykład" in c.hay or c.short == "w",
        EventCategory.LECTURE,
    ),
    Rule("exam-keyword", lambda c: "egzamin" in c.hay or "exam" in c.form, EventCategory.EXAM),
    Rule("remote-keyword", lambda c: "zdalne" in c.hay or "remote" in c.form, EventCategory.REMOTE),
    Rule("pass", lambda c: "zaliczenie" in c.hay or c.short.startswith("zal"), EventCategory.PASS),
    Rule("project", lambda c: "projekt" in c.hay or c.short == "p", EventCategory.PROJECT),
    Rule("seminar", lambda c: "seminarium" in c.hay or c.short == "s", EventCategory.SEMINAR),
    Rule("diploma", lambda c: "dyplom" in c.hay, EventCategory.DIPLOMA),
    Rule("lectorate", lambda c: "lektorat" in c.hay or c.short == "lek", EventCategory.LECTORATE),
    Rule(
        "conversatory",
        lambda c: "konwersatorium" in c.hay or c.short == "k",
        EventCategory.CONVERSATORY,
    ),
    Rule(
        "consultation",
        lambda c: "konsultacje" in c.hay or c.short == "kons",
        EventCategory.CONSULTATION,
    ),
    Rule("field", lambda c: "teren" in c.hay, EventCategory.FIELD),
)


def match_rule(data: ClassifierInput) -> Rule | None:
    """
    Return the first rule whose predicate holds, or None.
    """
    for rule in CLASSIFICATION_RULES:
        if rule.predicate(data):
            return rule
    return None


def classify(
    lesson_form: str = "",
    lesson_form_short: str = "",
    lesson_status_short: str = "",
    subject: str = "",
) -> EventCategory:
    rule = match_rule(ClassifierInput.build(lesson_form, lesson_form_short, lesson_status_short, subject))
    return rule.category if rule else EventCategory.CLASS


def category_label(category: EventCategory, lesson_form: str = "") -> str:
    """
    Fixed human label for a category. The generic "class" category shows the
    raw lesson form, or "Zajęcia" when there is none.
    """
    label = CATEGORY_LABELS.get(category)
    if label:
        return label
    return (lesson_form or "").strip() or DEFAULT_LABEL
