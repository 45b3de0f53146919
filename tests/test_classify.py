"""
Unit tests for event classification.

Classification is first match in a fixed order; status codes
(e/o/zz) win over the lesson form.
"""

import unittest

from zutplan.classify import CLASSIFICATION_RULES, ClassifierInput, category_label, classify, match_rule
from zutplan.model import EventCategory


class TestClassify(unittest.TestCase):
    def test_lesson_forms(self) -> None:
        cases = [
            ({"lesson_form": "wykład"}, EventCategory.LECTURE),
            ({"lesson_form": "Wyklad"}, EventCategory.LECTURE),
            ({"lesson_form_short": "W"}, EventCategory.LECTURE),
            ({"lesson_form": "laboratorium"}, EventCategory.LAB),
            ({"lesson_form_short": "L"}, EventCategory.LAB),
            ({"lesson_form": "ćwiczenia audytoryjne"}, EventCategory.AUDITORY),
            ({"lesson_form_short": "A"}, EventCategory.AUDITORY),
            ({"lesson_form": "egzamin"}, EventCategory.EXAM),
            ({"lesson_form": "zajęcia zdalne"}, EventCategory.REMOTE),
            ({"lesson_form": "zaliczenie"}, EventCategory.PASS),
            ({"lesson_form_short": "Zal"}, EventCategory.PASS),
            ({"lesson_form": "projekt"}, EventCategory.PROJECT),
            ({"lesson_form": "seminarium"}, EventCategory.SEMINAR),
            ({"lesson_form": "lektorat"}, EventCategory.LECTORATE),
            ({"lesson_form": "konwersatorium"}, EventCategory.CONVERSATORY),
            ({"lesson_form": "konsultacje"}, EventCategory.CONSULTATION),
            ({"lesson_form": "zajęcia terenowe"}, EventCategory.FIELD),
        ]
        for kwargs, expected in cases:
            self.assertEqual(classify(**kwargs), expected, kwargs)

    def test_status_codes_win(self) -> None:
        self.assertEqual(classify(lesson_form="Laboratorium", lesson_status_short="o"), EventCategory.CANCELLED)
        self.assertEqual(classify(lesson_form="laboratorium", lesson_status_short="zz"), EventCategory.REMOTE)
        self.assertEqual(classify(lesson_form="wykład", lesson_status_short="E"), EventCategory.EXAM)

    def test_subject_keywords(self) -> None:
        self.assertEqual(classify(subject="Egzamin z matematyki"), EventCategory.EXAM)
        # lecture keyword is checked before the exam keyword
        self.assertEqual(classify(lesson_form="wykład", subject="Egzamin"), EventCategory.LECTURE)

    def test_seminar_before_diploma(self) -> None:
        self.assertEqual(classify(lesson_form="seminarium dyplomowe"), EventCategory.SEMINAR)
        self.assertEqual(classify(subject="Praca dyplomowa"), EventCategory.DIPLOMA)

    def test_default_is_class(self) -> None:
        self.assertEqual(classify(), EventCategory.CLASS)
        self.assertEqual(classify(lesson_form="inne"), EventCategory.CLASS)

    def test_match_rule_name(self) -> None:
        rule = match_rule(ClassifierInput.build(lesson_form="laboratorium", lesson_status_short="o"))
        self.assertEqual(rule.name, "status-cancelled")
        self.assertIsNone(match_rule(ClassifierInput.build()))
        self.assertEqual(CLASSIFICATION_RULES[0].category, EventCategory.EXAM)


class TestCategoryLabel(unittest.TestCase):
    def test_fixed_labels(self) -> None:
        self.assertEqual(category_label(EventCategory.LECTURE, "cokolwiek"), "Wykład")
        self.assertEqual(category_label(EventCategory.CANCELLED), "Odwołane")

    def test_class_falls_back_to_form(self) -> None:
        self.assertEqual(category_label(EventCategory.CLASS, " inne "), "inne")
        self.assertEqual(category_label(EventCategory.CLASS, ""), "Zajęcia")


if __name__ == "__main__":
    unittest.main()
