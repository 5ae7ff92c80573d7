import io
import unittest

import pandas as pd

from global_grid import (
    HeaderNotFoundError,
    detect_header,
    match_subject,
    normalize_arabic,
    parse_global_grid,
    parse_global_rows,
)


def xlsx_bytes(rows):
    buf = io.BytesIO()
    pd.DataFrame(rows).to_excel(buf, header=False, index=False, engine="openpyxl")
    return buf.getvalue()


class TestNormalizeArabic(unittest.TestCase):

    def test_letter_variants_are_folded(self):
        self.assertEqual(normalize_arabic("الإسلامية"), "الاسلاميه")
        self.assertEqual(normalize_arabic("  التربيـــة   البدنيّة "), "التربيه البدنيه")
        self.assertEqual(normalize_arabic("مستوى"), "مستوي")
        self.assertEqual(normalize_arabic(None), "")

    def test_subject_matching(self):
        self.assertEqual(match_subject("اللغة  العربيّة"), "اللغة العربية")
        self.assertEqual(match_subject("Mathématiques"), "الرياضيات")
        self.assertEqual(match_subject("ت. إسلامية"), "التربية الإسلامية")
        self.assertIsNone(match_subject("اللقب والاسم"))
        self.assertIsNone(match_subject("الرقم"))


class TestGlobalGrid(unittest.TestCase):

    def test_omnibus_sheet(self):
        rows = [
            ["الرقم", "اللقب والاسم", "اللغة العربية", "الرياضيات", "التربية الإسلامية"],
            ["5", "...", "أ", "أ", "ب"],
        ]
        result = parse_global_grid(xlsx_bytes(rows))
        self.assertEqual(result.detected_subjects, ["اللغة العربية", "الرياضيات", "التربية الإسلامية"])
        self.assertEqual(len(result.students), 1)
        student = result.students[0]
        self.assertEqual(student.number, 5)
        self.assertEqual(
            student.subjects,
            {"اللغة العربية": "A", "الرياضيات": "A", "التربية الإسلامية": "B"},
        )

    def test_header_after_title_rows(self):
        rows = [
            ["الجمهورية الجزائرية الديمقراطية الشعبية"],
            ["كشف النتائج"],
            ["ر", "الاسم", "العربية", "الفرنسية", "الرياضيات", "التاريخ"],
            [1, "أمين", "ب", "ج", "أ", "أ"],
            [2, "هدى", "أ", "", "", "ب"],
            [3, "ليلى", "د", "د", "ج", ""],
        ]
        index, columns = detect_header(rows)
        self.assertEqual(index, 2)
        self.assertEqual(columns["الرياضيات"], 4)

        result = parse_global_rows(rows)
        self.assertEqual([s.number for s in result.students], [1, 3])
        self.assertNotIn("التاريخ", result.students[1].subjects)

    def test_specific_science_dimensions_win(self):
        header = [
            "الرقم",
            "التربية العلمية (البعد البيولوجي)",
            "التربية العلمية (البعد التكنولوجي)",
            "الرياضيات",
        ]
        _, columns = detect_header([header])
        self.assertEqual(
            columns,
            {
                "التربية العلمية (البعد البيولوجي)": 1,
                "التربية العلمية (البعد التكنولوجي)": 2,
                "الرياضيات": 3,
            },
        )
        self.assertNotIn("التربية العلمية", columns)

    def test_missing_header_raises(self):
        rows = [["الرقم", "الاسم", "العربية", "الرياضيات"]] + [["1", "x", "أ", "ب"]] * 12
        with self.assertRaises(HeaderNotFoundError) as ctx:
            parse_global_rows(rows)
        self.assertIsInstance(ctx.exception, ValueError)
        self.assertIn("best match: 2", str(ctx.exception))

    def test_birth_date_column_is_not_history(self):
        self.assertIsNone(match_subject("تاريخ الميلاد"))
        self.assertIsNone(match_subject("تاريخ الإزدياد"))
        self.assertEqual(match_subject("التاريخ"), "التاريخ")

        rows = [
            ["الرقم", "اللقب والاسم", "تاريخ الميلاد", "اللغة العربية", "الرياضيات", "التاريخ"],
            ["1", "أمين", "2015-03-01", "أ", "ب", "أ"],
        ]
        result = parse_global_rows(rows)
        self.assertEqual(len(result.students), 1)
        self.assertEqual(result.students[0].subjects, {"اللغة العربية": "A", "الرياضيات": "B", "التاريخ": "A"})
        _, columns = detect_header(rows)
        self.assertEqual(columns["التاريخ"], 5)

    def test_birth_date_does_not_count_toward_header(self):
        rows = [["الرقم", "الاسم", "تاريخ الميلاد", "العربية", "الرياضيات"]] + [["1", "x", "2015-03-01", "أ", "ب"]]
        with self.assertRaises(HeaderNotFoundError):
            parse_global_rows(rows)

    def test_summary_and_bad_roll_numbers(self):
        rows = [
            ["الرقم", "الاسم", "العربية", "الرياضيات", "المدنية"],
            ["؟", "نور", "أ", "ب", "ج"],
            ["المجموع", "", "أ", "أ", "أ"],
            ["", "نسبة النجاح", "أ", "أ", "أ"],
        ]
        result = parse_global_rows(rows)
        self.assertEqual(len(result.students), 1)
        self.assertEqual(result.students[0].number, 0)


if __name__ == "__main__":
    unittest.main()
