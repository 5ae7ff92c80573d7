import io
import unittest

import pandas as pd

from acq_schemas import LEVEL_SUBJECTS, SCHEMA_TABLE, lookup_schema, supported_pairs
from detailed_grid import map_grades_to_results, parse_detailed_grid, parse_detailed_rows
from sheet_reader import read_first_sheet


def xlsx_bytes(rows):
    buf = io.BytesIO()
    pd.DataFrame(rows).to_excel(buf, header=False, index=False, engine="openpyxl")
    return buf.getvalue()


SAMPLE_ROWS = [
    ["مدرسة الأمل الابتدائية"],
    ["الرقم", "اللقب والاسم", "1", "2", "3", "4", "5", "6", "7", "8"],
    ["1", "بن علي محمد", "أ", "ب", "أ", "ب", "ج", "أ", "ب", "د"],
    ["2", "بوزيد", "سارة", "ب", "ب", "ج", "د", "أ"],
    ["", "المجموع", "", "", ""],
]


class TestSchemaTable(unittest.TestCase):

    def test_criterion_counts(self):
        expected = {
            ("2AP", "العربية"): ([3, 5], 4),
            ("2AP", "الرياضيات"): ([2, 4], 3),
            ("4AP", "العربية"): ([5, 4, 5, 5], 10),
            ("4AP", "الرياضيات"): ([3, 4], 4),
            ("5AP", "العربية"): ([6, 4, 9, 7], 15),
        }
        self.assertEqual(sorted(supported_pairs()), sorted(expected))
        for entry in SCHEMA_TABLE:
            counts, minimum = expected[(entry.level, entry.subject_fragment)]
            self.assertEqual([len(c.criteria) for c in entry.definition.competencies], counts)
            self.assertEqual(entry.min_grades, minimum)
            self.assertEqual(entry.definition.total_criteria, sum(counts))

    def test_supported_pairs_are_selectable(self):
        for entry in SCHEMA_TABLE:
            options = LEVEL_SUBJECTS[entry.level]
            self.assertTrue(any(entry.subject_fragment in option for option in options))

    def test_lookup_by_substring(self):
        self.assertEqual(lookup_schema("4AP", "اللغة العربية").definition.id, "arabic_y4")
        self.assertEqual(lookup_schema("2AP", "مادة الرياضيات").definition.id, "math_y2")
        self.assertIsNone(lookup_schema("5AP", "الرياضيات"))
        self.assertIsNone(lookup_schema("4ap", "اللغة العربية"))
        self.assertIsNone(lookup_schema("5AP", "التاريخ"))


class TestDetailedGrid(unittest.TestCase):

    def test_second_year_arabic_sheet(self):
        students = parse_detailed_grid(xlsx_bytes(SAMPLE_ROWS), "2AP", "اللغة العربية")
        self.assertEqual(len(students), 2)

        first = students[0]
        self.assertEqual(first.full_name, "بن علي محمد")
        self.assertEqual(first.results["reading_performance"], {1: "A", 2: "B", 3: "A"})
        self.assertEqual(
            first.results["written_comprehension"], {1: "B", 2: "C", 3: "A", 4: "B", 5: "D"}
        )

        second = students[1]
        self.assertEqual(second.full_name, "بوزيد سارة")
        self.assertEqual(second.results["reading_performance"], {1: "B", 2: "B", 3: "C"})
        self.assertEqual(
            second.results["written_comprehension"], {1: "D", 2: "A", 3: None, 4: None, 5: None}
        )

    def test_positional_mapping_for_four_competencies(self):
        letters = ["A", "B", "C", "D"]
        tokens = [letters[i % 4] for i in range(19)]
        rows = [["7", "تلميذ تجريبي"] + tokens]
        students = parse_detailed_rows(rows, "4AP", "اللغة العربية")
        self.assertEqual(len(students), 1)
        results = students[0].results

        self.assertEqual(list(results), ["oral_comms", "reading_perf", "written_comp", "written_prod"])
        self.assertEqual(list(results["oral_comms"].values()), tokens[0:5])
        self.assertEqual(list(results["reading_perf"].values()), tokens[5:9])
        self.assertEqual(list(results["written_comp"].values()), tokens[9:14])
        self.assertEqual(list(results["written_prod"].values()), tokens[14:19])
        self.assertEqual(list(results["reading_perf"]), [1, 2, 3, 4])

    def test_minimum_grade_threshold(self):
        short = [["1", "تلميذ أول", "أ", "ب"]]
        exact = [["2", "تلميذ ثاني", "أ", "ب", "ج"]]
        self.assertEqual(parse_detailed_rows(short, "2AP", "الرياضيات"), [])

        students = parse_detailed_rows(exact, "2AP", "الرياضيات")
        self.assertEqual(len(students), 1)
        self.assertEqual(students[0].results["control_numbers"], {1: "A", 2: "B"})
        self.assertEqual(students[0].results["problem_solving"], {1: "C", 2: None, 3: None, 4: None})

    def test_summary_row_never_becomes_student(self):
        rows = [["المجموع", "", "", ""], ["", "المجموع", "أ", "أ", "أ", "أ", "أ", "أ", "أ", "أ", "أ", "أ"]]
        for entry in SCHEMA_TABLE:
            self.assertEqual(parse_detailed_rows(rows, entry.level, entry.subject_fragment), [])

    def test_unsupported_pair_yields_nothing(self):
        self.assertEqual(parse_detailed_grid(xlsx_bytes(SAMPLE_ROWS), "5AP", "التاريخ"), [])

    def test_reparse_is_identical_except_ids(self):
        data = xlsx_bytes(SAMPLE_ROWS)
        first = parse_detailed_grid(data, "2AP", "العربية")
        second = parse_detailed_grid(data, "2AP", "العربية")

        def strip(students):
            return [{k: v for k, v in s.to_dict().items() if k != "id"} for s in students]

        self.assertEqual(strip(first), strip(second))
        self.assertTrue(set(s.id for s in first).isdisjoint(s.id for s in second))

    def test_csv_input(self):
        data = "1,بن علي محمد,أ,ب,أ,ب,ج,أ,ب,د\n2,المجموع,,,\n".encode("utf-8")
        students = parse_detailed_grid(data, "2AP", "العربية")
        self.assertEqual(len(students), 1)
        self.assertEqual(students[0].results["reading_performance"][2], "B")

    def test_map_grades_leaves_missing_slots_empty(self):
        definition = lookup_schema("4AP", "الرياضيات").definition
        results = map_grades_to_results([], definition)
        self.assertEqual(results["control_resources"], {1: None, 2: None, 3: None})


class TestSheetReader(unittest.TestCase):

    def test_legacy_xls_is_refused(self):
        with self.assertRaises(ValueError):
            read_first_sheet(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64)

    def test_trailing_empty_cells_are_trimmed(self):
        rows = read_first_sheet(xlsx_bytes([["a", "b", None], ["c", None, None]]))
        self.assertEqual(rows, [["a", "b"], ["c"]])

    def test_ragged_semicolon_text(self):
        data = "\ufeffالرقم;الاسم\n1;أمين;أ;ب;ج\n\n2;  ;د\n".encode("utf-8")
        rows = read_first_sheet(data)
        self.assertEqual(
            rows,
            [["الرقم", "الاسم"], ["1", "أمين", "أ", "ب", "ج"], [], ["2", None, "د"]],
        )

    def test_tab_separated_text_keeps_values_as_text(self):
        rows = read_first_sheet("1\tNA\t007\n".encode("utf-8"))
        self.assertEqual(rows, [["1", "NA", "007"]])

    def test_empty_text(self):
        self.assertEqual(read_first_sheet(b""), [])


if __name__ == "__main__":
    unittest.main()
