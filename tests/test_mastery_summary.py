import unittest

import pandas as pd

from acq_schemas import lookup_schema
from acq_types import AcqStudent
from detailed_grid import map_grades_to_results
from indicators import student_scores
from mastery_summary import build_group_ranking, build_mastery_summary

ENTRY = lookup_schema("2AP", "الرياضيات")


def scores_for(class_name, grade_rows):
    students = [
        AcqStudent(full_name=f"{class_name}-{i}", results=map_grades_to_results(g, ENTRY.definition))
        for i, g in enumerate(grade_rows)
    ]
    frame = student_scores(students, ENTRY)
    frame.insert(0, "class_name", class_name)
    return frame


class TestMasterySummary(unittest.TestCase):

    def test_band_counts(self):
        scores = scores_for("2A", [["A"] * 6, ["A", "A", "D", "D", "D", "D"], ["D"] * 6, []])
        summary = build_mastery_summary(scores)
        self.assertEqual(list(summary["Category"]), ["Evaluated", "Controlled", "Partial", "Limited"])
        self.assertEqual(list(summary["Count"]), [3, 1, 1, 1])
        self.assertEqual(summary["Percent"][1], 33.33)

    def test_empty_input(self):
        self.assertTrue(build_mastery_summary(pd.DataFrame()).empty)
        self.assertTrue(build_mastery_summary(None).empty)

    def test_group_ranking(self):
        scores = pd.concat(
            [scores_for("2A", [["C"] * 6, ["C"] * 6]), scores_for("2B", [["A"] * 6, ["B"] * 6])],
            ignore_index=True,
        )
        ranking = build_group_ranking(scores, by="class_name")
        self.assertEqual(list(ranking["class_name"]), ["2B", "2A"])
        self.assertEqual(ranking["mean_composite"][0], 83.33)
        self.assertEqual(ranking["controlled_pct"][0], 100.0)
        self.assertEqual(ranking["homogeneity"][1], 0.0)

    def test_group_ranking_reports_axis_means(self):
        scores = pd.concat(
            [
                scores_for("2A", [["A", "A", "D", "D", "D", "D"], ["C"] * 6]),
                scores_for("2B", [["A"] * 6, ["B"] * 6]),
            ],
            ignore_index=True,
        )
        ranking = build_group_ranking(scores, by="class_name")
        self.assertEqual(
            list(ranking.columns),
            [
                "class_name",
                "students",
                "mean_composite",
                "mean_axis_calculation",
                "mean_axis_problem_solving",
                "controlled_pct",
                "homogeneity",
            ],
        )
        self.assertEqual(ranking["mean_axis_calculation"][0], 83.33)
        row_2a = ranking[ranking["class_name"] == "2A"].iloc[0]
        self.assertEqual(row_2a["mean_axis_calculation"], 66.67)
        self.assertEqual(row_2a["mean_axis_problem_solving"], 16.67)

    def test_empty_ranking_keeps_axis_columns(self):
        scores = scores_for("2A", [[]])
        ranking = build_group_ranking(scores, by="class_name")
        self.assertTrue(ranking.empty)
        self.assertIn("mean_axis_calculation", ranking.columns)


if __name__ == "__main__":
    unittest.main()
