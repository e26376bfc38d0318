import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from errors import ExerciseValidationError
from filters import Predicate, compile_filter, parse_filter, parse_projection


class FilterTest(unittest.TestCase):
    def test_empty_filter(self) -> None:
        self.assertEqual(parse_filter(None), [])
        self.assertEqual(compile_filter(parse_filter({})), ("", ()))

    def test_equality_and_operators(self) -> None:
        preds = parse_filter({"_id": 3, "reps": {"$gt": 1, "$lte": 5}})
        self.assertEqual(
            preds,
            [
                Predicate("id", "$eq", 3),
                Predicate("reps", "$gt", 1),
                Predicate("reps", "$lte", 5),
            ],
        )
        where, params = compile_filter(preds)
        self.assertEqual(where, " WHERE id = ? AND reps > ? AND reps <= ?")
        self.assertEqual(params, (3, 1, 5))

    def test_in_operators(self) -> None:
        where, params = compile_filter(parse_filter({"unit": {"$in": ["kg", "lb"]}}))
        self.assertEqual(where, " WHERE unit IN (?, ?)")
        self.assertEqual(params, ("kg", "lb"))
        where, params = compile_filter(parse_filter({"unit": {"$in": []}}))
        self.assertEqual(where, " WHERE 0")
        with self.assertRaises(ExerciseValidationError):
            parse_filter({"unit": {"$in": "kg"}})

    def test_null_comparison(self) -> None:
        where, params = compile_filter(parse_filter({"name": {"$ne": None}}))
        self.assertEqual(where, " WHERE name IS NOT NULL")
        self.assertEqual(params, ())

    def test_rejects_unknown(self) -> None:
        with self.assertRaises(ExerciseValidationError):
            parse_filter({"colour": "red"})
        with self.assertRaises(ExerciseValidationError):
            parse_filter({"reps": {"$exists": True}})
        with self.assertRaises(ExerciseValidationError):
            parse_filter({"reps": {}})
        with self.assertRaises(ExerciseValidationError):
            parse_filter(["reps"])

    def test_rejects_non_scalar_values(self) -> None:
        with self.assertRaises(ExerciseValidationError):
            parse_filter({"name": ["squat"]})
        with self.assertRaises(ExerciseValidationError):
            parse_filter({"name": {"$ne": {"a": 1}}})
        with self.assertRaises(ExerciseValidationError):
            parse_filter({"unit": {"$nin": [("kg",)]}})
        self.assertEqual(
            parse_filter({"weight": {"$in": [1, 2.5, None]}}),
            [Predicate("weight", "$in", (1, 2.5, None))],
        )


class ProjectionTest(unittest.TestCase):
    def test_default_selects_everything(self) -> None:
        all_columns = ["id", "name", "reps", "weight", "unit", "date"]
        self.assertEqual(parse_projection(None), all_columns)
        self.assertEqual(parse_projection(""), all_columns)

    def test_string_projection(self) -> None:
        self.assertEqual(parse_projection("date name"), ["id", "name", "date"])
        self.assertEqual(parse_projection("-weight -id"), ["name", "reps", "unit", "date"])

    def test_mapping_projection(self) -> None:
        self.assertEqual(parse_projection({"reps": 1, "_id": 0}), ["reps"])
        self.assertEqual(parse_projection({"unit": False}), ["id", "name", "reps", "weight", "date"])

    def test_id_only_projection(self) -> None:
        self.assertEqual(parse_projection("_id"), ["id"])
        self.assertEqual(parse_projection("id"), ["id"])
        self.assertEqual(parse_projection({"_id": 1}), ["id"])
        self.assertEqual(parse_projection("id name"), ["id", "name"])

    def test_invalid_projection(self) -> None:
        with self.assertRaises(ExerciseValidationError):
            parse_projection("name -reps")
        with self.assertRaises(ExerciseValidationError):
            parse_projection("height")
        with self.assertRaises(ExerciseValidationError):
            parse_projection(42)
        with self.assertRaises(ExerciseValidationError):
            parse_projection("-id -name -reps -weight -unit -date")


if __name__ == "__main__":
    unittest.main()
