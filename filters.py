"""Translate document-style filters and projections into SQLite clauses.

Filters map a field name to either a plain value (equality) or a mapping of
operators, e.g. ``{"reps": {"$gte": 5}, "unit": "kg"}``. Projections are
either a space separated string (``"name reps"`` or ``"-date"``) or a
mapping of field to 1/0.
"""

from typing import Any, List, NamedTuple, Optional, Tuple

from errors import ExerciseValidationError
from exercise_schema import FIELDS

COLUMNS = ("id",) + FIELDS

OPERATORS = {
    "$eq": "=",
    "$ne": "!=",
    "$gt": ">",
    "$gte": ">=",
    "$lt": "<",
    "$lte": "<=",
    "$in": "IN",
    "$nin": "NOT IN",
}

SCALAR_TYPES = (str, int, float, type(None))


class Predicate(NamedTuple):
    field: str
    op: str
    value: Any


def _column(field: str) -> str:
    if field == "_id":
        return "id"
    if field not in COLUMNS:
        raise ExerciseValidationError(f"unknown field: {field}")
    return field


def _scalar(field: str, value):
    if not isinstance(value, SCALAR_TYPES):
        raise ExerciseValidationError(
            f"unsupported value for {field}: {type(value).__name__}"
        )
    return value


def parse_filter(criteria: Optional[dict]) -> List[Predicate]:
    if not criteria:
        return []
    if not isinstance(criteria, dict):
        raise ExerciseValidationError("filter must be a mapping")
    predicates: List[Predicate] = []
    for field, cond in criteria.items():
        column = _column(field)
        if isinstance(cond, dict):
            if not cond:
                raise ExerciseValidationError(f"empty condition for {field}")
            for op, value in cond.items():
                if op not in OPERATORS:
                    raise ExerciseValidationError(f"unsupported operator: {op}")
                if op in ("$in", "$nin"):
                    if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
                        raise ExerciseValidationError(f"{op} expects a list")
                    value = tuple(_scalar(field, v) for v in value)
                else:
                    _scalar(field, value)
                predicates.append(Predicate(column, op, value))
        else:
            predicates.append(Predicate(column, "$eq", _scalar(field, cond)))
    return predicates


def compile_filter(predicates: List[Predicate]) -> Tuple[str, Tuple]:
    """Return a ``WHERE`` clause (possibly empty) and its parameters."""
    clauses: list[str] = []
    params: list = []
    for pred in predicates:
        sql_op = OPERATORS[pred.op]
        if pred.op in ("$in", "$nin"):
            if not pred.value:
                # IN () matches nothing, NOT IN () matches everything
                clauses.append("0" if pred.op == "$in" else "1")
                continue
            marks = ", ".join("?" for _ in pred.value)
            clauses.append(f"{pred.field} {sql_op} ({marks})")
            params.extend(pred.value)
        elif pred.value is None and pred.op in ("$eq", "$ne"):
            clauses.append(f"{pred.field} IS {'NOT ' if pred.op == '$ne' else ''}NULL")
        else:
            clauses.append(f"{pred.field} {sql_op} ?")
            params.append(pred.value)
    if not clauses:
        return "", ()
    return " WHERE " + " AND ".join(clauses), tuple(params)


def parse_projection(projection) -> List[str]:
    """Return the columns selected by ``projection`` in table order."""
    if not projection:
        return list(COLUMNS)
    if isinstance(projection, str):
        selection = {}
        for token in projection.split():
            if token.startswith("-"):
                selection[token[1:]] = 0
            else:
                selection[token.lstrip("+")] = 1
    elif isinstance(projection, dict):
        selection = {k: 1 if v else 0 for k, v in projection.items()}
    else:
        raise ExerciseValidationError("projection must be a string or mapping")

    selection = {_column(k): v for k, v in selection.items()}
    id_listed = "id" in selection
    include_id = selection.pop("id", 1)
    included = {k for k, v in selection.items() if v}
    excluded = {k for k, v in selection.items() if not v}
    if id_listed and include_id and not selection:
        return ["id"]
    if included and excluded:
        raise ExerciseValidationError(
            "projection cannot mix inclusion and exclusion"
        )
    if included:
        fields = [c for c in FIELDS if c in included]
    else:
        fields = [c for c in FIELDS if c not in excluded]
    columns = (["id"] if include_id else []) + fields
    if not columns:
        raise ExerciseValidationError("projection selects no fields")
    return columns
