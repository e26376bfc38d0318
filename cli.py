import argparse
import asyncio
import datetime
import json
from typing import Optional

from algorithms import WeightConverter
from config import load_settings, setup_logging
from db import AsyncExerciseRepository, ExerciseDatabase
from errors import ExerciseError

DEMO_EXERCISES = [
    ("Squat", 5, 100.0, "kg"),
    ("Bench Press", 5, 80.0, "kg"),
    ("Deadlift", 3, 140.0, "kg"),
]


def _print(data) -> None:
    print(json.dumps(data, indent=2))


async def list_exercises(
    db_path: str,
    name: Optional[str] = None,
    unit: Optional[str] = None,
    fields: Optional[str] = None,
    limit: int = 0,
) -> list:
    criteria = {}
    if name:
        criteria["name"] = name
    if unit:
        criteria["unit"] = unit
    async with ExerciseDatabase(db_path) as db:
        return await AsyncExerciseRepository(db).find(criteria, fields, limit)


async def add_exercise(db_path: str, name: str, reps: int, weight: float, unit: str, date: str) -> dict:
    async with ExerciseDatabase(db_path) as db:
        return await AsyncExerciseRepository(db).create(name, reps, weight, unit, date)


async def show_exercise(db_path: str, exercise_id: int) -> dict:
    async with ExerciseDatabase(db_path) as db:
        return await AsyncExerciseRepository(db).find_by_id(exercise_id)


async def delete_exercise(db_path: str, exercise_id: int) -> int:
    async with ExerciseDatabase(db_path) as db:
        return await AsyncExerciseRepository(db).delete_by_id(exercise_id)


async def replace_exercise(
    db_path: str, exercise_id: int, name: str, reps: int, weight: float, unit: str, date: str
) -> int:
    async with ExerciseDatabase(db_path) as db:
        return await AsyncExerciseRepository(db).replace(
            exercise_id, name, reps, weight, unit, date
        )


async def demo_data(db_path: str, unit: str = "kg") -> list:
    """Populate the store with demo exercises if it is empty."""
    async with ExerciseDatabase(db_path) as db:
        repo = AsyncExerciseRepository(db)
        if await repo.find(limit=1):
            return []
        today = datetime.date.today().isoformat()
        created = []
        for name, reps, weight, base_unit in DEMO_EXERCISES:
            converted = WeightConverter.convert(weight, base_unit, unit)
            created.append(await repo.create(name, reps, converted, unit, today))
        return created


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Exercise log commands")
    parser.add_argument("--config", default="settings.yaml")
    parser.add_argument("--db", default=None, help="override the configured database")
    sub = parser.add_subparsers(dest="cmd", required=True)

    add = sub.add_parser("add")
    add.add_argument("name")
    add.add_argument("reps", type=int)
    add.add_argument("weight", type=float)
    add.add_argument("--unit", default=None)
    add.add_argument("--date", default=None)

    lst = sub.add_parser("list")
    lst.add_argument("--name")
    lst.add_argument("--unit")
    lst.add_argument("--fields", help="projection, e.g. 'name reps' or '-date'")
    lst.add_argument("--limit", type=int, default=None)

    show = sub.add_parser("show")
    show.add_argument("id", type=int)

    delete = sub.add_parser("delete")
    delete.add_argument("id", type=int)

    rep = sub.add_parser("replace")
    rep.add_argument("id", type=int)
    rep.add_argument("name")
    rep.add_argument("reps", type=int)
    rep.add_argument("weight", type=float)
    rep.add_argument("unit")
    rep.add_argument("date")

    sub.add_parser("demo")

    conv = sub.add_parser("convert")
    conv.add_argument("--weight", type=float, required=True)
    conv.add_argument("--unit", choices=["kg", "lb"], required=True)

    args = parser.parse_args(argv)
    try:
        settings = load_settings(args.config)
    except ValueError as e:
        print(f"error: invalid settings in {args.config}: {e}")
        return 1
    setup_logging(settings.log_level)
    db_path = args.db or settings.db_path

    try:
        if args.cmd == "add":
            _print(
                asyncio.run(
                    add_exercise(
                        db_path,
                        args.name,
                        args.reps,
                        args.weight,
                        args.unit or settings.default_unit,
                        args.date or datetime.date.today().isoformat(),
                    )
                )
            )
        elif args.cmd == "list":
            limit = settings.default_limit if args.limit is None else args.limit
            _print(
                asyncio.run(
                    list_exercises(db_path, args.name, args.unit, args.fields, limit)
                )
            )
        elif args.cmd == "show":
            _print(asyncio.run(show_exercise(db_path, args.id)))
        elif args.cmd == "delete":
            _print({"deleted": asyncio.run(delete_exercise(db_path, args.id))})
        elif args.cmd == "replace":
            matched = asyncio.run(
                replace_exercise(
                    db_path, args.id, args.name, args.reps, args.weight, args.unit, args.date
                )
            )
            _print({"matched": matched})
        elif args.cmd == "demo":
            created = asyncio.run(demo_data(db_path, settings.default_unit))
            if created:
                _print(created)
            else:
                print("Database already contains exercises")
        elif args.cmd == "convert":
            target = "lb" if args.unit == "kg" else "kg"
            converted = WeightConverter.convert(args.weight, args.unit, target)
            print(f"{args.weight} {args.unit} = {converted} {target}")
    except ExerciseError as e:
        print(f"error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
