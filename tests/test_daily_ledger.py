# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import shutil
import tempfile
import unittest
from pathlib import Path

from calorietrack.errors import StorageCorruption, ValidationError
from calorietrack.meals.aggregator import assemble_meal
from calorietrack.meals.ledger import DailyLedger, meals_key, parse_ledger
from calorietrack.meals.models import MEAL_TIME_ORDER, MealTime
from calorietrack.store import MemoryStore, SqliteStore

DAY = "2024-01-01"


def make_meal(meal_time: MealTime, calories: int = 100, day: str = DAY, **macros):
    return assemble_meal(meal_time, day, [{"food_name": f"{meal_time.value} food", "calories": calories, **macros}])


class TestDailyLedger(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryStore()
        self.ledger = DailyLedger(self.store, DAY)

    def test_missing_key_is_empty_and_not_created(self) -> None:
        self.assertEqual(self.ledger.meals, [])
        self.assertEqual(self.store.keys(), [])

    def test_add_keeps_meal_time_order_and_insertion_order_for_ties(self) -> None:
        snack = make_meal(MealTime.snack)
        breakfast_1 = make_meal(MealTime.breakfast)
        dinner = make_meal(MealTime.dinner)
        breakfast_2 = make_meal(MealTime.breakfast)
        lunch = make_meal(MealTime.lunch)

        for meal in (snack, breakfast_1, dinner, breakfast_2, lunch):
            self.ledger.add(meal)

        self.assertEqual(
            [m.id for m in self.ledger.meals],
            [breakfast_1.id, breakfast_2.id, lunch.id, dinner.id, snack.id],
        )
        ranks = [MEAL_TIME_ORDER.index(m.meal_time) for m in self.ledger.meals]
        self.assertEqual(ranks, sorted(ranks))

    def test_every_mutation_persists_full_list(self) -> None:
        first = make_meal(MealTime.lunch)
        second = make_meal(MealTime.breakfast)
        self.ledger.add(first)
        self.ledger.add(second)

        stored = json.loads(self.store.get(meals_key(DAY)) or "[]")
        self.assertEqual([m["id"] for m in stored], [second.id, first.id])
        self.assertEqual(stored[0]["mealTime"], "Breakfast")
        self.assertIn("totalCalories", stored[0])
        self.assertNotIn("totalProtein", stored[0])

        self.ledger.remove(second.id)
        stored = json.loads(self.store.get(meals_key(DAY)) or "[]")
        self.assertEqual([m["id"] for m in stored], [first.id])

    def test_round_trip(self) -> None:
        meal = make_meal(MealTime.dinner, calories=650, protein=40.5, carbs=12, fat=7.25)
        self.ledger.add(meal)

        reloaded = DailyLedger(self.store, DAY)
        self.assertEqual(reloaded.meals, [meal])
        self.assertEqual(reloaded.meals[0].total_protein, 40.5)

    def test_remove_then_load(self) -> None:
        keep = make_meal(MealTime.breakfast)
        drop = make_meal(MealTime.lunch)
        self.ledger.add(keep)
        self.ledger.add(drop)

        self.ledger.remove(drop.id)

        reloaded = DailyLedger(self.store, DAY)
        self.assertNotIn(drop.id, reloaded)
        self.assertIn(keep.id, reloaded)

    def test_remove_unknown_id_is_noop(self) -> None:
        meal = make_meal(MealTime.lunch)
        self.ledger.add(meal)
        before = self.ledger.meals

        after = self.ledger.remove("meal_does_not_exist")

        self.assertEqual(after, before)
        self.assertEqual(DailyLedger(self.store, DAY).meals, before)

    def test_switching_dates_loads_fresh(self) -> None:
        self.ledger.add(make_meal(MealTime.lunch))
        other = make_meal(MealTime.dinner, day="2024-01-02")

        self.ledger.load("2024-01-02")
        self.assertEqual(self.ledger.meals, [])
        self.ledger.add(other)

        self.assertEqual(len(DailyLedger(self.store, DAY)), 1)
        self.assertEqual(DailyLedger(self.store, "2024-01-02").meals, [other])

    def test_rejects_meal_for_another_date(self) -> None:
        with self.assertRaises(ValueError):
            self.ledger.add(make_meal(MealTime.lunch, day="2023-12-31"))

    def test_rejects_duplicate_meal_id(self) -> None:
        meal = make_meal(MealTime.lunch)
        self.ledger.add(meal)
        with self.assertRaises(ValueError):
            self.ledger.add(meal)

    def test_invalid_date(self) -> None:
        for bad in ("2024-1-1", "2024-02-30", "yesterday"):
            with self.subTest(bad=bad):
                with self.assertRaises(ValidationError):
                    self.ledger.load(bad)

    def test_mutation_requires_active_date(self) -> None:
        with self.assertRaises(RuntimeError):
            DailyLedger(self.store).add(make_meal(MealTime.lunch))


class TestCorruptLedger(unittest.TestCase):
    def test_corrupt_values_reset_and_delete_key(self) -> None:
        corrupt_values = [
            "not an array",
            json.dumps("not an array"),
            json.dumps({"id": "meal_1"}),
            json.dumps([{"items": []}]),
            json.dumps([{"id": "meal_1", "date": DAY, "mealTime": "Lunch", "totalCalories": 0}]),
        ]
        for raw in corrupt_values:
            with self.subTest(raw=raw):
                store = MemoryStore({meals_key(DAY): raw, "settings.dailyGoal": "1800"})
                with self.assertLogs("calorietrack.meals.ledger", level="WARNING"):
                    ledger = DailyLedger(store, DAY)
                self.assertEqual(ledger.meals, [])
                self.assertIsNone(store.get(meals_key(DAY)))
                self.assertEqual(store.get("settings.dailyGoal"), "1800")

    def test_parse_ledger_raises_storage_corruption(self) -> None:
        with self.assertRaises(StorageCorruption) as ctx:
            parse_ledger(meals_key(DAY), "{")
        self.assertEqual(ctx.exception.key, "meals.2024-01-01")

    def test_totals_are_recomputed_from_items(self) -> None:
        meal = make_meal(MealTime.lunch, calories=300, protein=12).to_json_dict()
        meal["totalCalories"] = 999
        meal["totalFat"] = 5

        (loaded,) = parse_ledger(meals_key(DAY), json.dumps([meal]))
        self.assertEqual(loaded.total_calories, 300)
        self.assertEqual(loaded.total_protein, 12)
        self.assertIsNone(loaded.total_fat)

    def test_missing_total_keeps_the_day(self) -> None:
        kept = make_meal(MealTime.breakfast, calories=250)
        partial = make_meal(MealTime.dinner, calories=400).to_json_dict()
        del partial["totalCalories"]
        store = MemoryStore({meals_key(DAY): json.dumps([kept.to_json_dict(), partial])})

        ledger = DailyLedger(store, DAY)

        self.assertEqual([m.id for m in ledger.meals], [kept.id, partial["id"]])
        self.assertEqual(ledger.meals[1].total_calories, 400)
        self.assertIsNotNone(store.get(meals_key(DAY)))

    def test_non_finite_item_calories_are_corrupt(self) -> None:
        meal = make_meal(MealTime.lunch, calories=300).to_json_dict()
        raw = json.dumps([meal]).replace('"calories": 300', '"calories": Infinity')
        self.assertIn("Infinity", raw)
        store = MemoryStore({meals_key(DAY): raw})

        with self.assertLogs("calorietrack.meals.ledger", level="WARNING"):
            ledger = DailyLedger(store, DAY)
        self.assertEqual(ledger.meals, [])
        self.assertIsNone(store.get(meals_key(DAY)))

    def test_empty_value_is_empty_ledger(self) -> None:
        store = MemoryStore({meals_key(DAY): ""})
        self.assertEqual(DailyLedger(store, DAY).meals, [])


class TestSqliteStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="calorietrack-test-"))
        self.store = SqliteStore(self._tmp / "store.db")

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    def test_get_set_delete(self) -> None:
        self.assertIsNone(self.store.get("settings.theme"))
        self.store.set("settings.theme", "dark")
        self.store.set("settings.theme", "light")
        self.assertEqual(self.store.get("settings.theme"), "light")
        self.store.delete("settings.theme")
        self.assertIsNone(self.store.get("settings.theme"))

    def test_ledger_over_sqlite(self) -> None:
        meal = make_meal(MealTime.snack, calories=120)
        DailyLedger(self.store, DAY).add(meal)
        self.assertEqual(DailyLedger(self.store, DAY).meals, [meal])


if __name__ == "__main__":
    unittest.main()
