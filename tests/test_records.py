import io
import json
import random
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from mazecraft.generator import generate
from mazecraft.grid import parse_coordinate
from mazecraft.records import MazeRecord, MazeStore, write_records
from mazecraft.solver import main as solve_main, solve


class ParseCoordinateTests(unittest.TestCase):
    def test_accepts_integer_pairs(self) -> None:
        self.assertEqual(parse_coordinate([3, 4]), (3, 4))
        self.assertEqual(parse_coordinate((0, 0)), (0, 0))

    def test_rejects_everything_else(self) -> None:
        for value in ([0.5, 1], [1.0, 1], [True, 0], ["1", 2], [1], [1, 2, 3], "12", None, 7):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_coordinate(value)


class MazeStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.metadata_path = Path(self.tmp.name) / "mazes.json"
        grid = generate(6, 5, random.Random(17))
        self.record = MazeRecord(id="six-by-five", grid=grid, solution=solve(grid))

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def _write_payload(self, payload) -> None:
        self.metadata_path.write_text(json.dumps(payload), encoding="utf-8")

    def test_loaded_records_are_frozen_mazes(self) -> None:
        write_records([self.record], self.metadata_path)
        store = MazeStore(self.metadata_path)
        loaded = store.get("six-by-five")
        self.assertEqual(loaded.grid, self.record.grid)
        self.assertTrue(loaded.grid.frozen)
        self.assertEqual(loaded.solution, self.record.solution)
        self.assertEqual(list(store.records), ["six-by-five"])

    def test_rejects_records_without_maze_fields(self) -> None:
        self._write_payload([{"id": "square"}])
        with self.assertRaises(ValueError):
            MazeStore(self.metadata_path)

    def test_rejects_records_without_id(self) -> None:
        payload = self.record.to_dict()
        del payload["id"]
        self._write_payload([payload])
        with self.assertRaises(ValueError):
            MazeStore(self.metadata_path)

    def test_rejects_malformed_solution(self) -> None:
        payload = self.record.to_dict()
        payload["solution"] = [[0.5, 0], [1, 0]]
        self._write_payload([payload])
        with self.assertRaises(ValueError):
            MazeStore(self.metadata_path)

        payload["solution"] = [[0, 0], [40, 0]]
        self._write_payload([payload])
        with self.assertRaises(ValueError):
            MazeStore(self.metadata_path)

    def test_rejects_asymmetric_walls(self) -> None:
        payload = self.record.to_dict()
        payload["walls"][0][0] ^= 0b0010
        self._write_payload([payload])
        with self.assertRaises(ValueError):
            MazeStore(self.metadata_path)

    def test_unknown_id(self) -> None:
        write_records([self.record], self.metadata_path)
        with self.assertRaises(KeyError):
            MazeStore(self.metadata_path).get("missing")


class WriteRecordsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.metadata_path = Path(self.tmp.name) / "nested" / "mazes.json"
        grid = generate(2, 1, random.Random(0))
        self.record = MazeRecord(id="row", grid=grid, solution=solve(grid))

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_appends_to_existing_list(self) -> None:
        write_records([self.record], self.metadata_path)
        write_records([self.record], self.metadata_path)
        self.assertEqual(len(json.loads(self.metadata_path.read_text(encoding="utf-8"))), 2)

        write_records([self.record], self.metadata_path, append=False)
        self.assertEqual(len(json.loads(self.metadata_path.read_text(encoding="utf-8"))), 1)

    def test_append_refuses_non_list_metadata(self) -> None:
        self.metadata_path.parent.mkdir(parents=True)
        self.metadata_path.write_text(json.dumps({"id": "row"}), encoding="utf-8")
        with self.assertRaises(ValueError):
            write_records([self.record], self.metadata_path)
        self.assertEqual(json.loads(self.metadata_path.read_text(encoding="utf-8")), {"id": "row"})

        write_records([self.record], self.metadata_path, append=False)
        self.assertEqual(len(json.loads(self.metadata_path.read_text(encoding="utf-8"))), 1)


class SolverCommandLineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.metadata_path = Path(self.tmp.name) / "mazes.json"
        grid = generate(2, 1, random.Random(0))
        write_records([MazeRecord(id="row", grid=grid, solution=solve(grid))], self.metadata_path)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_prints_route_for_stored_maze(self) -> None:
        output = io.StringIO()
        with redirect_stdout(output):
            solve_main([str(self.metadata_path), "row"])
        self.assertEqual(json.loads(output.getvalue()), [[0, 0], [1, 0]])

    def test_unknown_maze_id(self) -> None:
        with self.assertRaises(KeyError):
            solve_main([str(self.metadata_path), "missing"])


if __name__ == "__main__":
    unittest.main()
