"""Tests for problem/result files and the command-line interface."""

import pytest
import yaml

from ioplacer.cli import main
from ioplacer.core.abstraction import Edge, Point
from ioplacer.errors import ProblemFileError
from ioplacer.placer import IOPlacer
from ioplacer.problem import (
    Problem,
    apply_result,
    load_problem,
    load_result,
    save_result,
)


@pytest.fixture
def problem_file(tmp_path, problem_yaml):
    path = tmp_path / "design.yaml"
    path.write_text(problem_yaml)
    return path


class TestLoadProblem:
    """Tests for reading problem files."""

    def test_slots_and_edges(self, problem_file):
        problem = load_problem(problem_file)

        assert len(problem.arena) == 8
        assert problem.arena[0].edge == Edge.BOTTOM
        assert problem.arena[4].edge == Edge.TOP
        assert problem.arena[3].blocked
        assert problem.source_file == problem_file

    def test_pins_mirrors_and_groups(self, problem_file):
        problem = load_problem(problem_file)
        pins = problem.pins

        assert [p.name for p in pins] == ["clk", "tx", "rx", "d0", "d1"]
        assert pins.mirror_partner(pins.index_of("tx")) == pins.index_of("rx")
        assert pins.mirror_partner(pins.index_of("rx")) == pins.index_of("tx")
        assert len(pins.groups) == 1
        assert pins.groups[0].name == "data"
        assert pins.groups[0].order
        assert pins[3].in_group and pins[4].in_group

    def test_explicit_edge_overrides_geometry(self):
        problem = Problem.from_dict({
            "core": {"xmin": 0, "ymin": 0, "xmax": 10, "ymax": 10},
            "slots": [{"x": 5, "y": 0, "layer": 1, "edge": "left"}],
            "pins": [{"name": "a"}],
        })

        assert problem.arena[0].edge == Edge.LEFT

    @pytest.mark.parametrize("data", [
        {"slots": [], "pins": []},
        {"core": {"xmin": 0, "ymin": 0, "xmax": 10, "ymax": 10}, "pins": []},
        {"core": {"xmin": 0, "ymin": 0, "xmax": 0, "ymax": 10}, "slots": [], "pins": []},
        {"core": {"xmin": 0, "ymin": 0, "xmax": 10, "ymax": 10}, "slots": [],
         "pins": [{"name": "a", "mirror": "ghost"}]},
        {"core": {"xmin": 0, "ymin": 0, "xmax": 10, "ymax": 10}, "slots": [{"y": 0}],
         "pins": []},
        {"version": 99},
        ["not", "a", "mapping"],
    ])
    def test_invalid_problems(self, data):
        with pytest.raises(ProblemFileError):
            Problem.from_dict(data)

    def test_version_given_as_string(self):
        problem = Problem.from_dict({
            "version": "1",
            "core": {"xmin": 0, "ymin": 0, "xmax": 10, "ymax": 10},
            "slots": [{"x": 5, "y": 0}],
            "pins": [{"name": "a"}],
        })

        assert len(problem.arena) == 1

    def test_unreadable_version(self):
        with pytest.raises(ProblemFileError):
            Problem.from_dict({"version": "one", "core": {}, "slots": [], "pins": []})

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProblemFileError):
            load_problem(tmp_path / "nope.yaml")


class TestSolveProblem:
    """The bundled problem solved end to end."""

    def test_placement(self, problem_file):
        problem = load_problem(problem_file)
        placer = IOPlacer(problem.arena, problem.pins, problem.oracle,
                          reflect=problem.core.mirrored_position)

        result = placer.run()
        pos = {p.name: p.pos for p in problem.pins}

        assert result.success
        assert result.sections == 2
        assert pos["clk"] == Point(20, 0)
        assert pos["tx"] == Point(60, 0)
        assert pos["rx"] == Point(60, 100)
        # Ordered group on the top edge fills its block back to front
        assert pos["d0"] == Point(20, 100)
        assert pos["d1"] == Point(40, 100)
        assert result.total_cost == 120

    def test_result_round_trip(self, problem_file, tmp_path):
        problem = load_problem(problem_file)
        result = IOPlacer(problem.arena, problem.pins, problem.oracle,
                          reflect=problem.core.mirrored_position).run()
        out = tmp_path / "out.yaml"

        save_result(out, problem.pins, result)
        placements = load_result(out)

        assert placements["tx"] == (Point(60, 0), 1)
        assert set(placements) == {"clk", "tx", "rx", "d0", "d1"}

        fresh = load_problem(problem_file)
        apply_result(fresh, placements)
        assert all(p.placed for p in fresh.pins)
        assert fresh.arena[fresh.arena.find_slot(Point(60, 100), 1)].used

    def test_result_with_unknown_pin(self, problem_file):
        problem = load_problem(problem_file)

        with pytest.raises(ProblemFileError):
            apply_result(problem, {"ghost": (Point(20, 0), 1)})


class TestCLI:
    """Tests for the ioplacer command."""

    def test_place_writes_result(self, problem_file, tmp_path, capsys):
        out = tmp_path / "placed.yaml"

        assert main(["place", str(problem_file), "-o", str(out)]) == 0

        data = yaml.safe_load(out.read_text())
        assert data["pins"]["d0"] == {"x": 20, "y": 100, "layer": 1}
        assert data["unplaced"] == []
        assert "Saved result" in capsys.readouterr().out

    def test_default_output_path(self, problem_file):
        assert main(["place", str(problem_file)]) == 0
        assert problem_file.with_suffix(".placed.yaml").exists()

    def test_dry_run_writes_nothing(self, problem_file, tmp_path):
        out = tmp_path / "placed.yaml"

        assert main(["place", str(problem_file), "-o", str(out), "--dry-run"]) == 0
        assert not out.exists()

    def test_check_accepts_own_result(self, problem_file, tmp_path):
        out = tmp_path / "placed.yaml"
        main(["place", str(problem_file), "-o", str(out)])

        assert main(["check", str(problem_file), str(out)]) == 0

    def test_check_rejects_broken_mirror(self, problem_file, tmp_path, capsys):
        out = tmp_path / "placed.yaml"
        main(["place", str(problem_file), "-o", str(out)])
        data = yaml.safe_load(out.read_text())
        data["pins"]["rx"] = {"x": 80, "y": 100, "layer": 1}
        out.write_text(yaml.safe_dump(data))

        assert main(["check", str(problem_file), str(out)]) == 1
        assert "[mirror]" in capsys.readouterr().out

    def test_bad_config_key(self, problem_file, tmp_path):
        config = tmp_path / "placer.yaml"
        config.write_text("slots_per_sectoin: 10\n")

        assert main(["place", str(problem_file), "--config", str(config)]) == 1

    def test_zero_slots_per_section_is_rejected(self, problem_file, tmp_path):
        out = tmp_path / "placed.yaml"

        assert main(["place", str(problem_file), "-o", str(out),
                     "--slots-per-section", "0"]) == 1
        assert not out.exists()

    def test_missing_problem(self, tmp_path):
        assert main(["place", str(tmp_path / "missing.yaml")]) == 1

    def test_no_command(self):
        assert main([]) == 1
