import numpy as np
from PIL import Image
from typer.testing import CliRunner

from rrtstar_planner.data_models import Path
from rrtstar_planner.main import app

runner = CliRunner()


def write_map(directory, walled_goal: bool = False) -> str:
    pixels = np.full((100, 100), 255, dtype=np.uint8)
    if walled_goal:
        # Image rows are flipped: row 99 - y
        pixels[100 - 90 : 100 - 60, 60:90] = 0
        pixels[100 - 85 : 100 - 65, 65:85] = 255
    Image.fromarray(pixels).save(directory / "map.png")
    (directory / "map.yaml").write_text(
        "image: map.png\n"
        "mode: trinary\n"
        "resolution: 0.1\n"
        "origin: [0.0, 0.0, 0.0]\n"
        "negate: 0\n"
        "occupied_thresh: 0.65\n"
        "free_thresh: 0.196\n"
    )
    return str(directory / "map.yaml")


def test_plan_to_stdout(tmp_path):
    map_yaml = write_map(tmp_path)
    result = runner.invoke(
        app,
        ["plan", "--map", map_yaml, "--start", "1", "1", "--goal", "6", "4", "--seed", "4"],
    )
    assert result.exit_code == 0, result.output
    path = Path.model_validate_json(result.stdout)
    assert path.header.frame_id == "map"
    assert path.poses[0].position == (1.0, 1.0, 0.0)
    assert path.poses[-1].position == (6.0, 4.0, 0.0)


def test_plan_to_file_with_config(tmp_path):
    map_yaml = write_map(tmp_path)
    config = tmp_path / "planner.yaml"
    config.write_text("max_iterations: 200\nrewire_mode: full\n")
    out = tmp_path / "path.json"
    result = runner.invoke(
        app,
        [
            "plan",
            "--map",
            map_yaml,
            "--start",
            "2",
            "2",
            "--goal",
            "3",
            "8",
            "--config",
            str(config),
            "--frame",
            "world",
            "--out",
            str(out),
        ],
    )
    assert result.exit_code == 0, result.output
    path = Path.model_validate_json(out.read_text())
    assert path.header.frame_id == "world"
    assert path.poses[-1].position == (3.0, 8.0, 0.0)


def test_plan_without_path(tmp_path):
    map_yaml = write_map(tmp_path, walled_goal=True)
    config = tmp_path / "planner.yaml"
    config.write_text("max_iterations: 100\n")
    result = runner.invoke(
        app,
        [
            "plan",
            "--map",
            map_yaml,
            "--start",
            "1",
            "1",
            "--goal",
            "7.5",
            "7.5",
            "--config",
            str(config),
            "--seed",
            "2",
        ],
    )
    assert result.exit_code == 1


def test_check_config(tmp_path):
    config = tmp_path / "planner.yaml"
    config.write_text("max_iterations: 10\n")
    result = runner.invoke(app, ["check-config", str(config)])
    assert result.exit_code == 0, result.output
    assert '"max_iterations": 10' in result.stdout
