import time
import typing as t
import weakref

import typer

from rrtstar_planner.data_models import (
    RRTStarConfigModel,
    make_pose_stamped,
    planner_config_from_yaml,
)
from rrtstar_planner.exceptions import NoPathFoundError, PlanningTimeoutError
from rrtstar_planner.planner import RRTStarPlanner
from rrtstar_planner.utils import utils
from rrtstar_planner.world.cost_grid import CostGrid

app = typer.Typer()


class StandaloneNode:
    """Minimal host node used when the planner runs outside of a navigation stack"""

    def __init__(self, parameters: t.Dict[str, t.Any] | None = None):
        self.parameters: t.Dict[str, t.Any] = dict(parameters or {})

    def declare_parameter(self, name: str, default: t.Any) -> t.Any:
        return self.parameters.setdefault(name, default)

    def get_parameter(self, name: str) -> t.Any:
        return self.parameters[name]

    def now(self) -> float:
        return time.time()


@app.command()
def plan(
    map_yaml: t.Annotated[str, typer.Option("--map")],
    start: t.Annotated[t.Tuple[float, float], typer.Option("--start")],
    goal: t.Annotated[t.Tuple[float, float], typer.Option("--goal")],
    config: t.Annotated[t.Optional[str], typer.Option("--config")] = None,
    seed: t.Annotated[t.Optional[int], typer.Option("--seed")] = None,
    frame: t.Annotated[str, typer.Option("--frame")] = "map",
    out: t.Annotated[t.Optional[str], typer.Option("--out")] = None,
    verbose: t.Annotated[bool, typer.Option("--verbose")] = False,
):
    planner_config = (
        planner_config_from_yaml(config) if config else RRTStarConfigModel()
    )
    if seed is not None:
        planner_config = planner_config.model_copy(update={"random_seed": seed})

    grid = CostGrid.load_from_yaml(map_yaml)
    node = StandaloneNode()
    planner = RRTStarPlanner(
        config=planner_config, logger=utils.PlannerLogger(printout=verbose)
    )
    planner.configure(weakref.ref(node), "rrtstar", grid, frame)

    try:
        path = planner.create_plan(
            make_pose_stamped(start[0], start[1], frame),
            make_pose_stamped(goal[0], goal[1], frame),
        )
    except (NoPathFoundError, PlanningTimeoutError) as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    doc = path.model_dump_json(indent=2)
    if out:
        with open(out, "w") as f:
            f.write(doc)
    else:
        typer.echo(doc)


@app.command()
def check_config(config: str):
    """Validates a planner configuration file and prints the resolved values"""
    typer.echo(planner_config_from_yaml(config).model_dump_json(indent=2))


if __name__ == "__main__":
    app()
