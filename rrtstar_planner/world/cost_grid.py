import math
import os
import typing as t

import numpy as np
import numpy.typing as npt
import yaml
from PIL import Image, ImageDraw
from shapely.geometry import Polygon, box
from typing_extensions import Self

from rrtstar_planner.data_models import GridCellModel, MapYamlConfigModel

# Cost values shared with the navigation-stack costmap
FREE_SPACE = 0
INSCRIBED_INFLATED_OBSTACLE = 253
LETHAL_OBSTACLE = 254
NO_INFORMATION = 255


class CostGrid:
    """Read-mostly 2D cost grid queried by the planner.

    Costs are stored as `uint8` in an array indexed `[mx, my]`. Cell `(0, 0)` has its
    lower-left corner at `(origin_x, origin_y)` in world coordinates.
    """

    def __init__(
        self,
        *,
        resolution: float,
        size_x: int,
        size_y: int,
        origin_x: float = 0.0,
        origin_y: float = 0.0,
        costs: npt.NDArray[np.uint8] | None = None,
    ):
        if resolution <= 0:
            raise ValueError("Grid resolution must be positive, got {}".format(resolution))
        self.resolution = resolution
        self.origin_x = origin_x
        self.origin_y = origin_y

        if costs is not None:
            self.set_costs(costs)
        else:
            self.size_x = size_x
            self.size_y = size_y
            self.costs = np.full((size_x, size_y), FREE_SPACE, dtype=np.uint8)

        self.aabb_polygon = box(*self.get_bounds())

    @classmethod
    def from_world_size(
        cls,
        *,
        width: float,
        height: float,
        resolution: float,
        origin_x: float = 0.0,
        origin_y: float = 0.0,
    ) -> Self:
        return cls(
            resolution=resolution,
            size_x=math.ceil(round(width / resolution, 9)),
            size_y=math.ceil(round(height / resolution, 9)),
            origin_x=origin_x,
            origin_y=origin_y,
        )

    def set_costs(self, costs: npt.NDArray[t.Any]):
        self.size_x = costs.shape[0]
        self.size_y = costs.shape[1]
        self.costs = costs.astype(np.uint8)

    def get_bounds(self):
        return (
            self.origin_x,
            self.origin_y,
            self.origin_x + self.size_x * self.resolution,
            self.origin_y + self.size_y * self.resolution,
        )

    def get_cost(self, mx: int, my: int) -> int:
        return int(self.costs[mx][my])

    def set_cost(self, mx: int, my: int, cost: int):
        self.costs[mx][my] = cost

    def is_free(self, mx: int, my: int) -> bool:
        return self.get_cost(mx, my) == FREE_SPACE

    def count_free_cells(self) -> int:
        return int(np.count_nonzero(self.costs == FREE_SPACE))

    def world_to_map(self, wx: float, wy: float) -> GridCellModel | None:
        """Computes the cell containing a world position, or `None` if it lies outside the grid"""
        if wx < self.origin_x or wy < self.origin_y:
            return None
        mx = int((wx - self.origin_x) / self.resolution)
        my = int((wy - self.origin_y) / self.resolution)
        if mx < self.size_x and my < self.size_y:
            return (mx, my)
        return None

    def world_to_map_array(
        self, wxs: npt.NDArray[np.float64], wys: npt.NDArray[np.float64]
    ) -> t.Tuple[npt.NDArray[np.int64], npt.NDArray[np.int64], npt.NDArray[np.bool_]]:
        """Vectorized `world_to_map`. Returns cell indices and a mask of in-bounds points;
        indices of out-of-bounds points are clamped and must be ignored."""
        fx = (wxs - self.origin_x) / self.resolution
        fy = (wys - self.origin_y) / self.resolution
        in_bounds = (
            (wxs >= self.origin_x)
            & (wys >= self.origin_y)
            & (fx < self.size_x)
            & (fy < self.size_y)
        )
        mxs = np.clip(fx, 0, self.size_x - 1).astype(np.int64)
        mys = np.clip(fy, 0, self.size_y - 1).astype(np.int64)
        return mxs, mys, in_bounds

    def pose_to_cell(self, x: float, y: float) -> GridCellModel:
        """Like `world_to_map`, but clamps positions outside of the grid to its border cells"""
        cx = int(math.floor((x - self.origin_x) / self.resolution))
        cx = min(max(0, cx), self.size_x - 1)
        cy = int(math.floor((y - self.origin_y) / self.resolution))
        cy = min(max(0, cy), self.size_y - 1)
        return (cx, cy)

    def map_to_world(self, mx: int, my: int) -> t.Tuple[float, float]:
        """World position of a cell's center"""
        return (
            self.origin_x + (mx + 0.5) * self.resolution,
            self.origin_y + (my + 0.5) * self.resolution,
        )

    def rasterize_polygon(self, polygon: Polygon) -> t.Set[GridCellModel]:
        """Uses PIL to rasterize a polygon into grid cells. We use PIL for this because it is
        significantly faster than a naive python implementation.
        """
        img = Image.new("L", (self.size_x, self.size_y), 0)
        poly_coordinates_in_image = [
            self.pose_to_cell(x, y) for (x, y) in polygon.exterior.coords
        ]
        ImageDraw.Draw(img).polygon(poly_coordinates_in_image, outline=1, fill=1)
        subgrid = np.transpose(np.array(img, dtype=np.uint8))  # (y, x) -> (x, y)
        x_coords, y_coords = np.where(subgrid == 1)
        return set(zip(x_coords.tolist(), y_coords.tolist()))

    def set_polygon_cost(self, polygon: Polygon, cost: int = LETHAL_OBSTACLE):
        clipped = polygon.intersection(self.aabb_polygon)
        if clipped.is_empty or not isinstance(clipped, Polygon):
            return set()
        cells = self.rasterize_polygon(clipped)
        for cell in cells:
            self.costs[cell[0]][cell[1]] = cost
        return cells

    @classmethod
    def load_from_yaml(cls, yaml_file: str) -> Self:
        """Loads a map-server style map (YAML metadata plus image) using the trinary
        interpretation: occupied, free or unknown."""
        with open(yaml_file, "r") as file:
            data = yaml.safe_load(file)

        config = MapYamlConfigModel(**data)
        if config.mode != "trinary":
            raise ValueError(
                "Unsupported map mode '{}' in {}, only 'trinary' maps can be loaded".format(
                    config.mode, yaml_file
                )
            )
        map_image_path = os.path.join(os.path.dirname(yaml_file), config.image)
        map_image = Image.open(map_image_path).convert("L")
        pixels = np.array(map_image, dtype=np.float64)

        if config.negate:
            occupancy = pixels / 255.0
        else:
            occupancy = (255.0 - pixels) / 255.0

        costs = np.full(pixels.shape, NO_INFORMATION, dtype=np.uint8)
        costs[occupancy > config.occupied_thresh] = LETHAL_OBSTACLE
        costs[occupancy < config.free_thresh] = FREE_SPACE

        # Image rows run top to bottom, grid rows bottom to top
        costs = np.flipud(costs).transpose()

        return cls(
            resolution=config.resolution,
            size_x=costs.shape[0],
            size_y=costs.shape[1],
            origin_x=config.origin[0],
            origin_y=config.origin[1],
            costs=costs,
        )
