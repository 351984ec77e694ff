from setuptools import find_namespace_packages, setup

package_name = "rrtstar_planner"


def read_requirements():
    with open("requirements.txt", "r") as file:
        return [
            line.strip() for line in file if line.strip() and not line.startswith("#")
        ]


setup(
    name=package_name,
    version="0.1.0",
    packages=find_namespace_packages(
        include=[package_name, package_name + ".*"]
    ),
    data_files=[
        ("share/ament_index/resource_index/packages", ["resource/" + package_name]),
        ("share/" + package_name, ["package.xml"]),
    ],
    install_requires=read_requirements(),
    python_requires=">=3.10",
    zip_safe=True,
    maintainer="rrtstar_planner maintainers",
    description="An RRT* global path planner for 2D cost grids with Bezier path smoothing",
    license="MIT",
    tests_require=["pytest"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": ["rrtstar-planner = rrtstar_planner.main:app"],
    },
)
