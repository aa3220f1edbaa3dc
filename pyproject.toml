[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linetrack"
version = "0.1.0"
description = "Camera line tracking, PID control, IMU filtering and a tuning menu for a self-balancing track car"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "line tracking",
    "otsu",
    "binarization",
    "pid",
    "complementary filter",
    "smart car",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
linetrack-menu = "linetrack.menu:main"

[tool.hatch.build.targets.wheel]
packages = ["linetrack"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
