[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "veryl-css"
version = "0.1.0"
description = "Generate CSS custom properties, @function rules and keyframes from the IR of a single hardware module"
requires-python = ">=3.10"
dependencies = []
keywords = ["veryl", "css", "hdl", "code generation", "hardware description"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["veryl_css"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
