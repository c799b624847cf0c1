[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linesrv"
version = "0.1.0"
description = "Small line-oriented TCP servers and a client: echo, factorial, timer and worker-pool variants"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "server", "asyncio", "line protocol", "factorial", "echo"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
linesrv-echo = "linesrv.echo_server:main"
linesrv-factorial = "linesrv.factorial_server:main"
linesrv-timer = "linesrv.timer_server:main"
linesrv-pool = "linesrv.pool_server:main"
linesrv-client = "linesrv.client:main"

[tool.hatch.build.targets.wheel]
packages = ["linesrv"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
