[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sklaff"
version = "1.32"
description = "User register, session table and profile file handling for a simple multi-user conference system"
requires-python = ">=3.10"
dependencies = []
keywords = ["bbs", "conference", "kom", "users", "sessions", "sklaffrc"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: BBS",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sklaff"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
