[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "groupnet"
version = "0.1.0"
description = "A small TCP command server for users and groups, with paired trackers, an interactive client and simple socket demos."
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "sockets", "tracker", "groups", "file-sharing", "client-server"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: File Sharing",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
groupnet-server = "groupnet.server:main"
groupnet-tracker = "groupnet.tracker:main"
groupnet-client = "groupnet.client:main"
groupnet-adder-server = "groupnet.adder:server_main"
groupnet-adder-client = "groupnet.adder:client_main"
groupnet-receiver = "groupnet.messages:receiver_main"
groupnet-sender = "groupnet.messages:sender_main"

[tool.hatch.build.targets.wheel]
packages = ["groupnet"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
