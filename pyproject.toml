[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sockdemos"
version = "0.1.0"
description = "Small TCP socket programs: daytime, chat and nickname servers and clients over IPv4 and IPv6"
requires-python = ">=3.10"
dependencies = []
keywords = ["sockets", "tcp", "daytime", "chat", "ipv6", "networking"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
daytime-server = "sockdemos.daytime:server_main"
daytime-client = "sockdemos.daytime:client_main"
chat-server = "sockdemos.chat:server_main"
chat-client = "sockdemos.chat:client_main"
nickname-server = "sockdemos.nickname:server_main"
nickname-client = "sockdemos.nickname:client_main"

[tool.hatch.build.targets.wheel]
packages = ["sockdemos"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
