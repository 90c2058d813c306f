[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kafkaproto"
version = "0.1.0"
description = "Kafka 0.8 wire-protocol encoding, decoding, partitioning and producer configuration primitives"
requires-python = ">=3.10"
dependencies = []
keywords = ["kafka", "protocol", "wire-format", "partitioner", "producer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kafkaproto"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
