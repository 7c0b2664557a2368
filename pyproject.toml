[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "keuka"
version = "1.0.6"
description = "Inspect the TLS handshake and peer certificate chain of a remote host."
requires-python = ">=3.13"
keywords = ["tls", "ssl", "x509", "certificate", "handshake", "cli"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Internet",
    "Topic :: Utilities",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
keuka = "keuka.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["keuka"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
