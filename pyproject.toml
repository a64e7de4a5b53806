[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trustbundle"
version = "0.1.0"
description = "Validate CA certificate packages, read bundle sources, track bundle status and encode JKS and PKCS#12 trust stores"
requires-python = ">=3.10"
keywords = ["x509", "certificates", "trust", "ca-bundle", "jks", "pkcs12", "pem"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]
dependencies = [
    "cryptography>=39",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["trustbundle"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
