[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "uhidvirt"
version = "0.0.8"
description = "Create virtual HID devices from user space through the Linux UHID interface"
requires-python = ">=3.10"
dependencies = []
keywords = ["hid", "uhid", "linux", "userspace", "transport", "virtual-device"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Hardware :: Hardware Drivers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
uhidvirt-mouse = "uhidvirt.mouse:main"

[tool.hatch.build.targets.wheel]
packages = ["uhidvirt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
