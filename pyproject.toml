[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mediautil"
version = "0.1.0"
description = "Building blocks for media streaming: byte buffers, AMF0/AMF3 codecs, bit readers, RTP reordering and timestamp helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["amf", "rtmp", "rtp", "media", "streaming", "bitstream", "exp-golomb", "timestamp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mediautil"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
