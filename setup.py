# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import io
import os

from setuptools import find_packages, setup

about = {}
with io.open(os.path.join("mipsched", "__misc__.py"), encoding="utf-8") as fp:
    exec(fp.read(), about)

readme = io.open("./mipsched/README.rst", encoding="utf-8").read()

setup(
    name="pymipsched",
    version=about["__version__"],
    description="Time-shared VM scheduler with MIPS over-subscription",
    long_description=readme,
    long_description_content_type="text/x-rst",
    license="MIT License",
    platforms=["Windows", "Linux", "macOS"],
    keywords=[
        "cloud-simulation",
        "over-subscription",
        "resource-allocation",
        "simulator",
        "vm-scheduling",
    ],
    classifiers=[
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: MacOS",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: POSIX",
        "Operating System :: Unix",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
    ],
    python_requires=">=3.7",
    install_requires=[
        "numpy>=1.19",
        "PyYAML>=5.4",
    ],
    extras_require={
        "test": ["pytest"],
    },
    packages=find_packages(exclude=["tests", "tests.*", "examples", "examples.*"]),
    include_package_data=True,
    package_data={
        "mipsched.scheduler": ["topologies/*/*.yml"],
    },
    zip_safe=False,
)
