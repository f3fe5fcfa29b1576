#!/usr/bin/env python3
"""
Setup script for karasu-config package.
"""

from setuptools import setup, find_packages

setup(
    name="karasu-config",
    version="1.0.0",
    description="File-backed configuration registry with an extensible JSON codec",
    author="karasu-config Team",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
