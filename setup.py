#!/usr/bin/env python3
"""
Setup script for Gesture Control
"""

from pathlib import Path

from setuptools import find_packages, setup

here = Path(__file__).parent


def read_requirements():
    """Read required packages from requirements.txt"""
    lines = (here / "requirements.txt").read_text().splitlines()
    return [line.strip() for line in lines if line.strip() and not line.startswith("#")]


setup(
    name="gesture-control",
    version="0.1.0",
    description="Control a browser page with hand gestures from a webcam",
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"gesture_control": ["config.default.yaml"]},
    install_requires=read_requirements(),
    extras_require={
        "test": ["pytest>=7.0", "httpx>=0.25"],
    },
    entry_points={
        "console_scripts": [
            "gesture-control=gesture_control.main:cli",
            "gesture-control-server=gesture_control.server:main",
        ],
    },
)
