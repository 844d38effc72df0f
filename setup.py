"""Packaging for the wpilog decoder."""

from setuptools import setup

setup(
    name="wpilog",
    version="0.1.0",
    description="Streaming decoder for the WPILOG binary log format",
    python_requires=">=3.10",
    package_dir={"": "python"},
    packages=["wpilog"],
    install_requires=["numpy"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["wpilog = wpilog.cli:main"]},
)
