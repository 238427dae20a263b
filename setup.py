#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from setuptools import setup, find_packages

# Read the contents of README.md
with open("README.md", encoding="utf-8") as f:
    long_description = f.read()

# Read the requirements
with open("requirements.txt", encoding="utf-8") as f:
    requirements = f.read().splitlines()

setup(
    name="tpms-scan",
    version="1.0.0",
    description="Guided per-wheel RF scan of TPMS sensors with signal collision detection",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="tpms-scan developers",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=requirements,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Communications :: Ham Radio",
        "Topic :: System :: Hardware",
    ],
    python_requires=">=3.8",
    keywords="tpms, tire pressure, rtl_433, sdr, sensors, automotive",
    entry_points={
        "console_scripts": [
            "tpms-scan=tpms_scan.cli:main",
        ],
    },
)
