#!/usr/bin/env python3
"""Setup script for the Basecamp to Redmine script generator.
"""

from setuptools import find_packages, setup

# Read requirements from requirements.txt file
with open("requirements.txt") as f:
    requirements = f.read().splitlines()

# Remove any comments or blank lines from requirements
requirements = [line for line in requirements if line and not line.startswith("#")]

setup(
    name="basecamp-to-redmine",
    version="0.1.0",
    description="Generates Redmine import scripts from Basecamp backups",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.12,<4.0",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=8.0"],
    },
    license="MIT",  # SPDX license identifier
    entry_points={
        "console_scripts": [
            "basecamp2redmine=basecamp2redmine.main:main",
            "basecamp2redmine-import=basecamp2redmine.main:import_main",
            "basecamp2redmine-undo=basecamp2redmine.main:undo_main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
)
