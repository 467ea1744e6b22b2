#!/usr/bin/env python3
"""
Setup script for NameCom Manager package.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="namecom-manager",
    version="1.0.0",
    author="NameCom Manager Team",
    author_email="team@example.com",
    description="Declarative DNS record, nameserver and DNSSEC management for name.com",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/example/namecom-manager",
    packages=find_packages(exclude=["features", "features.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Internet :: Name Service (DNS)",
        "Topic :: System :: Systems Administration",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "test": ["behave>=1.2.6", "pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "namecom-manager=namecom_manager.cli.main:main",
        ],
    },
    include_package_data=True,
    package_data={
        "namecom_manager": ["*.yaml", "*.yml"],
    },
)
