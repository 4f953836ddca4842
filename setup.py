"""
DocVault setup.py — Package configuration and CLI entry point.
"""

from setuptools import find_packages, setup

setup(
    name="docvault",
    version="1.0.0",
    description="DocVault — folder tree & document catalog store",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "docvault=docvault.cli:main",
        ],
    },
    install_requires=[
        "pydantic>=2.5",
        "networkx>=3.2",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
)
