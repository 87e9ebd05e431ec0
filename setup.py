"""Setup the library."""
from __future__ import annotations

from setuptools import setup

setup(
    name="uri-tools",
    version="1.0.0",
    description="Immutable URI builder and query parameters",
    license="MIT",
    python_requires=">=3.9",
    packages=["uri_tools"],
    install_requires=[
        "multidict >= 6.0",
        "yarl >= 1.10",
    ],
    extras_require={
        "tests": [
            "pytest",
            "ruff",
        ],
    },
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Topic :: Internet :: WWW/HTTP",
    ],
)
