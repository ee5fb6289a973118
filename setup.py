"""
MindBridge build configuration.

Usage:
    pip install -e .            # Library and HTTP API
    pip install -e ".[test]"    # Plus test tooling
"""

from setuptools import setup, find_packages

setup(
    name="mindbridge",
    version="0.1.0",
    description="Conversation memory and continuity for a mental-wellness companion",
    packages=find_packages(include=["mindbridge", "mindbridge.*"]),
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "loguru>=0.7",
        "aiosqlite>=0.19",
        "numpy>=1.24",
        "fastapi>=0.100",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.24",
        ],
    },
    python_requires=">=3.11",
)
