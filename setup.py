"""
Setup script for the skill-engine project.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_packages

setup(
    name="skill-engine",
    version="0.1.0",
    packages=find_packages(include=["skill_engine", "skill_engine.*"]),
    python_requires=">=3.11",
    install_requires=[
        "pymongo>=4.6",
        "python-dotenv>=1.0",
        "pydantic>=2.5",
        "tenacity>=8.2",
        "typing_extensions>=4.8",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
)
