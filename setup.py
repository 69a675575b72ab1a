"""
Setup script for study-engine.

study-engine is the adaptive core of a self-study companion:

1. Proficiency - Score a level assessment into one of five tiers
2. Weakness Radar - Rank concepts by review urgency
3. Routine - Interval-ladder reviews, daily streaks and study reminders

The 'study-engine' command exposes every component over JSON documents.
"""

from setuptools import find_packages, setup

setup(
    name="study-engine",
    version="1.0.0",
    description="Adaptive proficiency, weakness and review scheduling engine for self-study",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Right Learning",
    packages=find_packages(include=["study_engine", "study_engine.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
        # IANA zones on platforms without a system database
        "tzdata>=2023.3",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "study-engine=study_engine.cli.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition streak proficiency education",
)
