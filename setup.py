"""
Setup script for wordbook.

Wordbook is the spaced-repetition review engine behind a vocabulary
flashcard app. It provides:

1. A fixed 8-level forgetting-curve ladder for scheduling reviews
2. Transactional SQLite persistence of per-word review state
3. A multi-cadence reminder checker (15 min / hourly / daily / weekly / monthly)
4. A question/reveal/commit review session

The 'wordbook' command is a small terminal front end over the engine.
"""

from setuptools import find_packages, setup

setup(
    name="wordbook",
    version="1.0.0",
    description="Spaced-repetition review engine for vocabulary flashcards",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Database
        "sqlalchemy>=2.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
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
            "wordbook=wordbook.cli.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="learning spaced-repetition flashcards vocabulary",
)
