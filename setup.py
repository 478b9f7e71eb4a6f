# setup.py
from setuptools import setup, find_packages

setup(
    name="novel-scout",
    version="0.1.0",
    description="Web novel to EPUB downloader with bounded-concurrency chapter fetching",
    packages=find_packages(exclude=("tests", "tests.*")),  # находит novel_scout и подпакеты
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "EbookLib>=0.18",
        "Jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "novel-scout=novel_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
