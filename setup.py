# setup.py
from setuptools import setup, find_packages

setup(
    name="kb_scout",
    version="0.1.0",
    description="In-memory knowledge index built by crawling documentation sites",
    packages=find_packages(include=["kb_scout", "kb_scout.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "openai>=1.0",
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
        "console_scripts": ["kb-scout=kb_scout.cli:cli"],
    },
    python_requires=">=3.11",
)
