# setup.py
from setuptools import setup, find_packages

setup(
    name="page_crawler",
    version="0.1.0",
    description="Bounded breadth-first web crawler PageCrawler",
    packages=find_packages(include=["page_crawler", "page_crawler.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "pydantic>=2.5",
        "pymongo>=4.6",
        "python-dotenv>=1.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "page-crawler=page_crawler.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
