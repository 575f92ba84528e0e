# setup.py
from setuptools import setup, find_packages

setup(
    name="crawl_mapper",
    version="0.1.0",
    description="Time-bounded sitemap crawler that finds pages containing a search term",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"crawl_mapper.report": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "click>=8.1",
        "Jinja2>=3.1",
        "lxml>=4.9",
        "pydantic>=2.0",
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
            "crawl-mapper=crawl_mapper.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
