# setup.py
from setuptools import setup, find_packages

setup(
    name="error_scout",
    version="0.1.0",
    description="Headless-browser crawler reporting broken links, 404 resources and console errors of a site project",
    packages=find_packages(include=["error_scout", "error_scout.*"]),
    package_data={"error_scout": ["templates/*.j2"]},
    install_requires=[
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "jinja2>=3.1",
        "playwright>=1.40",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "aiohttp>=3.9",
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["error-scout=error_scout.cli:cli"],
    },
    python_requires=">=3.11",
)
