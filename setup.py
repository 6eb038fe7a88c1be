from pathlib import Path

from setuptools import setup, find_packages

readme = Path(__file__).parent / "README.md"

setup(
    name="sop-writer",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "aiohttp>=3.8.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=0.19.0",
        "beautifulsoup4>=4.9.0",
        "pypdf>=3.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    python_requires=">=3.9",
    author="Christo Strydom",
    author_email="christo.strydom@gmail.com",
    description="Statement-of-Purpose prompt and draft generation pipeline",
    long_description=readme.read_text() if readme.exists() else "",
    long_description_content_type="text/markdown",
    entry_points={
        "console_scripts": [
            "sop-writer=sop_writer.services.processing.main:main",
        ],
    },
)
