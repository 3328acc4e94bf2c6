"""
location: setup.py


"""
from setuptools import setup, find_packages

setup(
    name="hoop-hub",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "duckdb>=1.1.0",
        "httpx>=0.28.1",
        "prometheus-client>=0.20.0",
        "pydantic>=2.11.3",
        "python-dotenv>=1.1.0",
        "rich>=10.14.0,<14",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "mypy>=1.0.0",
            "black>=23.0.0",
            "isort>=5.0.0",
            "invoke>=2.2.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "hoop-hub = hoop_hub.__main__:main",
        ],
    },
)
