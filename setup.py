from setuptools import setup, find_packages

setup(
    name="fleet-status-board",
    version="0.1.0",
    description="Fleet status board backend",
    package_dir={"": "backend"},
    packages=find_packages(where="backend"),
    install_requires=[
        "httpx>=0.23",
        "fastapi>=0.95",
        "uvicorn>=0.22",
        "python-dotenv>=1.0",
        "slowapi>=0.1.8",
        "folium>=0.14",
        # python-opensky, geopy, dateutil, bs4, pywebpush removed – no live feeds
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "pytest-httpx>=0.23",
        ],
        "lint": [
            "black>=23.0",
            "flake8>=6.0",
        ],
    },
)
