"""Setup script for the linkwatch package."""

from setuptools import find_packages, setup

setup(
    name="linkwatch",
    version="0.1.0",
    description="Host network connectivity watchdog with reboot on sustained outage",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pyyaml",
        "python-dotenv",
        "paho-mqtt>=2.0.0",
        "rich",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "isort",
            "mypy",
        ],
    },
    entry_points={
        "console_scripts": [
            "linkwatch=linkwatch.network_monitor:main",
        ],
    },
)
