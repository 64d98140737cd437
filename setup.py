"""
Setup script for rate_monitor_pipeline package.
"""

from setuptools import setup, find_packages

setup(
    name="rate-monitor-pipeline",
    version="1.0.0",
    description="Analyse des intervalles de prix stables et calcul des prix dérivés pour la publication tarifaire",
    author="RateMonitor Team",
    packages=find_packages(include=["rate_monitor_pipeline", "rate_monitor_pipeline.*"]),
    install_requires=[
        "pandas>=2.0.0",
        "numpy>=1.24.0",
        "openpyxl>=3.1.0",
        "python-dotenv>=1.0.0",
        "python-dateutil>=2.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    python_requires=">=3.9",
)
