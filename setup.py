from setuptools import setup, find_packages

setup(
    name="rebalance-calculator",
    version="1.0.0",
    author="Portfolio Rebalancer Team",
    description="Strategy-pluggable portfolio rebalance calculation engine",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "rebalance_calculator": ["py.typed"],
        "app_config": ["py.typed"],
    },
    install_requires=[
        "pydantic==2.11.7",
        "PyYAML>=6.0",
        "typer>=0.12",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "rebalance-calculator=rebalance_calculator.cli:app",
        ],
    },
    python_requires=">=3.11",
)
