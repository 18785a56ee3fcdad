from setuptools import setup, find_packages

setup(
    name="kite-rebalancer",
    version="1.0.0",
    author="Kite Rebalancer Team",
    description="Equal-value portfolio rebalancer for Zerodha Kite Connect",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "broker_connector_base": ["py.typed"],
        "rebalance_calculator": ["py.typed"],
        "kite_connector": ["py.typed"],
    },
    install_requires=[
        "pydantic==2.11.7",
        "PyYAML==6.0.2",
        "kiteconnect>=5.0.1",
        "click>=8.1",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "kite-rebalance=kite_connector.cli:main",
        ],
    },
    python_requires=">=3.11",
)
