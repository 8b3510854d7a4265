from setuptools import setup, find_namespace_packages

setup(
    name="ficsync",
    version="0.1.0",
    packages=find_namespace_packages(include=['ficsync*']),
    include_package_data=True,
    install_requires=[
        "Click",
        "SQLAlchemy>=2.0",
        "beautifulsoup4",
        "requests",
        "pydantic>=2",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "ficsync=ficsync.cli.main:main",
        ],
    },
)
