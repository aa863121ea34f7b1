from setuptools import setup, find_packages

setup(
    name="infrastructure-base",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "sqlalchemy>=2.0",
        "pydantic>=2.0",
        "pydantic-settings",
        "python-dotenv",
    ],
    extras_require={
        "postgres": ["psycopg2-binary"],
        "mssql": ["pyodbc"],
        "test": ["pytest", "pytest-cov"],
    },
)
