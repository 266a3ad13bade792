"""
Setup script for the Retro Meeting server
"""
from setuptools import setup, find_packages

setup(
    name="retro_meeting",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10,<3.14",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "sqlalchemy>=2.0",
        "pydantic>=2.5",
        "python-jose[cryptography]>=3.3",
        "strawberry-graphql[fastapi]>=0.220",
        "stripe>=8.0",
        "boto3>=1.34",
        "psycopg2-binary>=2.9",
        "python-dotenv>=1.0",
        "alembic>=1.13",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "httpx>=0.27",
        ],
    },
)
