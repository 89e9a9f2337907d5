from setuptools import setup, find_packages

setup(
    name="skillmarket",
    version="0.1",
    packages=find_packages(include=["skillmarket", "skillmarket.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        "bcrypt<4.1",  # passlib 1.7 cannot read newer bcrypt releases
        "python-multipart",
        "pydantic[email]>=2",
        "pydantic-settings",
        "python-dotenv",
        "alembic",
        "httpx",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
