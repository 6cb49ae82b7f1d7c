from setuptools import find_packages, setup

from amphomeus.version import AMPHOMEUS_VERSION

long_description = ""
with open("README.md") as ifp:
    long_description = ifp.read()

setup(
    name="amphomeus",
    version=AMPHOMEUS_VERSION,
    author="Amphomeus",
    description="Amphomeus: travel journals with photos, videos and tags",
    long_description=long_description,
    long_description_content_type="text/markdown",
    platforms="all",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Natural Language :: English",
        "Programming Language :: Python",
        "Topic :: Software Development :: Libraries",
    ],
    python_requires=">=3.8",
    packages=find_packages(exclude=["tests", "tests.*"]),
    zip_safe=False,
    install_requires=[
        "cloudinary>=1.30.0",
        "fastapi>=0.100.0",
        "httptools",
        "psycopg2-binary>=2.9.1",
        "pydantic>=2.0",
        "python-multipart",
        "requests",
        "sqlalchemy>=1.4.26",
        "uvicorn>=0.15.0",
    ],
    extras_require={
        "dev": ["alembic", "black", "isort", "mypy", "types-requests"],
        "test": ["httpx", "pytest"],
        "distribute": ["setuptools", "twine", "wheel"],
    },
    entry_points={
        "console_scripts": ["amphomeus-journals=amphomeus.journal.cli:main"],
    },
)
