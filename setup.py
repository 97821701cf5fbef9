"""Setup configuration for anime_quotes package."""
from setuptools import setup, find_packages

setup(
    name="anime_quotes",
    version="0.1.0",
    description="Anime quote search dataset enrichment (sentiment, tags, emotions)",
    author="Your Name",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pandas>=2.2.0",
        "duckdb>=0.10.0",
        "openai>=1.12.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "pytest-cov>=4.1.0",
            "httpx>=0.23.0",
            "black>=24.0.0",
            "flake8>=7.0.0",
            "mypy>=1.8.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "analyze-quotes=anime_quotes.nlp.analyze_quotes:main",
            "add-emotions=anime_quotes.nlp.add_emotions:main",
        ]
    },
)
