from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="ask-ai",
    version="0.1.0",
    description="Turn natural-language requests into screened shell commands using an LLM API",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Environment :: Console",
        "Topic :: Utilities",
    ],
    python_requires=">=3.8",
    install_requires=[
        "openai>=1.0.0",
        "google-generativeai>=0.3.0",
        "google-api-core>=2.0.0",
        "rich>=12.0.0",
        "toml>=0.10.2",
        "python-dotenv>=0.19.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "ask=ask.main:main",
        ],
    },
)
