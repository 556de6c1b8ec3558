from setuptools import setup, find_packages

setup(
    name="prompt-compiler",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    install_requires=[
        "pyyaml>=6.0.1",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.3",
        ],
    },
    entry_points={
        "console_scripts": [
            "prompt-compiler=main:main",
        ],
    },
    python_requires=">=3.10",
    description="Store named prompt templates and compile them with variables, conditionals and loops",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
