import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="toolkits",
    version="0.1.0",
    author="Lackoxygen",
    description="An ordered key/value Collection with a value-style operation algebra, plus key-path, decimal and system helpers.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(include=["toolkits", "toolkits.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    install_requires=[
        "numpy",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    python_requires='>=3.10',
)
