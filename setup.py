import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="seed_predictor",
    version="0.5.0",
    author="Seed Predictor Team",
    author_email="",
    description="Seed-derived feature vectors scored on a PyTorch backend with a simulated fallback",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(include=["seed_predictor", "seed_predictor.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
    ],
    python_requires=">=3.8",
    license="MIT",
    install_requires=[
        "torch>=1.9.0",
        "numpy>=1.21.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "seed-predictor=seed_predictor.cli:main",
        ],
    },
)
