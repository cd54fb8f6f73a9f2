from setuptools import setup, find_packages

# Read requirements from requirements.txt
with open('requirements.txt') as f:
    requirements = f.read().splitlines()

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="matte-refine",
    version="0.1.0",
    packages=find_packages(include=["matte_refine", "matte_refine.*"]),
    install_requires=requirements,
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "matte-refine=matte_refine.main:main",
        ],
    },
    description="Alpha matte refinement and smoothing for segmentation masks",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    keywords="alpha-matte, segmentation, background-removal",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Multimedia :: Graphics",
        "Development Status :: 4 - Beta",
    ],
    python_requires=">=3.11",
)
