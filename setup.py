# File: setup.py

"""
Setup configuration for svmredlight: validated training and classification for linear SVMs
"""

import os
from setuptools import setup, find_packages

# Read long description from README
def read_long_description():
    """Read the README file for long description."""
    here = os.path.abspath(os.path.dirname(__file__))
    readme_path = os.path.join(here, "README.md")

    if os.path.exists(readme_path):
        with open(readme_path, "r", encoding="utf-8") as fh:
            return fh.read()
    else:
        return "svmredlight: validated training and classification for linear SVM-light models"

# Read requirements
def read_requirements():
    """Read requirements from requirements.txt."""
    here = os.path.abspath(os.path.dirname(__file__))
    requirements_path = os.path.join(here, "requirements.txt")

    requirements = []
    if os.path.exists(requirements_path):
        with open(requirements_path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if line and not line.startswith("#"):
                    requirements.append(line)
    else:
        # Fallback to minimal requirements
        requirements = [
            "numpy>=1.21.0",
            "scipy>=1.7.0",
            "scikit-learn>=1.0.0",
            "joblib>=1.1.0",
        ]

    return requirements

# Package metadata
PACKAGE_NAME = "svmredlight"
VERSION = "0.3.0"
DESCRIPTION = "Validated training and classification for linear SVM-light models"
LICENSE = "MIT"

# Classifiers for PyPI
CLASSIFIERS = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "License :: OSI Approved :: MIT License",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.8",
    "Programming Language :: Python :: 3.9",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

# Keywords for PyPI search
KEYWORDS = [
    "machine learning", "support vector machines", "svm", "svm-light",
    "text classification", "sparse features"
]

# Test dependencies
TEST_REQUIREMENTS = [
    "pytest>=6.0.0",
    "pytest-cov>=2.0.0",
]

# Development dependencies
DEV_REQUIREMENTS = TEST_REQUIREMENTS + [
    "black>=22.0.0",
    "flake8>=4.0.0",
    "isort>=5.10.0",
    "mypy>=0.900",
]

setup(
    name=PACKAGE_NAME,
    version=VERSION,
    description=DESCRIPTION,
    long_description=read_long_description(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests*", "docs*", "examples*"]),
    classifiers=CLASSIFIERS,
    keywords=" ".join(KEYWORDS),
    license=LICENSE,
    python_requires=">=3.8",

    # Dependencies
    install_requires=read_requirements(),

    # Optional dependencies
    extras_require={
        "dev": DEV_REQUIREMENTS,
        "test": TEST_REQUIREMENTS,
    },

    # Console scripts
    entry_points={
        "console_scripts": [
            "svmredlight-train=svmredlight.scripts.train_svmlight:main",
            "svmredlight-classify=svmredlight.scripts.classify_svmlight:main",
        ],
    },

    zip_safe=False,
    platforms=["any"],
)
