"""Setup script for the meetupcal recurring-event materialization engine."""

from pathlib import Path

from setuptools import find_packages, setup

# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Read requirements, splitting test tooling into the dev extra
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = []
dev_requirements = []

if requirements_file.exists():
    for line in requirements_file.read_text().splitlines():
        line = line.strip()
        # Skip empty lines and comments
        if not line or line.startswith("#"):
            continue

        if "pytest" in line:
            dev_requirements.append(line)
        else:
            requirements.append(line)

setup(
    name="meetupcal",
    version="0.1.0",
    description="Recurring-event materialization engine for meetup calendars",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Meetupcal Team",
    # Package configuration
    packages=find_packages(exclude=["tests*", "docs*"]),
    include_package_data=True,
    # Dependencies
    install_requires=requirements,
    extras_require={
        "dev": dev_requirements,
        "test": dev_requirements,
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Scheduling",
    ],
    keywords="calendar recurring-events occurrences meetup scheduling",
    zip_safe=False,
)
