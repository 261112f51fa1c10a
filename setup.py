from setuptools import setup, find_packages

setup(
    name="practice-exam",
    version="0.1.0",
    description="Timed multiple-choice practice exams with negative marking and AI study help",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "practice-exam=practice_exam.cli:main",
        ],
    },
)
