"""setuptools setup for FocusLite.

Install for development:
    pip install -e .[test]
    python -m focuslite
"""

from setuptools import setup, find_packages

setup(
    name="FocusLite",
    version="0.1.0",
    description="Focus/break countdown timer with persisted cycles",
    packages=find_packages(include=["focuslite", "focuslite.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.5",
        "SQLAlchemy>=2.0",
        "numpy>=1.24",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["focuslite=focuslite.__main__:main"],
    },
)
