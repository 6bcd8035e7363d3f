# setup.py
from setuptools import setup, find_packages

setup(
    name="lispy",
    version="0.0.10",
    description="Evaluator core for a small Lisp with Q-expressions, curried closures and error values",
    packages=find_packages(include=["lispy", "lispy.*"]),
    python_requires=">=3.10",
    install_requires=[],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["lispy=lispy.repl:main"],
    },
    zip_safe=False,
)
