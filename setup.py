"""Set-up file for multifluid for installations using ``pip install .``"""
from setuptools import find_packages, setup


with open("requirements.txt") as f:
    required = f.read().splitlines()


setup(
    name="multifluid",
    version="0.3.0",
    license="GPL",
    keywords=["thermodynamics equation of state helmholtz energy mixtures gerg"],
    install_requires=required,
    extras_require={
        "testing": ["pytest", "scipy", "sympy"],
    },
    description="Residual Helmholtz energy of multi-parameter mixture models",
    platforms=["Linux", "Windows", "Mac OS-X"],
    package_data={
        "multifluid": ["py.typed"],
    },
    packages=find_packages("src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    zip_safe=False,
)
