from pathlib import Path

from setuptools import find_packages, setup

version = (Path(__file__).parent / "exemplar/VERSION").read_text("ascii").strip()


install_requires = [
    "numpy>=1.21",
    "parsel>=1.5.0",
    "w3lib>=1.17.0",
]
extras_require = {
    "test": ["pytest>=7.0", "testfixtures<12"],
}


setup(
    name="Exemplar",
    version=version,
    description="Semi-automated extraction of records from HTML pages, "
    "driven by one annotated example record",
    long_description=open("README.rst", encoding="utf-8").read(),
    license="BSD",
    packages=find_packages(include=("exemplar", "exemplar.*")),
    package_data={"exemplar": ["VERSION"]},
    include_package_data=True,
    zip_safe=False,
    entry_points={"console_scripts": ["exemplar = exemplar.cmdline:execute"]},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Text Processing :: Markup :: HTML",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.9",
    install_requires=install_requires,
    extras_require=extras_require,
)
