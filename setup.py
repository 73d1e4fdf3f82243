import pathlib
from setuptools import setup

main_ns = {}
ver_path = pathlib.Path(__file__).parent / "splineiges" / "version.py"
with open(ver_path) as ver_file:
    exec(ver_file.read(), main_ns)

# The directory containing this file
HERE = pathlib.Path(__file__).parent

# The text of the README file
with open((HERE / "README.md"), encoding="utf-8") as f:
    README = f.read()

# This call to setup() does all the work
setup(
    name="splineiges",
    version=main_ns['__version__'],
    description="Python library for writing fitted B-spline surfaces to IGES files",
    long_description=README,
    long_description_content_type="text/markdown",
    license="MIT",
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
    packages=["splineiges", "splineiges.core", "splineiges.iges", "splineiges.utils", "splineiges.examples"],
    package_data={"splineiges": ["settings/*.json"], "splineiges.examples": ["data/*.json"]},
    include_package_data=True,
    install_requires=["numpy"],
    extras_require={"test": ["pytest"]},
)
