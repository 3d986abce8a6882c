from setuptools import setup
from serve.const import VERSION_STR, DESCRIPTION

setup(
    name="serve",
    version=VERSION_STR,
    python_requires='>=3.10',
    description=DESCRIPTION,
    author="serve contributors",
    packages=["serve"],
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
            "requests",
        ],
    },
    entry_points={
        "console_scripts": [
            "serve = serve:main",
        ],
    },
    license="MIT",
    platforms="any",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
