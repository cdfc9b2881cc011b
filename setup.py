from setuptools import find_packages, setup

setup(
    name="r12b",
    version="0.1.0",
    description="Decoder for R12B packed 12-bit RGB video",
    packages=find_packages(where="python"),
    package_dir={"": "python"},
    python_requires=">=3.8",
    install_requires=["numpy"],
    extras_require={
        "test": ["pytest"],
    },
)
