#!/usr/bin/env python

from setuptools import setup, find_namespace_packages

setup(
    name="proton-vpn-federation",
    version="0.1.0",
    description="Proton VPN connection orchestrator for federated VPN servers.",
    author="Proton AG",
    author_email="opensource@proton.me",
    url="https://github.com/ProtonVPN/python-proton-vpn-federation",
    packages=find_namespace_packages(include=[
        "proton.vpn.federation*",
    ]),
    include_package_data=True,
    install_requires=["pydantic>=2", "packaging"],
    extras_require={
        "networkmanager": ["pygobject"],
        "test": ["pytest", "pytest-cov", "pytest-asyncio"],
        "development": ["wheel", "pytest", "pytest-cov", "pytest-asyncio", "flake8", "pylint"]
    },
    python_requires=">=3.10",
    license="GPLv3",
    platforms="OS Independent",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python",
        "Topic :: Security",
    ]
)
