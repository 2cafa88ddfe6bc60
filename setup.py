#!/usr/bin/env python3
"""
Setup script for dmgctl; package metadata lives in pyproject.toml.
"""

import sys

from setuptools import find_packages, setup

try:
    import tomllib

    with open("pyproject.toml", "rb") as f:
        pyproject_data = tomllib.load(f)

    poetry = pyproject_data["tool"]["poetry"]

    install_requires = []
    for dep, version_spec in poetry["dependencies"].items():
        if dep == "python":
            continue
        if isinstance(version_spec, str):
            install_requires.append(f"{dep}{version_spec}")
        else:
            install_requires.append(dep)

    tests_require = [
        f"{dep}{spec}" if isinstance(spec, str) else dep
        for dep, spec in poetry.get("group", {}).get("dev", {}).get("dependencies", {}).items()
    ]

    entry_points = {
        "console_scripts": [f"{name}={target}" for name, target in poetry.get("scripts", {}).items()]
    }

    setup(
        name=poetry["name"],
        version=poetry["version"],
        description=poetry["description"],
        author=poetry["authors"][0] if isinstance(poetry["authors"], list) else poetry["authors"],
        license=poetry["license"],
        packages=find_packages(where="src"),
        package_dir={"": "src"},
        package_data={"dmgctl": ["resources/templates/*.template"]},
        install_requires=install_requires,
        extras_require={"test": tests_require},
        entry_points=entry_points,
        python_requires=">=3.11,<4.0",
        include_package_data=True,
        zip_safe=False,
    )

except Exception as e:
    print(f"Error reading pyproject.toml: {e}")
    sys.exit(1)
