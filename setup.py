# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- UI & REACTIVE ---
    # Run this First to install FletX and Flet
    # uv pip install FletXr[dev] --pre

    # --- CONFIG & MODELS ---
    "pydantic>=2.5.0",
    "python-dotenv>=1.0.0",
    "pyyaml>=6.0.0",

    # --- NETWORK ---
    "httpx>=0.27.0",

    # --- TESTS---
    "pytest-asyncio==1.3.0",
    "pytest"
]

setup(
    name="launchpad",
    version="0.1.0",
    description="Launchpad|App shell with authenticated networking",
    packages=find_packages(include=["launchpad", "launchpad.*"]),
    package_data={"launchpad.shared.config": ["settings/*.yaml"]},
    include_package_data=True,
    install_requires=install_requires,
    entry_points={"console_scripts": ["launchpad=launchpad.app.main:run"]},
    python_requires=">=3.11",
)
