"""
Setup script for the gamelift-server-sdk package.

The public API (server.py, models.py, errors.py) and the internal
modules (_agent, _session, _push, _shared) ship as plain Python source.
"""

from setuptools import setup, find_packages

setup(
    name="gamelift-server-sdk",
    version="3.4.0",
    description="GameLift Server SDK - connect a game server process to the local GameLift agent",
    author="Game Server SDK Team",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
        "python-socketio[client]>=5.9.0",
        "protobuf>=4.25.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
        "dev": [
            "pytest>=7.4",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "gamelift-demo-server=gamelift_server.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Games/Entertainment",
    ],
)
