"""Setup script for the YouTube subscriptions and playlists toolkit."""

from setuptools import setup, find_namespace_packages

setup(
    name="youtubetoolkit",
    version="0.1.0",
    description="Manage YouTube subscriptions and playlists from the command line",
    author="Micah Alpern",
    author_email="malpern@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "google-api-python-client>=2.0.0",
        "google-auth>=2.0.0",
        "google-auth-httplib2>=0.1.0",
        "google-auth-oauthlib>=0.4.0",
        "httplib2>=0.19.0",
        "python-dotenv>=0.19.0",
        "tqdm>=4.0.0",
        "wcwidth>=0.2.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0,<9"],
    },
    entry_points={
        "console_scripts": [
            "youtubetoolkit=youtubetoolkit.cli:main",
        ]
    },
)
