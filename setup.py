from setuptools import setup, find_packages

setup(
    name="youtube_tldr",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "requests>=2.31.0",
        "urllib3>=2.0.0",
        "langchain-core>=0.2.0",
        "langchain-openai>=0.1.0",
        "groq>=0.9.0",
        "pydantic>=2.0.0",
        "python-dotenv>=1.0.0",
        "colorlog>=6.7.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "youtube-tldr=youtube_tldr.main:main",
        ],
    },
    python_requires=">=3.9",
    description="TLDR and timestamped chapters for YouTube videos with multi-strategy transcript fetching",
    author="Venkatesh Murugadas",
    url="https://github.com/VenkateshDas/youtube_analysis",
)
