from setuptools import find_packages, setup

setup(
    name="interview-stt",
    version="1.0.0",
    description="Resilient multi-provider speech-to-text for recorded interview answers",
    packages=find_packages(include=["interview_stt", "interview_stt.*"]),
    install_requires=[
        "httpx>=0.25",
        "pydantic>=2.0",
        "python-dotenv>=1.0",
        "rich>=13.0",
        "deepgram-sdk>=3.4,<4",
        "elevenlabs>=1.0",
        "openai>=1.0",
        "google-cloud-speech>=2.20",
        "azure-cognitiveservices-speech>=1.30",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "respx>=0.20",
        ],
    },
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "interview-stt=interview_stt.cli:main",
        ],
    },
)
