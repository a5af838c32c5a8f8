from setuptools import setup, find_namespace_packages

with open("requirements.txt", "r") as f:
    requirements = f.read().splitlines()

setup(
    name="chat_relay",
    version="1.0",
    packages=find_namespace_packages(include=["chat_relay", "chat_relay.*"]),
    install_requires=requirements,
    extras_require={
        "test": ["pytest", "pytest-asyncio"],
    },
    entry_points={
        "console_scripts": ["chat-relay=chat_relay.main:run"],
    },
)
