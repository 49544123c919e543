#!/usr/bin/env python3

# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Setup configuration for the docindex packages.

Installs two packages:
- docindex_common: scraping, link discovery, bulk indexing into Chroma,
  filter building and the DynamoDB gateway
- docindex_mcp: the MCP tool server (console script ``docindex-mcp``)
"""

from setuptools import find_packages, setup

setup(
    name="docindex-mcp",
    version="0.1.0",
    description="MCP server for indexing and searching library documentation",
    packages=find_packages(include=["docindex_common", "docindex_common.*", "docindex_mcp", "docindex_mcp.*"]),
    python_requires=">=3.11",
    install_requires=[
        "boto3>=1.34.0",
        # Scraping dependencies
        "httpx>=0.27.0",
        "beautifulsoup4>=4.12.0",
        "lxml>=5.0.0",
        # Indexing dependencies
        "chromadb>=0.5.0",
        "langchain-text-splitters>=0.2.0",
        # Tool server
        "mcp>=1.2.0,<2",
        "pydantic>=2.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0.0",
            "pytest-asyncio>=0.23.0",
            "respx>=0.21.0",
            "moto[dynamodb]>=5.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "docindex-mcp=docindex_mcp.server:main",
        ],
    },
    author="Development Team",
    license="MIT-0",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
)
