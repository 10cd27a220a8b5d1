"""Setup script for Uptime Kuma MCP Server."""

from setuptools import setup, find_packages
import os

# Read the README file
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "Uptime Kuma MCP Server - Model Context Protocol server for Uptime Kuma monitor management"

TEST_REQUIREMENTS = [
    'pytest>=7.4.0',
    'pytest-asyncio>=0.23.0',
    'pytest-cov>=4.1.0',
    'requests-mock>=1.11.0',
]

setup(
    name='kuma-mcp-server',
    version='1.0.0',
    description='MCP (Model Context Protocol) server for Uptime Kuma monitor management',
    long_description=read_readme(),
    long_description_content_type='text/markdown',
    author='Uptime Kuma MCP Server Team',
    author_email='dev@example.com',

    packages=find_packages(exclude=['tests', 'tests.*']),
    py_modules=['mcp_kuma_server'],
    python_requires='>=3.11',
    install_requires=[
        'mcp>=1.20.0,<2',
        'python-socketio[asyncio-client]>=5.11.0',
        'requests>=2.31.0',
        'pydantic>=2.0.0',
        'click>=8.1.0',
        'python-dotenv>=1.0.0',
        'PyYAML>=6.0',
        'tomli>=2.0.0',
    ],

    extras_require={
        'test': TEST_REQUIREMENTS,
        'dev': TEST_REQUIREMENTS + [
            'black>=23.0.0',
            'flake8>=6.0.0',
            'mypy>=1.5.0',
        ],
    },

    entry_points={
        'console_scripts': [
            'kuma-mcp-server=kuma_mcp_server.cli:cli',
        ],
    },

    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: System Administrators',
        'Topic :: System :: Monitoring',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],

    keywords='uptime-kuma monitoring mcp model-context-protocol socketio',

    include_package_data=True,
    zip_safe=False,
)
