import setuptools

setuptools.setup(
    name="simple-form-webapp",
    version="0.1.0",

    description="CDK app for an IP allow-listed static site and survey API",
    author="author",

    packages=setuptools.find_packages(include=["site_infra", "site_infra.*", "functions", "functions.*"]),
    py_modules=["app"],

    install_requires=[
        "aws-cdk-lib>=2.160.0,<3.0.0",
        "constructs>=10.0.0,<11.0.0",
        "python-json-logger>=3.1.0",
    ],

    extras_require={
        "test": [
            "pytest>=8.0",
        ],
    },

    python_requires=">=3.9",

    classifiers=[
        "Development Status :: 4 - Beta",

        "Intended Audience :: Developers",

        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",

        "Topic :: Software Development :: Code Generators",
        "Topic :: Utilities",

        "Typing :: Typed",
    ],
)
