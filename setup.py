from setuptools import find_packages, setup

package_list = find_packages(
  include=[
    "changelog_env",
    "changelog_env.*",
  ]
)

setup(
  name="changelog-env",
  version="0.1.0",
  description="Build step exposing a build's changelog to later steps as $CHANGELOG",
  python_requires=">=3.11",
  packages=package_list,
  include_package_data=True,
  install_requires=[
    "pyyaml",
    "pydantic",
    "python-dotenv",
    "platformdirs",
    "GitPython",
  ],
  extras_require={
    "dev": ["pytest", "pytest-cov"],
  },
  entry_points={
    "console_scripts": [
      "changelog-env=changelog_env.main:main",
    ],
  },
)
