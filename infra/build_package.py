"""
Builds the publishable function package.

Copies the function app sources into a clean output directory and vendors
requirements.txt into .python_packages, the layout the Functions host loads
when the package is mounted through WEBSITE_RUN_FROM_PACKAGE.

Usage:
    python -m infra.build_package --output publish
"""
import argparse
import logging
import os
import shutil
import subprocess
import sys

PACKAGE_FILES = ["function_app.py", "host.json", "requirements.txt"]
PACKAGE_DIRS = ["timeapi"]
SITE_PACKAGES = os.path.join(".python_packages", "lib", "site-packages")


def build_package(source_dir: str, output_dir: str, install: bool = True) -> str:
    source_dir = os.path.abspath(source_dir)
    output_dir = os.path.abspath(os.path.join(source_dir, output_dir))

    if output_dir == source_dir:
        raise ValueError("Output directory must differ from the source directory")

    if os.path.isdir(output_dir):
        shutil.rmtree(output_dir)
    os.makedirs(output_dir)

    for name in PACKAGE_FILES:
        src = os.path.join(source_dir, name)
        if not os.path.isfile(src):
            raise FileNotFoundError(f"Missing package file: {src}")
        shutil.copy2(src, os.path.join(output_dir, name))

    for name in PACKAGE_DIRS:
        shutil.copytree(
            os.path.join(source_dir, name),
            os.path.join(output_dir, name),
            ignore=shutil.ignore_patterns("__pycache__", "*.pyc"),
        )

    if install:
        target = os.path.join(output_dir, SITE_PACKAGES)
        logging.info(f"Installing requirements into {target}")
        subprocess.run(
            [sys.executable, "-m", "pip", "install", "--target", target,
             "-r", os.path.join(output_dir, "requirements.txt")],
            check=True,
        )

    logging.info(f"Function package written to {output_dir}")
    return output_dir


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Build the publishable function app package.")
    parser.add_argument("--source", type=str, default=".", help="Function app source directory.")
    parser.add_argument("--output", type=str, default="publish", help="Output directory, relative to --source.")
    parser.add_argument("--skip-install", action="store_true", help="Do not vendor requirements.txt.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    build_package(args.source, args.output, install=not args.skip_install)


if __name__ == "__main__":
    main()
