#!/usr/bin/env python3
"""Test runner script for jira-agent."""

import sys
import subprocess
from pathlib import Path

SUITES = {
    "unit": ["-m", "unit"],
    "integration": ["-m", "integration"],
    "dedup": ["-k", "detector or scorer or candidate or keywords or recommendations or presentation"],
    "retry": ["-k", "retry or errors"],
}


def main():
    """Run tests with pytest."""
    project_root = Path(__file__).parent

    # Check if pytest is available
    try:
        import pytest  # noqa: F401
    except ImportError:
        print("❌ pytest is not installed. Please install it with:")
        print("   pip install -e '.[test]'")
        sys.exit(1)

    cmd = [
        sys.executable,
        "-m",
        "pytest",
        str(project_root / "tests"),
        "-v",
        "--tb=short",
        "--color=yes",
    ]

    # Narrow to one suite if requested
    if len(sys.argv) > 1:
        suite = SUITES.get(sys.argv[1])
        if suite is None:
            print(f"❌ Unknown suite '{sys.argv[1]}'. Choose from: {', '.join(SUITES)}")
            sys.exit(2)
        cmd.extend(suite)

    print(f"🧪 Running tests: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, cwd=project_root)
        sys.exit(result.returncode)
    except KeyboardInterrupt:
        print("\n⏹️  Tests interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
