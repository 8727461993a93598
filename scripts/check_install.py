#!/usr/bin/env python3
"""Smoke check for a Basic Diff installation."""

import subprocess
import sys

SAMPLE_DIFF = """diff --git a/hello.txt b/hello.txt
index 3b18e51..a042389 100644
--- a/hello.txt
+++ b/hello.txt
@@ -1 +1 @@
-hello
+hello world
"""


def check_import():
    """The package imports and parses a small diff."""
    try:
        import basicdiff

        document = basicdiff.parse_unified_diff(SAMPLE_DIFF)
    except Exception as e:
        print(f"✗ Package check failed: {e}")
        return False
    totals = document.totals
    print(
        f"✓ Package import successful (version: {basicdiff.__version__}, "
        f"+{totals.additions}/-{totals.deletions})"
    )
    return totals.additions == 1 and totals.deletions == 1


def check_cli():
    """The CLI module answers --help."""
    result = subprocess.run(
        [sys.executable, "-m", "basicdiff.main", "--help"],
        capture_output=True,
        text=True,
        timeout=10,
    )
    if result.returncode == 0:
        print("✓ CLI command available")
        return True
    print(f"✗ CLI command failed: {result.stderr}")
    return False


def check_git():
    """Git is on PATH."""
    try:
        result = subprocess.run(
            ["git", "--version"], capture_output=True, text=True, timeout=10
        )
    except OSError as e:
        print(f"✗ Git check failed: {e}")
        return False
    if result.returncode == 0:
        print(f"✓ Git available: {result.stdout.strip()}")
        return True
    print("✗ Git not available")
    return False


def main():
    """Run all installation checks."""
    print("Checking Basic Diff installation...")
    print("=" * 40)

    checks = [
        ("Package Import", check_import),
        ("CLI Command", check_cli),
        ("Git Availability", check_git),
    ]
    passed = 0
    for name, check in checks:
        print(f"\n{name}:")
        if check():
            passed += 1

    print("\n" + "=" * 40)
    print(f"Checks passed: {passed}/{len(checks)}")
    return 0 if passed == len(checks) else 1


if __name__ == "__main__":
    sys.exit(main())
