#!/usr/bin/env python3
"""
Test runner for the dungeon gacha engine.

Wraps pytest, ruff and pyright so CI and local runs use the same commands.
"""

import argparse
import subprocess
import sys


def run_command(cmd: list[str], description: str) -> bool:
    """Run a command, streaming its output, and report the outcome."""
    print(f"=== {description} ===")
    print(f"Running: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, check=True)
    except FileNotFoundError:
        print(f"FAILED: {cmd[0]} is not installed\n")
        return False
    except subprocess.CalledProcessError as e:
        print(f"FAILED: {description} exited with code {e.returncode}\n")
        return False

    print(f"OK: {description}\n")
    return True


def pytest_command(target: str = "tests/", verbose: bool = True, marker: str = "") -> list[str]:
    cmd = [sys.executable, "-m", "pytest", target]
    if verbose:
        cmd.append("-v")
    if marker:
        cmd.extend(["-m", marker])
    return cmd


def run_unit_tests(verbose: bool = True, marker: str = "not performance") -> bool:
    return run_command(pytest_command(verbose=verbose, marker=marker), "Tests")


def run_specific_test(test_name: str, verbose: bool = True) -> bool:
    """Run one test module by name, searching the tests tree."""
    if not test_name.startswith("test_"):
        test_name = f"test_{test_name}"
    if not test_name.endswith(".py"):
        test_name = f"{test_name}.py"
    cmd = pytest_command(target="tests/", verbose=verbose)
    cmd.extend(["-k", test_name[len("test_"):-len(".py")]])
    return run_command(cmd, f"Test: {test_name}")


def run_lint_check() -> bool:
    return run_command([sys.executable, "-m", "ruff", "check", "."], "Linting (ruff)")


def run_type_check() -> bool:
    return run_command(["pyright", "dungeon_gacha"], "Type checking (pyright)")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Test runner for the dungeon gacha engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_tests.py                    # Unit and integration tests
  python run_tests.py --test targeting   # Tests matching 'targeting'
  python run_tests.py --performance      # Only the performance tests
  python run_tests.py --lint             # Linting only
  python run_tests.py --all              # Tests, linting and type checking
        """,
    )
    parser.add_argument("--test", help="Run tests matching a module name (e.g. 'targeting')")
    parser.add_argument("--quiet", "-q", action="store_true", help="Minimal output")
    parser.add_argument("--performance", action="store_true", help="Run performance tests only")
    parser.add_argument("--lint", action="store_true", help="Run linting only")
    parser.add_argument("--types", action="store_true", help="Run type checking only")
    parser.add_argument("--all", action="store_true", help="Run tests, linting and type checking")
    args = parser.parse_args()

    verbose = not args.quiet

    if args.test:
        success = run_specific_test(args.test, verbose)
    elif args.performance:
        success = run_unit_tests(verbose, marker="performance")
    elif args.lint:
        success = run_lint_check()
    elif args.types:
        success = run_type_check()
    elif args.all:
        success = run_unit_tests(verbose) and run_lint_check() and run_type_check()
    else:
        success = run_unit_tests(verbose)

    if success:
        print("All operations completed successfully.")
        sys.exit(0)
    print("Some operations failed. See output above for details.")
    sys.exit(1)


if __name__ == "__main__":
    main()
