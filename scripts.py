import subprocess
import sys

RUFF = ["uv", "run", "ruff"]


def _run(*commands: list[str]) -> int:
    for command in commands:
        result = subprocess.run(command)
        if result.returncode != 0:
            return result.returncode
    return 0


def format_code() -> int:
    return _run([*RUFF, "format", "src", "tests", "scripts"])


def lint() -> int:
    return _run([*RUFF, "check", "src", "tests", "scripts"])


def check() -> int:
    return _run([*RUFF, "check", "src", "tests", "scripts"], [*RUFF, "format", "--check", "src", "tests", "scripts"])


def test() -> int:
    return _run(["uv", "run", "pytest", "-q", *sys.argv[2:]])


def migrate() -> int:
    # forwards extra args, e.g. `python scripts.py migrate --all --dry-run`
    return _run(["uv", "run", "python", "scripts/migrate_legacy_settings.py", *sys.argv[2:]])


COMMANDS = {
    "format": format_code,
    "lint": lint,
    "check": check,
    "test": test,
    "migrate": migrate,
}


if __name__ == "__main__":
    if len(sys.argv) < 2 or sys.argv[1] not in COMMANDS:
        print(f"Usage: python scripts.py [{'|'.join(COMMANDS)}] [args...]")
        sys.exit(1)

    sys.exit(COMMANDS[sys.argv[1]]())
