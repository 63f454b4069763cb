from invoke import task
from pathlib import Path

# Get project root directory
PROJECT_ROOT = Path(__file__).parent.absolute()


def project_relative(path):
    """Convert a relative path to an absolute path relative to the project root."""
    return str(PROJECT_ROOT / path)


@task
def update(c):
    """Update all dependencies to their latest versions using poetry."""
    c.run("poetry update")


@task
def up(c):
    """Alias for update - update all dependencies to their latest versions."""
    update(c)


@task
def status(c):
    """Check git status of the repository."""
    c.run("git status")


@task
def st(c):
    """Alias for status - check git status of the repository."""
    status(c)


@task
def shell(c):
    """Start Django shell."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} shell")


@task
def test(c, path=None):
    """Run Django tests. Optionally specify a specific test path."""
    manage_py = project_relative("manage.py")
    settings = "--settings=courtside.test_settings"
    if path:
        c.run(f"python {manage_py} test {settings} {path}")
    else:
        c.run(f"python {manage_py} test {settings}")


@task
def standings(c, input_file, tiebreakers=None, fmt="table"):
    """Compute standings for a JSON export of competitors and matches."""
    manage_py = project_relative("manage.py")
    args = f"{input_file} --format {fmt}"
    if tiebreakers:
        args += f" --tiebreakers {tiebreakers}"
    c.run(f"python {manage_py} compute_standings {args}")
