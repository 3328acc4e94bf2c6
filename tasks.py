from invoke import task


@task
def env(c):
    """
    Create/update the project virtual environment and install dependencies.
    """
    c.run("uv pip install -e .[dev]")


@task(help={"k": "Only run tests matching this pytest -k expression"})
def test(c, k=""):
    """
    Run the test suite.
    """
    selector = f" -k '{k}'" if k else ""
    c.run(f"uv run pytest tests{selector}", pty=True)


@task(name="check-catalog", help={"timeout": "Per-request timeout in seconds"})
def check_catalog(c, timeout=20.0):
    """
    Verify the endpoint catalog against the published nba_api docs.
    """
    c.run(f"uv run python scripts/check_endpoint_catalog.py --timeout {timeout}", pty=True)
