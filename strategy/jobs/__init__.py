# PATH: strategy/jobs/__init__.py
"""
Strategy jobs package.

Available entry points:
    python -m strategy.jobs.fetch_pools         # Fetch, filter, print configs
    python -m strategy.jobs.fetch_pools --json  # Config JSON only

NOTE: This __init__.py does NOT import fetch_pools, so importing the package
has no side effects. Import it directly when needed:

    from strategy.jobs.fetch_pools import run_fetch
"""

__all__: list[str] = []
