#!/usr/bin/env python3
"""
Example: Headless Spec Watching
Shows how to embed ProjectDataSource in another asyncio application.

This example demonstrates:
- One-shot spec discovery
- Starting the live spec watcher with an async sink
- Switching projects at runtime
"""

import asyncio
import sys
from pathlib import Path

try:
    from spec_sources.config import default_project_config
    from specwatch import ProjectContext, ProjectDataSource
except ImportError:
    print("Error: Install specwatch first: pip install specwatch")
    exit(1)


class SpecDashboard:
    """
    Keep a spec count up to date for a host application.

    Use case: IDE plugins, test runners, dev servers.
    """

    def __init__(self, project_root: str):
        """Initialize dashboard for a project."""
        self.config = default_project_config(project_root)
        self.ctx = ProjectContext(current_project=self.config.project_root)
        self.source = ProjectDataSource(self.ctx, on_specs_changed=self._on_specs_changed)
        self.updates = 0

    async def setup(self) -> int:
        """Load the initial list and start watching."""
        options = self.config.find_specs_options()
        specs = await self.source.find_specs(options)
        self.source.set_specs(specs)
        print(f"✓ Found {len(specs)} spec(s) in {self.config.project_root}")
        for spec in specs:
            print(f"  {spec.relative}")

        self.source.start_spec_watcher(options)
        return len(specs)

    async def teardown(self):
        """Stop watching."""
        self.source.stop_spec_watcher()

    async def _on_specs_changed(self, specs):
        """Sink for changed spec lists."""
        self.updates += 1
        print(f"\n▶ Spec list changed ({len(specs)} spec(s)):")
        for spec in specs:
            print(f"  {spec.relative}")


async def main(project_root: str, seconds: float):
    dashboard = SpecDashboard(project_root)
    await dashboard.setup()

    print(f"\nWatching for {seconds:.0f}s - add or remove a *.cy.js file to see updates")
    try:
        await asyncio.sleep(seconds)
    finally:
        await dashboard.teardown()

    print(f"\n📊 {dashboard.updates} update(s) received")


if __name__ == "__main__":
    root = sys.argv[1] if len(sys.argv) > 1 else str(Path.cwd())
    asyncio.run(main(root, seconds=30))
