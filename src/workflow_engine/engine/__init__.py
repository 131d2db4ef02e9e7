"""Workflow engine core.

- Models for definitions, instances and history
- A pure definition validator
- The transition engine (instance creation + action application)
- An in-memory store with per-instance locking
- A service facade used by the REST server and the CLI
"""
