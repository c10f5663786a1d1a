"""s-nomp installer (Python-first, fail-closed).

Core design goals:
- Verify the host before touching the project
- Fail closed: any stage failure stops the run
- Safe to re-run from scratch
- Reversible, verified source patching
- Centralized logging
"""

__all__ = []
