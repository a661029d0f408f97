"""QuickTerm installer (Python-first, step-driven).

Core design goals:
- Idempotent steps (check, install, configure)
- Settings merges that never drop unrelated keys
- Timestamped backups before every overwrite
- Atomic writes for settings and profile files
- Centralized logging
"""

__all__ = []
