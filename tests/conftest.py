from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path
from typing import Iterator, List

import pytest

ROOT = Path(__file__).resolve().parent.parent

# Both the repo root (for tests.support) and src/ (for monkey) must import
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.append(str(entry))

CONFIG_VARS = ("MONKEY_LOG_LEVEL", "MONKEY_DEBUG_PY_TRACE")


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Every test starts without MONKEY_* configuration from the outer shell."""
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


def pytest_collection_modifyitems(config: pytest.Config, items: List[pytest.Item]) -> None:
    """Refuse to run when two scenarios share an id; one would shadow the other."""
    del config

    counts = Counter(item.nodeid for item in items)
    clashes = sorted(nodeid for nodeid, n in counts.items() if n > 1)
    if clashes:
        listing = "\n".join(f"- {nodeid}" for nodeid in clashes)
        raise pytest.UsageError(f"Duplicate test ids detected during collection:\n{listing}")
