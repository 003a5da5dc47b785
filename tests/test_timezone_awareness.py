from __future__ import annotations

import re
from pathlib import Path

from luminance_connector.mapping.time_utils import format_iso, parse_datetime

SRC_DIR = Path(__file__).resolve().parent.parent / "src"
TESTS_DIR = Path(__file__).resolve().parent  # current tests directory


def test_no_naive_datetime_patterns():
    """Ensure the codebase does not use deprecated/naive UTC constructors.

    We forbid `datetime.utcnow(` entirely and bare `datetime.now()` without a timezone argument.
    Allow: datetime.now(timezone.utc) or datetime.now(tz=timezone.utc).
    """
    forbidden = []
    search_dirs = [SRC_DIR, TESTS_DIR]
    this_file = Path(__file__).resolve()
    for base in search_dirs:
        for py_file in base.rglob("*.py"):
            if py_file.resolve() == this_file:
                # Skip self to avoid flagging example strings & detection logic
                continue
            text = py_file.read_text(encoding="utf-8")
            for i, line in enumerate(text.splitlines(), start=1):
                stripped = line.strip()
                if stripped.startswith("#") or stripped.startswith("\""):
                    continue
                if "allow-naive-datetime" in stripped:
                    continue
                if "datetime.utcnow(" in stripped:
                    forbidden.append((py_file, i, "datetime.utcnow(", stripped))
                for m in re.finditer(r"datetime\.now\(([^)]*)\)", stripped):
                    inner = m.group(1).strip()
                    if not inner:
                        forbidden.append((py_file, i, "datetime.now() naive", stripped))
                    elif "timezone.utc" not in inner and "tz=" not in inner:
                        forbidden.append((py_file, i, f"datetime.now({inner}) lacks explicit timezone", stripped))
    assert not forbidden, (
        "Found naive datetime usages (add '# allow-naive-datetime' comment to intentionally allow):\n" +
        "\n".join(f"{p}:{ln}: {reason} -> {snippet}" for p, ln, reason, snippet in forbidden)
    )


def test_parsed_values_are_utc_aware():
    for raw in ("2024-01-15", "2024-01-15T10:30:00", "01/15/2024", 1700000000000):
        dt = parse_datetime(raw)
        assert dt is not None
        assert dt.tzinfo is not None and dt.utcoffset().total_seconds() == 0
        assert format_iso(dt).endswith("Z")
