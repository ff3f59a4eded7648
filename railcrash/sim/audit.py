import json
from pathlib import Path
from typing import Any, Dict

from railcrash.core.config import DetectorConfig


def write_audit(event: Dict[str, Any], path: Path | str | None = None) -> Path:
    # append a JSONL entry; the file defaults to RAILCRASH_AUDIT_FILE
    target = path or DetectorConfig().audit_file
    if not target:
        raise ValueError("No audit file given and RAILCRASH_AUDIT_FILE is not set")
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("a", encoding="utf-8") as f:
        f.write(json.dumps(event, ensure_ascii=False) + "\n")
    return target
