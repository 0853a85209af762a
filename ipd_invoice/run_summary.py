"""Invoice generation run summary and serialization."""

import json
import math
import os
import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


def _sanitize_for_json(obj: Any) -> Any:
    """Recursively replace NaN/Inf and non-JSON numbers so JSON round-trip works."""
    if isinstance(obj, dict):
        return {k: _sanitize_for_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitize_for_json(v) for v in obj]
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    if isinstance(obj, (int, str, type(None), bool)):
        return obj
    if isinstance(obj, (datetime, Path)):
        return str(obj)
    try:
        f = float(obj)
        if math.isnan(f) or math.isinf(f):
            return 0.0
        return f
    except (TypeError, ValueError):
        pass
    return str(obj)


@dataclass
class RunSummary:
    """Summary of one invoice generation run."""
    run_id: str
    ipd_id: str
    output_dir: str
    started_at: str
    finished_at: Optional[str] = None
    status: str = "RUNNING"  # RUNNING, COMPLETED, FAILED

    pdf_path: Optional[str] = None
    page_count: int = 0
    profile_name: Optional[str] = None
    letterhead: Optional[str] = None

    totals: Dict[str, float] = field(default_factory=dict)
    slices: List[Dict[str, Any]] = field(default_factory=list)
    durations: Dict[str, float] = field(default_factory=dict)  # Stage durations
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def create(cls, ipd_id: str, output_dir: str) -> 'RunSummary':
        """Create a new run summary."""
        return cls(
            run_id=str(uuid.uuid4()),
            ipd_id=str(ipd_id),
            output_dir=str(output_dir),
            started_at=datetime.now().isoformat()
        )

    def complete(self, status: str = "COMPLETED"):
        """Mark run as completed."""
        self.status = status
        self.finished_at = datetime.now().isoformat()

    def add_error(self, stage: str, error: BaseException):
        """Record a failure at a stage."""
        self.errors.append({
            "stage": stage,
            "type": type(error).__name__,
            "message": str(error),
        })

    def save(self, path: Path):
        """Save summary to JSON file (atomic write to avoid truncated file on interrupt)."""
        path = Path(path)
        data = _sanitize_for_json(asdict(self))
        tmp = path.with_suffix(path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp, path)

    @classmethod
    def load(cls, path: Path) -> 'RunSummary':
        """Load a summary saved with save()."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls(**data)
