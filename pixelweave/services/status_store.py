from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from pixelweave.config import Settings


def _jobs_dir(settings: Optional[Settings]) -> Path:
	return (settings or Settings.from_env()).jobs_dir


def write_status(job_id: str, data: Dict[str, Any], settings: Optional[Settings] = None) -> None:
	jobs_dir = _jobs_dir(settings)
	jobs_dir.mkdir(parents=True, exist_ok=True)
	status_path = jobs_dir / f"{job_id}.json"
	# readers only ever see a complete file
	tmp_path = status_path.with_suffix(".tmp")
	with tmp_path.open("w", encoding="utf-8") as f:
		json.dump(data, f, indent=2)
	tmp_path.replace(status_path)


def read_status(job_id: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
	status_path = _jobs_dir(settings) / f"{job_id}.json"
	if not status_path.exists():
		return {"job_id": job_id, "status": "unknown"}
	with status_path.open("r", encoding="utf-8") as f:
		return json.load(f)
