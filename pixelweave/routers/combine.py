from __future__ import annotations

from datetime import datetime
from pathlib import Path

from fastapi import APIRouter, BackgroundTasks, File, HTTPException, UploadFile
from fastapi.responses import FileResponse

from pixelweave.config import Settings
from pixelweave.services.pipeline import run_job
from pixelweave.services.status_store import read_status, write_status


router = APIRouter(prefix="/combine", tags=["combine"])


def _slugify(text: str) -> str:
	return "".join(ch if (ch.isalnum() or ch in ("-", "_")) else "-" for ch in text).strip("-_").lower()


def _safe_name(filename: str, fallback: str) -> str:
	name = Path(filename or "").name
	return name or fallback


@router.post("/upload", summary="Upload two images and start combining them in the background")
async def upload(
	background_tasks: BackgroundTasks,
	image_a: UploadFile = File(...),
	image_b: UploadFile = File(...),
):
	settings = Settings.from_env()
	name_a = _safe_name(image_a.filename, "image_a")
	name_b = _safe_name(image_b.filename, "image_b")
	# Human-readable job_id: "<first_filename_stem>_<ddmmyyyyHHMMSS>"
	first_stem = _slugify(Path(name_a).stem) or "job"
	job_id = f"{first_stem}_{datetime.now().strftime('%d%m%Y%H%M%S%f')}"

	in_dir = settings.input_dir / job_id
	in_dir.mkdir(parents=True, exist_ok=True)
	path_a = in_dir / f"a_{name_a}"
	path_b = in_dir / f"b_{name_b}"
	for upload_file, p in ((image_a, path_a), (image_b, path_b)):
		data = await upload_file.read()
		with p.open("wb") as f:
			f.write(data)

	out_path = settings.output_dir / job_id / f"combined{Path(name_a).suffix.lower() or '.png'}"
	write_status(job_id, {"job_id": job_id, "status": "queued", "step": "Queued"}, settings)
	background_tasks.add_task(run_job, job_id, path_a, path_b, out_path, settings)
	return {
		"job_id": job_id,
		"status": "queued",
		"filenames": [name_a, name_b],
		"status_endpoint": f"/combine/status/{job_id}",
		"result_endpoint": f"/combine/result/{job_id}",
		"download_endpoint": f"/combine/download/{job_id}",
	}


@router.get("/status/{job_id}", summary="Get combine job status")
def status(job_id: str):
	return read_status(job_id, Settings.from_env())


@router.get("/result/{job_id}", summary="Get combine job result")
def result(job_id: str):
	data = read_status(job_id, Settings.from_env())
	if data.get("status") != "completed":
		return {"job_id": job_id, "status": data.get("status"), "message": "not completed yet"}
	return {
		"job_id": job_id,
		"output": data.get("output"),
		"width": data.get("width"),
		"height": data.get("height"),
		"format": data.get("format"),
		"byte_length": data.get("byte_length"),
		"inputs": data.get("inputs", {}),
	}


@router.get("/download/{job_id}", summary="Download the combined image")
def download(job_id: str):
	data = read_status(job_id, Settings.from_env())
	if data.get("status") != "completed" or not data.get("output"):
		raise HTTPException(status_code=404, detail="Result not available")
	path = Path(data["output"])
	if not path.is_file():
		raise HTTPException(status_code=404, detail="Result file missing")
	return FileResponse(path, filename=path.name)
