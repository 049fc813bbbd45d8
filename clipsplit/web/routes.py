"""JSON API routes for ClipSplit."""

import json
import queue
import subprocess
import threading
import uuid
from dataclasses import asdict
from pathlib import Path

from flask import Blueprint, Response, jsonify, request

from clipsplit import ffutil
from clipsplit.engine import plan_split, process
from clipsplit.errors import ExecutionError, ValidationError
from clipsplit.manifest import manifest_from_dict

bp = Blueprint("api", __name__)

# In-memory job store: job_id -> job dict
_jobs: dict[str, dict] = {}


def _request_json() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


@bp.route("/api/metadata", methods=["POST"])
def metadata():
    data = _request_json()
    if "path" not in data:
        raise ValidationError("'path' is required")

    path = Path(data["path"])
    if not path.is_file():
        raise ValidationError(f"File not found: {path}", details={"path": str(path)})

    try:
        probe_result = ffutil.probe(path)
    except ValueError as e:
        raise ValidationError(str(e), details={"path": str(path)}) from e
    except subprocess.CalledProcessError as e:
        raise ExecutionError(
            f"ffprobe failed on {path}", returncode=e.returncode, stderr=e.stderr or ""
        ) from e

    result = asdict(probe_result)
    result["path"] = str(path)
    result["file_name"] = path.name
    result["file_size"] = path.stat().st_size
    return jsonify(result)


@bp.route("/api/plan", methods=["POST"])
def plan():
    manifest = manifest_from_dict(_request_json())
    split_plan = plan_split(manifest)

    partitions = []
    for point in split_plan.partitions:
        entry = asdict(point)
        entry["output_path"] = str(split_plan.output_path_for(point))
        entry["segments"] = [asdict(s) for s in split_plan.segments_for(point)]
        partitions.append(entry)

    return jsonify({
        "duration": split_plan.duration,
        "file_size": split_plan.file_size,
        "effective_duration": split_plan.effective_duration,
        "included": [asdict(iv) for iv in split_plan.included],
        "partitions": partitions,
    })


@bp.route("/api/jobs", methods=["POST"])
def start_job():
    manifest = manifest_from_dict(_request_json())

    job_id = uuid.uuid4().hex[:12]
    progress_queue: queue.Queue = queue.Queue()
    job = {
        "status": "processing",
        "input": str(manifest.input),
        "progress_queue": progress_queue,
        "error": None,
    }
    _jobs[job_id] = job

    def run():
        try:
            def on_progress(stage: str, frac: float):
                progress_queue.put({"stage": stage, "progress": round(frac, 3)})

            result = process(manifest, on_progress=on_progress, tag=job_id)
            job["result"] = {
                "output_paths": [str(p) for p in result.output_paths],
                "duration_original": result.duration_original,
                "duration_effective": result.duration_effective,
            }
            job["status"] = "done"
        except ExecutionError as e:
            job["status"] = "error"
            job["error"] = f"ffmpeg failed: {e.stderr[-500:]}" if e.stderr else str(e)
        except Exception as e:
            job["status"] = "error"
            job["error"] = str(e)
        finally:
            progress_queue.put(None)  # sentinel

    threading.Thread(target=run, daemon=True).start()
    return jsonify({"job_id": job_id, "status": "started"}), 202


@bp.route("/api/jobs/<job_id>/progress")
def progress_stream(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    q = job["progress_queue"]

    def generate():
        while True:
            try:
                msg = q.get(timeout=120)
            except queue.Empty:
                yield "data: {\"error\": \"timeout\"}\n\n"
                break
            if msg is None:
                if job["status"] == "error":
                    data = json.dumps({"error": job["error"]})
                else:
                    data = json.dumps({
                        "stage": "complete",
                        "progress": 1.0,
                        "result": job.get("result"),
                    })
                yield f"data: {data}\n\n"
                break
            yield f"data: {json.dumps(msg)}\n\n"

    return Response(generate(), mimetype="text/event-stream")


@bp.route("/api/jobs/<job_id>/status")
def job_status(job_id: str):
    if job_id not in _jobs:
        return jsonify({"error": "Job not found"}), 404

    job = _jobs[job_id]
    resp = {"status": job["status"], "input": job["input"]}
    if job["status"] == "done":
        resp["result"] = job.get("result")
    if job["status"] == "error":
        resp["error"] = job.get("error")
    return jsonify(resp)
