from __future__ import annotations

import os
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, ValidationError

from globscan.ast_parse import PythonGlobalsAnalyzer
from globscan.config import get_settings
from globscan.errors import ConfigurationError, JoinTimeoutError
from globscan.fs_scan import scan_units
from globscan.model import UnitFailure
from globscan.pipeline import run_pipeline


app = FastAPI(title="Global Variable Scanner")


class AnalyzeRequest(BaseModel):
	units: List[str] = []
	root_path: Optional[str] = None
	workers: Optional[int] = Field(default=None, ge=1)


class AnalyzeResponse(BaseModel):
	ok: bool
	lines: List[str]
	failed_units: List[UnitFailure] = []
	fatal_shards: List[int] = []


@app.get("/health")
def health() -> dict:
	return {"status": "ok"}


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze(req: AnalyzeRequest) -> AnalyzeResponse:
	units = list(req.units)
	try:
		if req.root_path:
			root = os.path.abspath(req.root_path)
			units.extend(scan_units(root, get_settings().extension_list()))
		overrides = {"output_path": None, "in_memory_sinks": True}
		if req.workers is not None:
			overrides["workers"] = req.workers
		settings = get_settings().model_copy(update=overrides)
		result = run_pipeline(units, PythonGlobalsAnalyzer(), settings)
	except ConfigurationError as e:
		raise HTTPException(status_code=400, detail=str(e))
	except ValidationError as e:
		raise HTTPException(status_code=400, detail=f"Invalid settings: {e}")
	except JoinTimeoutError as e:
		raise HTTPException(status_code=504, detail=str(e))

	return AnalyzeResponse(
		ok=result.ok,
		lines=result.report.lines,
		failed_units=result.failed_units,
		fatal_shards=result.fatal_shards,
	)


def create_app() -> FastAPI:
	return app
