import asyncio
import functools
import json
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import asdict
from typing import Iterator, List, Optional

from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel

from csds.analysis_client import AnalysisParameters, submit_for_analysis
from csds.config import PlatformTag, load_settings
from csds.detection import detection_message
from csds.exceptions import (
    AnalysisServiceError,
    CsvParseError,
    MappingError,
    NoValidRowsError,
    SourceSelectionError,
)
from csds.mapping import parse_mappings, run_mapping_pipeline
from csds.models import ProcessingResult
from csds.pipeline import CsvPipeline, process_csv
from csds.readers import CSVReader
from csds.transforms import default_sources, get_transformer

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Coordinated Sharing Dataset Preprocessor")


class OptionOut(BaseModel):
    value: str
    label: str


class PlatformOut(BaseModel):
    platform: str
    account_source_options: List[OptionOut]
    object_id_source_options: List[OptionOut]
    default_account_source: Optional[str] = None
    default_object_id_source: Optional[str] = None


class DetectionOut(PlatformOut):
    message: str
    headers: List[str]


def _platform_out(tag: PlatformTag) -> dict:
    transformer = get_transformer(tag)
    default_account, default_object = default_sources(tag)
    return {
        "platform": tag.value,
        "account_source_options": [asdict(o) for o in transformer.get_account_source_options()],
        "object_id_source_options": [asdict(o) for o in transformer.get_object_id_source_options()],
        "default_account_source": default_account,
        "default_object_id_source": default_object,
    }


def require_api_key(x_api_key: Optional[str] = Header(None)) -> None:
    api_key = load_settings().api_key
    if api_key is not None and x_api_key != api_key:
        raise HTTPException(status_code=401, detail="Unauthorized")


@contextmanager
def saved_upload(upload: UploadFile) -> Iterator[str]:
    """Write an upload into a per-request directory and remove it afterwards."""
    filename = os.path.basename(upload.filename or "upload.csv")
    if not CSVReader().validate_path(filename):
        raise HTTPException(status_code=400, detail="Only CSV files are supported.")
    tmp_root = load_settings().tmp_root
    os.makedirs(tmp_root, exist_ok=True)
    run_dir = tempfile.mkdtemp(prefix="run_", dir=tmp_root)
    try:
        path = os.path.join(run_dir, filename)
        with open(path, "wb") as f:
            shutil.copyfileobj(upload.file, f)
        yield path
    finally:
        shutil.rmtree(run_dir, ignore_errors=True)


def _to_http_error(e: Exception) -> HTTPException:
    if isinstance(e, (NoValidRowsError, SourceSelectionError, MappingError)):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, CsvParseError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, AnalysisServiceError):
        return HTTPException(status_code=502, detail={"stage": e.stage, "message": str(e)})
    logger.error(f"Processing failed: {e}", exc_info=True)
    return HTTPException(status_code=500, detail=f"Processing failed: {e}")


def _csv_response(result: ProcessingResult, platform: str) -> Response:
    headers = {
        "Content-Disposition": 'attachment; filename="canonical.csv"',
        "X-Platform": platform,
        "X-Rows-Seen": str(result.summary.rows_seen),
        "X-Rows-Kept": str(result.summary.rows_kept),
        "X-Rows-Skipped": str(result.summary.rows_skipped),
        "X-Rows-Errored": str(result.summary.rows_errored),
        "X-Size-Limit-Exceeded": "true" if result.size_limit_exceeded else "false",
    }
    return Response(content=result.csv_bytes, media_type="text/csv", headers=headers)


async def _run_automatic(
    path: str,
    pipeline: CsvPipeline,
    platform: Optional[str],
    account_source: Optional[str],
    object_id_source: Optional[str],
) -> tuple:
    if platform:
        try:
            tag = PlatformTag(platform)
        except ValueError:
            raise HTTPException(status_code=422, detail=f"Unknown platform: {platform}")
    else:
        _, tag = pipeline.detect(path)
    if tag == PlatformTag.OTHER:
        raise HTTPException(
            status_code=400,
            detail="We couldn't identify your data format automatically. Use manual column mapping.",
        )
    result = await process_csv(path, get_transformer(tag), account_source, object_id_source, pipeline=pipeline)
    return tag, result


async def _run_manual(path: str, pipeline: CsvPipeline, mappings: str, require_all: bool) -> ProcessingResult:
    try:
        items = json.loads(mappings)
    except json.JSONDecodeError as e:
        raise MappingError(f"mappings must be a JSON list: {e}") from e
    if not isinstance(items, list):
        raise MappingError("mappings must be a JSON list")
    column_mappings = parse_mappings(items)
    headers = pipeline.reader.read_headers(path)
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None,
        functools.partial(
            run_mapping_pipeline, path, headers, column_mappings, pipeline=pipeline, require_all=require_all
        ),
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/platforms", response_model=List[PlatformOut])
async def platforms():
    return [_platform_out(tag) for tag in PlatformTag]


@app.post("/detect", response_model=DetectionOut, dependencies=[Depends(require_api_key)])
async def detect(file: UploadFile = File(...)):
    with saved_upload(file) as path:
        pipeline = CsvPipeline()
        headers, tag = pipeline.detect(path)
    return {**_platform_out(tag), "message": detection_message(tag), "headers": headers}


@app.post("/process", dependencies=[Depends(require_api_key)])
async def process(
    file: UploadFile = File(...),
    account_source: Optional[str] = Form(None),
    object_id_source: Optional[str] = Form(None),
    platform: Optional[str] = Form(None),
):
    with saved_upload(file) as path:
        try:
            tag, result = await _run_automatic(path, CsvPipeline(), platform, account_source, object_id_source)
        except HTTPException:
            raise
        except Exception as e:
            raise _to_http_error(e)
    return _csv_response(result, tag.value)


@app.post("/process/manual", dependencies=[Depends(require_api_key)])
async def process_manual(
    file: UploadFile = File(...),
    mappings: str = Form(...),
    require_all: bool = Form(False),
):
    with saved_upload(file) as path:
        try:
            result = await _run_manual(path, CsvPipeline(), mappings, require_all)
        except Exception as e:
            raise _to_http_error(e)
    return _csv_response(result, PlatformTag.OTHER.value)


@app.post("/analyze", dependencies=[Depends(require_api_key)])
async def analyze(
    file: UploadFile = File(...),
    account_source: Optional[str] = Form(None),
    object_id_source: Optional[str] = Form(None),
    platform: Optional[str] = Form(None),
    mappings: Optional[str] = Form(None),
    min_participation: int = Form(2),
    time_window: int = Form(60),
    subgraph: int = Form(1),
    edge_weight: float = Form(0.5),
):
    """Normalize an upload and forward the canonical CSV to the analysis service."""
    try:
        params = AnalysisParameters(
            min_participation=min_participation,
            time_window=time_window,
            subgraph=subgraph,
            edge_weight=edge_weight,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    with saved_upload(file) as path:
        pipeline = CsvPipeline()
        try:
            if mappings:
                tag = PlatformTag.OTHER
                result = await _run_manual(path, pipeline, mappings, require_all=True)
            else:
                tag, result = await _run_automatic(path, pipeline, platform, account_source, object_id_source)
            loop = asyncio.get_running_loop()
            analysis = await loop.run_in_executor(None, functools.partial(submit_for_analysis, result.csv_bytes, params))
        except HTTPException:
            raise
        except Exception as e:
            raise _to_http_error(e)

    return {
        "platform": tag.value,
        "summary": result.summary.as_dict(),
        "size_limit_exceeded": result.size_limit_exceeded,
        "warnings": result.warnings,
        "result": analysis,
    }
