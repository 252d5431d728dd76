from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates
from starlette.requests import Request

from pdf_compressor import __version__
from pdf_compressor.errors import (
    CompressorError,
    CustomNotSelected,
    DocumentProcessingError,
    InvalidInputKind,
    InvalidSettings,
    SessionBusy,
    SessionNotFound,
    UnknownPreset,
)
from pdf_compressor.processor import (
    DEFAULT_CUSTOM_SETTINGS,
    DEFAULT_PRESET,
    DocumentModel,
    InputArtifact,
    PresetId,
    describe,
    list_presets,
)
from pdf_compressor.session import CompressionSession
from pdf_compressor.settings import Settings
from pdf_compressor.storage import SessionRegistry
from web.schemas import CustomSettingsIn, PresetIn

SESSION_COOKIE = "pdfc_session"

_STATUS_BY_ERROR = {
    InvalidInputKind: 415,
    DocumentProcessingError: 422,
    InvalidSettings: 400,
    UnknownPreset: 400,
    CustomNotSelected: 400,
    SessionBusy: 409,
    SessionNotFound: 404,
}

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
log = logging.getLogger("pdf_compressor.web")


def _http_error(e: CompressorError) -> HTTPException:
    code = _STATUS_BY_ERROR.get(type(e), 400)
    return HTTPException(status_code=code, detail=e.message)


def get_session(request: Request) -> CompressionSession:
    return request.state.session


def _preset_payload(preset_id: PresetId, settings) -> dict:
    return {
        "id": preset_id.value,
        "description": describe(preset_id),
        "settings": settings.as_save_options(),
    }


def _catalog() -> list:
    items = [_preset_payload(p.id, p.settings) for p in list_presets()]
    items.append(_preset_payload(PresetId.custom, DEFAULT_CUSTOM_SETTINGS))
    return items


def create_app(
        settings: Optional[Settings] = None,
        model: Optional[DocumentModel] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title="PDF Compressor", version=__version__)
    app.state.settings = settings
    app.state.registry = SessionRegistry(settings.session_ttl_seconds, model=model)

    @app.middleware("http")
    async def bind_session(request: Request, call_next):
        if request.url.path == "/healthz":
            return await call_next(request)

        registry: SessionRegistry = request.app.state.registry
        registry.purge_expired()

        cookie = request.cookies.get(SESSION_COOKIE)
        session = registry.get_or_create(cookie)
        request.state.session = session

        response = await call_next(request)

        if cookie != session.session_id:
            response.set_cookie(
                key=SESSION_COOKIE,
                value=session.session_id,
                httponly=True,
                samesite="lax",
            )
        return response

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request, session: CompressionSession = Depends(get_session)):
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "title": "PDF Compressor",
                "presets": _catalog(),
                "snapshot": session.snapshot(),
                "max_upload_bytes": settings.max_upload_bytes,
            },
        )

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    @app.get("/api/presets")
    def api_presets():
        return {"items": _catalog(), "default": DEFAULT_PRESET.value}

    @app.get("/api/session")
    def api_session(session: CompressionSession = Depends(get_session)):
        return session.snapshot()

    @app.put("/api/session/preset")
    def api_select_preset(body: PresetIn, session: CompressionSession = Depends(get_session)):
        try:
            session.select_preset(body.preset)
        except CompressorError as e:
            raise _http_error(e) from e
        return session.snapshot()

    @app.put("/api/session/custom")
    def api_update_custom(body: CustomSettingsIn, session: CompressionSession = Depends(get_session)):
        try:
            session.update_custom(**body.changes())
        except CompressorError as e:
            raise _http_error(e) from e
        return session.snapshot()

    @app.post("/api/compress")
    async def api_compress(
            file: UploadFile = File(...),
            session: CompressionSession = Depends(get_session),
    ):
        data = await file.read(settings.max_upload_bytes + 1)
        if len(data) > settings.max_upload_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File is larger than {settings.max_upload_bytes} bytes",
            )

        artifact = InputArtifact(
            media_type=file.content_type or "",
            data=data,
            filename=file.filename or "document.pdf",
        )
        log.info(
            "Upload received: name=%s type=%s size=%s",
            artifact.filename,
            artifact.media_type,
            len(data),
            extra={"session_id": session.session_id},
        )
        try:
            session.select_file()
            await session.run(artifact)
        except CompressorError as e:
            raise _http_error(e) from e
        return session.snapshot()

    @app.get("/api/download")
    def api_download(session: CompressionSession = Depends(get_session)):
        output = session.output
        if output is None:
            raise HTTPException(status_code=404, detail="No compressed file available")
        return Response(
            content=output.data,
            media_type=output.media_type,
            headers={"Content-Disposition": f'attachment; filename="{output.filename}"'},
        )

    return app


app = create_app()
