from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from notepad.controller import InteractionController
from notepad.di import DIContainer, build_container
from notepad.error_handling import NotFoundError, ValidationError, handle_error
from notepad.logging_config import get_logger
from notepad.repository import NoteRepository, ensure_encodable

logger = get_logger(__name__)


class DraftUpdate(BaseModel):
    content: str


class NoteOut(BaseModel):
    id: str
    content: str
    createdAt: str


class CopyResult(BaseModel):
    copied: bool


def _note_out(note) -> dict:
    return note.to_record()


def create_app(container: Optional[DIContainer] = None) -> FastAPI:
    """
    Build the HTTP surface over a notepad container.

    The routes only read state and forward intents to the controller.
    """
    container = container or build_container()
    app = FastAPI(title="Elegant Notes")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.container = container
    logger.info("Notes API created")

    def controller() -> InteractionController:
        return container.get_typed("controller", InteractionController)

    def repository() -> NoteRepository:
        return container.get_typed("repository", NoteRepository)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        handle_error(exc)
        return JSONResponse(status_code=422, content={"detail": exc.message})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        handle_error(exc)
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.get("/notes", response_model=List[NoteOut])
    def list_notes():
        return [_note_out(note) for note in repository().list()]

    @app.get("/state")
    def get_state():
        return controller().snapshot().model_dump()

    @app.put("/draft")
    def set_draft(body: DraftUpdate):
        # Responses echo the draft, so it must survive UTF-8 encoding
        ensure_encodable(body.content)
        controller().set_draft(body.content)
        return controller().snapshot().model_dump()

    @app.post("/submit", response_model=NoteOut)
    def submit():
        return _note_out(controller().submit())

    @app.post("/notes/{note_id}/edit")
    def edit_note(note_id: str):
        controller().edit(note_id)
        return controller().snapshot().model_dump()

    @app.post("/edit/cancel")
    def cancel_edit():
        controller().cancel_edit()
        return controller().snapshot().model_dump()

    @app.post("/notes/{note_id}/delete")
    def request_delete(note_id: str):
        controller().request_delete(note_id)
        return controller().snapshot().model_dump()

    @app.post("/delete/confirm")
    def confirm_delete():
        controller().confirm_delete()
        return controller().snapshot().model_dump()

    @app.post("/delete/cancel")
    def cancel_delete():
        controller().cancel_delete()
        return controller().snapshot().model_dump()

    @app.post("/notes/{note_id}/copy", response_model=CopyResult)
    async def copy_note(note_id: str):
        return {"copied": await controller().copy(note_id)}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    from notepad.config import configure_logging_from_settings

    configure_logging_from_settings(app.state.container.get("settings"))
    uvicorn.run(app, host="127.0.0.1", port=8000)
