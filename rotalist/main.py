"""FastAPI entrypoint for the rotation list service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

from fastapi import Depends, FastAPI, Form, Header, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from . import __version__, db
from .records import InvalidRecordError, RotationRecord
from .schemas import (
    ListCreateRequest,
    ListRenameRequest,
    ListResponse,
    ListSummaryResponse,
    OperationResponse,
    PersonAddRequest,
    PersonMoveRequest,
)
from .services import lists
from .services.rotation import current_person, next_rotation
from .services.time_utils import WeekInfo, format_day, now_utc, week_info_for
from .settings import settings
from .store import RecordNotFoundError, RecordStore, build_store

_LOGGER = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    store = build_store(settings)
    if settings.storage == "sqlite":
        db.ensure_db_dir()
        db.create_tables()
    app.state.store = store
    _LOGGER.info("Using %s record store", settings.storage)
    yield


app = FastAPI(title="rotalist", version=__version__, lifespan=lifespan)


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_now() -> datetime:
    return now_utc()


def require_token(x_rotalist_token: str | None = Header(default=None)) -> None:
    expected = settings.api_token
    if expected and x_rotalist_token != expected:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@app.exception_handler(InvalidRecordError)
def invalid_record_handler(_request: Request, exc: InvalidRecordError) -> JSONResponse:
    _LOGGER.error("Stored list is invalid: %s", exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)})


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def _not_found(exc: RecordNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _list_response(record: RotationRecord) -> ListResponse:
    return ListResponse(
        id=record.identifier,
        name=record.display_name,
        last_rotation=record.last_rotation_anchor,
        next_rotation=next_rotation(record),
        people=list(record.ordered_people),
        current_person=current_person(record),
    )


# HTML views


@app.get("/", response_class=HTMLResponse)
def dashboard(request: Request, store: RecordStore = Depends(get_store)) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"title": "Dashboard", "records": lists.list_summaries(store)},
    )


@app.post("/create")
def create_from_form(
    name: str = Form(default=""),
    store: RecordStore = Depends(get_store),
    now: datetime = Depends(get_now),
) -> RedirectResponse:
    if not name.strip():
        return _redirect("/")
    record = lists.create_list(store, name, now)
    return _redirect(f"/list/{record.identifier}")


@app.get("/list/{list_id}", response_class=HTMLResponse)
def list_view(
    request: Request,
    list_id: str,
    store: RecordStore = Depends(get_store),
    now: datetime = Depends(get_now),
) -> Response:
    try:
        record = lists.load_current(store, list_id, now)
    except RecordNotFoundError:
        return PlainTextResponse("List not found", status_code=status.HTTP_404_NOT_FOUND)

    return templates.TemplateResponse(
        request,
        "list.html",
        {
            "title": record.display_name,
            "record": record,
            "week": week_info_for(now),
            "current": current_person(record),
            "next_rotation": format_day(next_rotation(record)),
        },
    )


@app.post("/list/{list_id}/add")
def add_from_form(
    list_id: str,
    name: str = Form(default=""),
    store: RecordStore = Depends(get_store),
) -> RedirectResponse:
    if name.strip():
        try:
            lists.add_person(store, list_id, name)
        except RecordNotFoundError as exc:
            raise _not_found(exc) from exc
    return _redirect(f"/list/{list_id}")


@app.post("/list/{list_id}/action")
def action_from_form(
    list_id: str,
    index: str = Form(default=""),
    action: str = Form(default=""),
    store: RecordStore = Depends(get_store),
) -> RedirectResponse:
    try:
        position = int(index)
    except ValueError:
        return _redirect(f"/list/{list_id}")

    try:
        if action == "delete":
            lists.remove_person(store, list_id, position)
        elif action in lists.MOVE_DIRECTIONS:
            lists.move_person(store, list_id, position, action)
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc
    return _redirect(f"/list/{list_id}")


@app.post("/list/{list_id}/delete")
def delete_from_form(list_id: str, store: RecordStore = Depends(get_store)) -> RedirectResponse:
    lists.delete_list(store, list_id)
    return _redirect("/")


# JSON API


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.get("/v1/week", response_model=WeekInfo, dependencies=[Depends(require_token)])
def get_week(now: datetime = Depends(get_now)) -> WeekInfo:
    return week_info_for(now)


@app.get("/v1/lists", response_model=list[ListSummaryResponse], dependencies=[Depends(require_token)])
def get_lists(store: RecordStore = Depends(get_store)) -> list[ListSummaryResponse]:
    return [
        ListSummaryResponse(id=record.identifier, name=record.display_name)
        for record in lists.list_summaries(store)
    ]


@app.post(
    "/v1/lists",
    response_model=ListResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_token)],
)
def post_list(
    payload: ListCreateRequest,
    store: RecordStore = Depends(get_store),
    now: datetime = Depends(get_now),
) -> ListResponse:
    return _list_response(lists.create_list(store, payload.name, now))


@app.get("/v1/lists/{list_id}", response_model=ListResponse, dependencies=[Depends(require_token)])
def get_list(
    list_id: str,
    store: RecordStore = Depends(get_store),
    now: datetime = Depends(get_now),
) -> ListResponse:
    try:
        record = lists.load_current(store, list_id, now)
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc
    return _list_response(record)


@app.patch("/v1/lists/{list_id}", response_model=ListResponse, dependencies=[Depends(require_token)])
def patch_list(
    list_id: str,
    payload: ListRenameRequest,
    store: RecordStore = Depends(get_store),
) -> ListResponse:
    try:
        record = lists.rename_list(store, list_id, payload.name)
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc
    return _list_response(record)


@app.delete("/v1/lists/{list_id}", response_model=OperationResponse, dependencies=[Depends(require_token)])
def delete_list(list_id: str, store: RecordStore = Depends(get_store)) -> OperationResponse:
    lists.delete_list(store, list_id)
    return OperationResponse(ok=True, id=list_id)


@app.post("/v1/lists/{list_id}/people", response_model=ListResponse, dependencies=[Depends(require_token)])
def post_person(
    list_id: str,
    payload: PersonAddRequest,
    store: RecordStore = Depends(get_store),
) -> ListResponse:
    try:
        record = lists.add_person(store, list_id, payload.name)
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc
    return _list_response(record)


@app.delete(
    "/v1/lists/{list_id}/people/{index}",
    response_model=ListResponse,
    dependencies=[Depends(require_token)],
)
def delete_person(list_id: str, index: int, store: RecordStore = Depends(get_store)) -> ListResponse:
    try:
        record = lists.remove_person(store, list_id, index)
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc
    return _list_response(record)


@app.post(
    "/v1/lists/{list_id}/people/{index}/move",
    response_model=ListResponse,
    dependencies=[Depends(require_token)],
)
def post_move_person(
    list_id: str,
    index: int,
    payload: PersonMoveRequest,
    store: RecordStore = Depends(get_store),
) -> ListResponse:
    try:
        record = lists.move_person(store, list_id, index, payload.direction)
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc
    return _list_response(record)
