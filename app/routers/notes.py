"""
Notes router. A note carries no permissions of its own; every endpoint
authorizes against the plan the note belongs to.
"""

from fastapi import APIRouter, Query, status

from app.deps import CurrentUser, DBSession, NoteEditor, NoteViewer, PlanViewer
from app.errors import NotFoundError
from app.models.membership import PlanRole
from app.models.note import NoteType
from app.schemas.note import NoteCreate, NoteList, NoteRead, NoteUpdate
from app.services.access import authorize_plan, require_role
from app.services.notes import NoteService

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("/plan/{plan_id}", response_model=NoteList)
async def list_plan_notes(
    context: PlanViewer,
    db: DBSession,
    type: NoteType | None = Query(default=None),
):
    """List the notes of a plan, newest first."""
    notes = await NoteService(db).list_by_plan(context.plan_id, type)
    return NoteList(data=[NoteRead.model_validate(note) for note in notes])


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(context: NoteViewer, db: DBSession):
    note = await NoteService(db).get(context.note_id)
    if note is None:
        raise NotFoundError("Note")
    return note


@router.post("", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(body: NoteCreate, user: CurrentUser, db: DBSession):
    """Create a note. The plan comes from the body, so access is checked here."""
    context = await authorize_plan(db, body.plan_id, user.id)
    require_role(context, PlanRole.EDITOR)

    return await NoteService(db).create(body.plan_id, body.type, body.content, user.id)


@router.put("/{note_id}", response_model=NoteRead)
async def update_note(body: NoteUpdate, context: NoteEditor, db: DBSession):
    return await NoteService(db).update(context.note_id, body.content)


@router.delete("/{note_id}")
async def delete_note(context: NoteEditor, db: DBSession):
    if not await NoteService(db).delete(context.note_id):
        raise NotFoundError("Note")
    return {"success": True}
