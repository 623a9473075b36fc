"""
Schedule calendar view: sessions of one day laid out on a per-track grid.
"""
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eventdesk.api.deps import get_org_context
from eventdesk.api.permissions import get_readable_event
from eventdesk.db import schemas
from eventdesk.db.database import get_db
from eventdesk.db.repositories import program as program_repo
from eventdesk.utils import schedule_layout as layout

router = APIRouter(prefix="/events/{event_id}/schedule", tags=["schedule"])


@router.get("", response_model=schemas.ScheduleView)
def get_schedule(
    event_id: uuid.UUID,
    date: Optional[str] = Query(default=None),
    track_id: Optional[str] = Query(default=layout.ALL_TRACKS),
    db: Session = Depends(get_db),
    context=Depends(get_org_context),
):
    _user, current_user = context
    event = get_readable_event(db, event_id, current_user)
    sessions = program_repo.list_sessions(db, event_id=event.id)
    tracks = {str(t.id): t for t in program_repo.list_tracks(db, event_id=event.id)}

    dates = layout.available_dates(sessions)
    selected = date or (dates[0] if dates else None)
    visible = layout.filter_sessions(sessions, selected, track_id) if selected else []

    columns = []
    for key, column_sessions in layout.group_by_track(visible).items():
        track = tracks.get(key)
        blocks = []
        for s in column_sessions:
            pos = layout.block_position(s.start_time, s.end_time)
            blocks.append(
                schemas.ScheduleBlock(
                    session_id=s.id,
                    name=s.name,
                    top=pos.top,
                    height=pos.height,
                    location=s.location,
                    status=s.status,
                    speakers=[schemas.SpeakerBrief.model_validate(sp) for sp in s.speakers],
                )
            )
        columns.append(
            schemas.ScheduleColumn(
                track_id=key,
                track_name=track.name if track else "No Track",
                color=track.color if track else None,
                blocks=blocks,
            )
        )

    return schemas.ScheduleView(
        dates=dates,
        selected_date=selected,
        time_slots=[schemas.TimeSlot(hour=slot.hour, label=slot.label) for slot in layout.time_slots()],
        columns=columns,
    )
