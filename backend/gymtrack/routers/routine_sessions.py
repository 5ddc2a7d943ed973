from fastapi import APIRouter, Depends, Path
from gymtrack.deps.engine import get_engine, get_registry, get_user_id
from gymtrack.engine import EngineRegistry, SessionEngine
from gymtrack.schemas.session import FinishChoice, ResetRequest, SessionRead, SetMark

router = APIRouter(prefix="/routines", tags=["sessions"])

@router.post("/{template_id}/days/{day_number}/load", response_model=SessionRead)
async def load_day(
    template_id: str,
    day_number: int = Path(ge=1, le=7),
    registry: EngineRegistry = Depends(get_registry),
    user_id: str | None = Depends(get_user_id),
):
    # 409 (via LockConflictError) while another day of the routine is open
    engine = await registry.select_day(template_id, day_number, user_id=user_id)
    return engine.snapshot()

@router.get("/{template_id}/session", response_model=SessionRead)
async def get_session(engine: SessionEngine = Depends(get_engine)):
    return engine.snapshot()

@router.post("/{template_id}/session/exercises/{exercise_id}/mark", response_model=SessionRead)
async def mark_set(exercise_id: str, payload: SetMark | None = None, engine: SessionEngine = Depends(get_engine)):
    if payload is not None and payload.reps is not None:
        engine.complete_set(exercise_id, payload.reps)
    else:
        engine.mark_set(exercise_id)
    await engine.flush()
    return engine.snapshot()

@router.post("/{template_id}/session/exercises/{exercise_id}/undo", response_model=SessionRead)
async def undo_set(exercise_id: str, engine: SessionEngine = Depends(get_engine)):
    engine.undo_set(exercise_id)
    await engine.flush()
    return engine.snapshot()

@router.post("/{template_id}/session/exercises/{exercise_id}/mark-all", response_model=SessionRead)
async def mark_all_sets(exercise_id: str, engine: SessionEngine = Depends(get_engine)):
    engine.mark_all_sets(exercise_id)
    await engine.flush()
    return engine.snapshot()

@router.post("/{template_id}/session/finish", response_model=SessionRead)
async def request_finish(engine: SessionEngine = Depends(get_engine)):
    await engine.request_finish()
    await engine.flush()
    return engine.snapshot()

@router.post("/{template_id}/session/finish/choice", response_model=SessionRead)
async def choose_finish_mode(payload: FinishChoice, engine: SessionEngine = Depends(get_engine)):
    await engine.choose_finish_mode(payload.mode)
    await engine.flush()
    return engine.snapshot()

@router.post("/{template_id}/session/finish/cancel", response_model=SessionRead)
async def cancel_finish(engine: SessionEngine = Depends(get_engine)):
    engine.cancel_finish()
    return engine.snapshot()

@router.post("/{template_id}/session/reset", response_model=SessionRead)
async def reset(payload: ResetRequest, engine: SessionEngine = Depends(get_engine)):
    engine.reset(confirm=payload.confirm)
    await engine.flush()
    return engine.snapshot()
