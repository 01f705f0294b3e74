from fastapi import APIRouter, Depends, Request, status

from livepoll.schemas.poll import ErrorOut, PollCreate, PollCreated, PollOut
from livepoll.services.poll_store import PollStore

router = APIRouter(prefix="/api/polls", tags=["Polls"])


def get_store(request: Request) -> PollStore:
    return request.app.state.store


@router.post(
    "",
    response_model=PollCreated,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorOut}},
)
async def create_poll(payload: PollCreate, store: PollStore = Depends(get_store)):
    poll = store.create_poll(payload.question, payload.options)
    return poll.model_dump()


@router.get("/{poll_id}", response_model=PollOut, responses={404: {"model": ErrorOut}})
async def get_poll(poll_id: str, store: PollStore = Depends(get_store)):
    return store.get_poll(poll_id).snapshot()
