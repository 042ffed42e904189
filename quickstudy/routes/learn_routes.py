"""
Learning session endpoints.

POST /learn/sessions generates content and installs a fresh SessionEngine for the
learner; the /learn/session/* transitions drive it. The transition that reaches
Terminal hands its completion to a background job exactly once.
"""

from uuid import uuid4

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import sessionmaker

from learning.client import ContentGenerationClient
from learning.context import LearnerContext
from learning.engine import SessionEngine
from learning.errors import EmptyTopic, LearningError, ValidationError
from quickstudy.bootstrap import get_activity_recorder, get_content_client
from quickstudy.config import get_session_factory
from quickstudy.schemas.learn_schemas import (
    AnswerRequest,
    IndexRequest,
    ResetResponse,
    SessionView,
    StartSessionRequest,
    TimeoutRequest,
    TransitionResponse,
)
from quickstudy.services.activity_recorder import ActivityRecorder, record_completion
from quickstudy.services.content_store import store_generated_content
from quickstudy.services.session_registry import SessionRegistry, get_session_registry
from quickstudy.utils.auth import get_learner_context
from quickstudy.utils.logger import configure_logging, log_request

logger = configure_logging()

learn_routes = APIRouter()


def _respond(
    engine: SessionEngine,
    applied: bool,
    context: LearnerContext,
    background_tasks: BackgroundTasks,
    recorder: ActivityRecorder,
) -> TransitionResponse:
    completion = engine.claim_completion()
    if completion is not None:
        background_tasks.add_task(record_completion, recorder, context, completion)
    return TransitionResponse(applied=applied, session=SessionView(**engine.snapshot()))


def _check_index(engine: SessionEngine, index: int) -> None:
    if not 0 <= index < engine.total:
        raise ValidationError(f"Item index {index} is out of range 0..{engine.total - 1}")


@learn_routes.post("/sessions", response_model=SessionView, status_code=201)
async def start_session(
    body: StartSessionRequest,
    background_tasks: BackgroundTasks,
    context: LearnerContext = Depends(get_learner_context),
    client: ContentGenerationClient = Depends(get_content_client),
    registry: SessionRegistry = Depends(get_session_registry),
    session_factory: sessionmaker = Depends(get_session_factory),
) -> SessionView:
    """
    Generate content for {topic, mode} and start a session on it.
    Any session the learner already had is discarded. If a reset or a newer
    request lands while content is being generated, this one answers 409.
    """
    topic = body.topic.strip()
    if not topic:
        raise EmptyTopic()

    ticket = registry.begin(context.user_id)
    try:
        with log_request(logger, f"generate {body.mode.value} user={context.user_id}"):
            payload = await client.generate(context, topic, body.mode)
        engine = SessionEngine.from_payload(topic, payload, content_id=str(uuid4()))
    except LearningError:
        registry.abandon(context.user_id, ticket)
        raise

    registry.install(context.user_id, ticket, engine)
    # Stored before responding so a completion can always find its content row.
    store_generated_content(session_factory, context, engine.content_id, topic, payload)
    logger.info("session started user=%s session=%s mode=%s items=%s", context.user_id, engine.id, engine.mode.value, engine.total)
    return SessionView(**engine.snapshot())


@learn_routes.get("/session", response_model=SessionView)
async def get_session(
    context: LearnerContext = Depends(get_learner_context),
    registry: SessionRegistry = Depends(get_session_registry),
) -> SessionView:
    return SessionView(**registry.get(context.user_id).snapshot())


@learn_routes.delete("/session", response_model=ResetResponse)
async def reset_session(
    context: LearnerContext = Depends(get_learner_context),
    registry: SessionRegistry = Depends(get_session_registry),
) -> ResetResponse:
    """Back to mode selection. Results of an in-flight generation are discarded."""
    registry.reset(context.user_id)
    return ResetResponse(message="Session reset")


@learn_routes.post("/session/answer", response_model=TransitionResponse)
async def answer(
    body: AnswerRequest,
    background_tasks: BackgroundTasks,
    context: LearnerContext = Depends(get_learner_context),
    registry: SessionRegistry = Depends(get_session_registry),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
) -> TransitionResponse:
    engine = registry.get(context.user_id)
    applied = engine.submit_answer(body.value)
    return _respond(engine, applied, context, background_tasks, recorder)


@learn_routes.post("/session/timeout", response_model=TransitionResponse)
async def timeout(
    body: TimeoutRequest,
    background_tasks: BackgroundTasks,
    context: LearnerContext = Depends(get_learner_context),
    registry: SessionRegistry = Depends(get_session_registry),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
) -> TransitionResponse:
    """Countdown reached zero on the client. Ignored unless `index` is the live game item."""
    engine = registry.get(context.user_id)
    applied = engine.expire(body.index)
    return _respond(engine, applied, context, background_tasks, recorder)


@learn_routes.post("/session/advance", response_model=TransitionResponse)
async def advance(
    background_tasks: BackgroundTasks,
    context: LearnerContext = Depends(get_learner_context),
    registry: SessionRegistry = Depends(get_session_registry),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
) -> TransitionResponse:
    engine = registry.get(context.user_id)
    applied = engine.advance()
    return _respond(engine, applied, context, background_tasks, recorder)


@learn_routes.post("/session/back", response_model=TransitionResponse)
async def back(
    background_tasks: BackgroundTasks,
    context: LearnerContext = Depends(get_learner_context),
    registry: SessionRegistry = Depends(get_session_registry),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
) -> TransitionResponse:
    engine = registry.get(context.user_id)
    applied = engine.back()
    return _respond(engine, applied, context, background_tasks, recorder)


@learn_routes.post("/session/jump", response_model=TransitionResponse)
async def jump(
    body: IndexRequest,
    background_tasks: BackgroundTasks,
    context: LearnerContext = Depends(get_learner_context),
    registry: SessionRegistry = Depends(get_session_registry),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
) -> TransitionResponse:
    engine = registry.get(context.user_id)
    _check_index(engine, body.index)
    applied = engine.jump(body.index)
    return _respond(engine, applied, context, background_tasks, recorder)


@learn_routes.post("/session/flip", response_model=TransitionResponse)
async def flip(
    background_tasks: BackgroundTasks,
    context: LearnerContext = Depends(get_learner_context),
    registry: SessionRegistry = Depends(get_session_registry),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
) -> TransitionResponse:
    engine = registry.get(context.user_id)
    applied = engine.flip()
    return _respond(engine, applied, context, background_tasks, recorder)


@learn_routes.post("/session/expand", response_model=TransitionResponse)
async def expand(
    body: IndexRequest,
    background_tasks: BackgroundTasks,
    context: LearnerContext = Depends(get_learner_context),
    registry: SessionRegistry = Depends(get_session_registry),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
) -> TransitionResponse:
    engine = registry.get(context.user_id)
    _check_index(engine, body.index)
    applied = engine.expand(body.index)
    return _respond(engine, applied, context, background_tasks, recorder)


@learn_routes.post("/session/collapse", response_model=TransitionResponse)
async def collapse(
    body: IndexRequest,
    background_tasks: BackgroundTasks,
    context: LearnerContext = Depends(get_learner_context),
    registry: SessionRegistry = Depends(get_session_registry),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
) -> TransitionResponse:
    engine = registry.get(context.user_id)
    _check_index(engine, body.index)
    applied = engine.collapse(body.index)
    return _respond(engine, applied, context, background_tasks, recorder)


@learn_routes.post("/session/complete", response_model=TransitionResponse)
async def complete(
    background_tasks: BackgroundTasks,
    context: LearnerContext = Depends(get_learner_context),
    registry: SessionRegistry = Depends(get_session_registry),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
) -> TransitionResponse:
    """Finish a brief once every key point has been read."""
    engine = registry.get(context.user_id)
    applied = engine.complete()
    return _respond(engine, applied, context, background_tasks, recorder)
