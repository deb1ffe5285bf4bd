from functools import lru_cache
from typing import List, Optional, Tuple

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, ValidationError

from .advisor import AdvisorNotConfigured, ChatReply, DesignAdvisor
from .config import ConfigError
from .layout import build_scene
from .objects import add_object, move_object, remove_object
from .project import (
    ProjectFileError, apply_base_preset, default_project, import_project, set_tv_size, start_project,
)
from .schema import (
    BuildGuide, CamelModel, ChatMessage, DeskConfiguration, ObjectType, RoomEstimate, SceneGraph,
)
from .validator import ValidationIssue, validate_layout

app = FastAPI(title="desk-core")


class LayoutResponse(BaseModel):
    scene: SceneGraph
    warnings: List[ValidationIssue]


class TvSizeRequest(CamelModel):
    config: DeskConfiguration
    tv_size: float


class AddObjectRequest(BaseModel):
    config: DeskConfiguration
    type: ObjectType
    id: Optional[str] = None


class MoveObjectRequest(BaseModel):
    config: DeskConfiguration
    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)


class AnalyzeRoomRequest(BaseModel):
    images: List[str]


class StartProjectRequest(BaseModel):
    images: List[str] = []
    estimate: RoomEstimate


class ChatRequest(BaseModel):
    message: str
    config: DeskConfiguration
    history: List[ChatMessage] = []
    image: Optional[str] = None


@lru_cache
def get_advisor() -> DesignAdvisor:
    return DesignAdvisor()


def advisor_dependency() -> DesignAdvisor:
    try:
        return get_advisor()
    except (AdvisorNotConfigured, ConfigError) as e:
        raise HTTPException(status_code=503, detail=str(e))


@app.post("/layout", response_model=LayoutResponse)
def solve_layout(config: DeskConfiguration):
    """
    1. Lay out base band, countertop, uppers and equipment
    2. Attach advisory warnings (the layout itself is never rejected)
    """
    return LayoutResponse(scene=build_scene(config), warnings=validate_layout(config))


@app.get("/project/default", response_model=DeskConfiguration)
def get_default_project():
    return default_project()


@app.post("/project/start", response_model=DeskConfiguration)
def start_new_project(request: StartProjectRequest):
    return start_project(request.images, request.estimate)


@app.post("/project/import", response_model=DeskConfiguration)
async def import_project_file(request: Request):
    body = await request.body()
    try:
        return import_project(body)
    except ProjectFileError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/project/preset/{name}", response_model=DeskConfiguration)
def apply_preset(name: str, config: DeskConfiguration):
    return apply_base_preset(config, name)


@app.post("/project/tv-size", response_model=DeskConfiguration)
def change_tv_size(request: TvSizeRequest):
    try:
        return set_tv_size(request.config, request.tv_size)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False))


@app.post("/project/objects", response_model=DeskConfiguration)
def create_object(request: AddObjectRequest):
    return add_object(request.config, request.type, object_id=request.id)


@app.patch("/project/objects/{object_id}", response_model=DeskConfiguration)
def update_object(object_id: str, request: MoveObjectRequest):
    try:
        return move_object(request.config, object_id, request.position, request.rotation)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"No object with id {object_id}")


@app.delete("/project/objects/{object_id}", response_model=DeskConfiguration)
def delete_object(object_id: str, config: DeskConfiguration):
    try:
        return remove_object(config, object_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"No object with id {object_id}")


# Advisor endpoints are plain defs: FastAPI runs them in its threadpool,
# so the blocking model calls do not stall the event loop.

@app.post("/advisor/analyze-room", response_model=RoomEstimate)
def analyze_room(request: AnalyzeRoomRequest, advisor: DesignAdvisor = Depends(advisor_dependency)):
    return advisor.analyze_room(request.images)


@app.post("/advisor/chat", response_model=ChatReply)
def chat(request: ChatRequest, advisor: DesignAdvisor = Depends(advisor_dependency)):
    return advisor.chat(request.message, request.config, history=request.history, image=request.image)


@app.post("/advisor/build-guide", response_model=BuildGuide)
def build_guide(config: DeskConfiguration, advisor: DesignAdvisor = Depends(advisor_dependency)):
    guide = advisor.generate_build_guide(config)
    if guide is None:
        raise HTTPException(status_code=502, detail="Could not generate build guide")
    return guide
