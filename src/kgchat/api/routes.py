"""API routes for kgchat.

Provides:
- /v1/graph projection for graph renderers
- /v1/nodes/{node_id}/messages for conversation turns
- /v1/branches for deep-dive branches
- /v1/tooltips for quick explanations
- /v1/session/* navigation transitions
"""

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from kgchat.errors import UnknownNodeError
from kgchat.models import Message, Node, SessionState
from kgchat.workspace import Workspace

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Models
# ============================================================================


class MessageModel(BaseModel):
    """One conversation turn."""

    role: Literal["user", "assistant"]
    content: str

    @classmethod
    def from_message(cls, message: Message) -> "MessageModel":
        return cls(role=message.role.value, content=message.content)


class NodeModel(BaseModel):
    """Graph node."""

    id: str
    label: str
    x: float
    y: float
    kind: Literal["root", "main", "sub"]

    @classmethod
    def from_node(cls, node: Node) -> "NodeModel":
        return cls(**node.to_dict())


class SidePanelModel(BaseModel):
    node_id: str
    parent_node_id: str
    initial_question: str = ""


class SessionModel(BaseModel):
    """Navigation state."""

    active_node_id: str
    side_panel: SidePanelModel | None = None
    show_graph: bool = False

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionModel":
        return cls(**state.to_dict())


class SendMessageRequest(BaseModel):
    text: str = Field(min_length=1)


class ConversationResponse(BaseModel):
    """A node's conversation and whether it is waiting on a reply."""

    node_id: str
    label: str
    loading: bool
    messages: list[MessageModel]


class BranchRequest(BaseModel):
    parent_node_id: str
    selected_text: str = Field(min_length=1)


class BranchResponse(BaseModel):
    """A new branch. Its first exchange runs in the background."""

    node: NodeModel
    parent_node_id: str
    initial_question: str
    session: SessionModel


class TooltipRequest(BaseModel):
    term: str = Field(min_length=1)


class TooltipResponse(BaseModel):
    term: str
    explanation: str
    cached: bool


class FocusRequest(BaseModel):
    node_id: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    nodes: int
    version: str = "0.1.0"


# ============================================================================
# Helper Functions
# ============================================================================


def get_workspace(request: Request) -> Workspace:
    """Get workspace from app state."""
    return request.app.state.workspace


def require_node(workspace: Workspace, node_id: str) -> Node:
    try:
        return workspace.graph.get_node(node_id)
    except UnknownNodeError as e:
        raise HTTPException(status_code=404, detail=str(e))


def conversation_response(workspace: Workspace, node_id: str) -> ConversationResponse:
    node = workspace.graph.get_node(node_id)
    return ConversationResponse(
        node_id=node.id,
        label=node.label,
        loading=workspace.dispatcher.is_loading(node.id),
        messages=[MessageModel.from_message(m) for m in workspace.messages(node.id)],
    )


# ============================================================================
# Graph and Conversation Endpoints
# ============================================================================


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint."""
    workspace = get_workspace(request)
    return HealthResponse(status="healthy", nodes=len(workspace.graph))


@router.get("/v1/graph")
async def get_graph(request: Request) -> dict:
    """Nodes, edges and session state for rendering the conversation tree."""
    return get_workspace(request).snapshot()


@router.get("/v1/nodes/{node_id}/messages", response_model=ConversationResponse)
async def get_messages(request: Request, node_id: str) -> ConversationResponse:
    workspace = get_workspace(request)
    require_node(workspace, node_id)
    return conversation_response(workspace, node_id)


@router.post("/v1/nodes/{node_id}/messages", response_model=ConversationResponse)
async def send_message(
    request: Request,
    node_id: str,
    body: SendMessageRequest,
) -> ConversationResponse:
    """
    Send a user turn to a node and wait for the reply.

    Service failures still produce a (fallback) reply; 409 means the node
    already has a request in flight.
    """
    workspace = get_workspace(request)
    require_node(workspace, node_id)

    if not body.text.strip():
        raise HTTPException(status_code=422, detail="Message text is blank")
    if workspace.dispatcher.is_loading(node_id):
        raise HTTPException(
            status_code=409,
            detail=f"Node {node_id} is waiting for a reply",
        )

    await workspace.dispatcher.send_message(node_id, body.text)
    return conversation_response(workspace, node_id)


@router.post("/v1/branches", response_model=BranchResponse, status_code=201)
async def create_branch(request: Request, body: BranchRequest) -> BranchResponse:
    """Create a deep-dive branch from highlighted text."""
    workspace = get_workspace(request)
    require_node(workspace, body.parent_node_id)

    if not body.selected_text.strip():
        raise HTTPException(status_code=422, detail="Selected text is blank")

    branch = workspace.branches.create_branch(body.parent_node_id, body.selected_text)
    return BranchResponse(
        node=NodeModel.from_node(branch.node),
        parent_node_id=branch.parent_node_id,
        initial_question=branch.initial_question,
        session=SessionModel.from_state(workspace.state),
    )


@router.post("/v1/tooltips", response_model=TooltipResponse)
async def explain_term(request: Request, body: TooltipRequest) -> TooltipResponse:
    """One-sentence explanation of a highlighted term, cached per exact term."""
    workspace = get_workspace(request)
    cached = body.term in workspace.tooltips
    explanation = await workspace.explain(body.term)
    return TooltipResponse(term=body.term, explanation=explanation, cached=cached)


# ============================================================================
# Session Endpoints
# ============================================================================


@router.get("/v1/session", response_model=SessionModel)
async def get_session(request: Request) -> SessionModel:
    return SessionModel.from_state(get_workspace(request).state)


@router.post("/v1/session/focus", response_model=SessionModel)
async def focus_node(request: Request, body: FocusRequest) -> SessionModel:
    """Make a node the full-screen conversation."""
    workspace = get_workspace(request)
    require_node(workspace, body.node_id)
    return SessionModel.from_state(workspace.session.focus_node(body.node_id))


@router.post("/v1/session/side-panel/close", response_model=SessionModel)
async def close_side_panel(request: Request) -> SessionModel:
    return SessionModel.from_state(get_workspace(request).close_side_panel())


@router.post("/v1/session/side-panel/promote", response_model=SessionModel)
async def promote_side_panel(request: Request) -> SessionModel:
    """Switch to the branch shown in the side panel and close the panel."""
    return SessionModel.from_state(get_workspace(request).promote_side_panel())


@router.post("/v1/session/graph/toggle", response_model=SessionModel)
async def toggle_graph(request: Request) -> SessionModel:
    return SessionModel.from_state(get_workspace(request).toggle_graph())
