"""Branch manager - deep-dive branches from highlighted text.

Creating a branch:
1. Check the parent exists (nothing is mutated when it does not)
2. Place the node below its parent, right of its earlier siblings
3. Add the Sub node, its Sub edge and an empty conversation
4. Open the side panel on the new branch
5. Ask "What is <selection>?" on the new node in a background task
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass

from kgchat.config import settings
from kgchat.conversation import ConversationStore
from kgchat.dispatch import MessageDispatcher
from kgchat.errors import UnknownParentError
from kgchat.graph.store import GraphStore
from kgchat.models import Edge, EdgeKind, Message, Node, NodeKind
from kgchat.session import SessionController

logger = logging.getLogger(__name__)

INITIAL_QUESTION = "What is {selection}?"


@dataclass
class Branch:
    """A created branch and the task running its first exchange."""

    node: Node
    parent_node_id: str
    initial_question: str
    task: "asyncio.Task[Message | None]"


def new_branch_id() -> str:
    return f"sub_{uuid.uuid4().hex}"


class BranchManager:
    """Creates Sub branches and kicks off their first exchange."""

    def __init__(
        self,
        graph: GraphStore,
        conversations: ConversationStore,
        session: SessionController,
        dispatcher: MessageDispatcher,
        label_max_length: int | None = None,
    ) -> None:
        self.graph = graph
        self.conversations = conversations
        self.session = session
        self.dispatcher = dispatcher
        self.label_max_length = label_max_length or settings.label_max_length

        # Strong references so background exchanges are not garbage collected
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of first exchanges still running."""
        return len(self._tasks)

    def create_branch(self, parent_node_id: str, selected_text: str) -> Branch:
        """
        Create a deep-dive branch from a highlighted span.

        Must be called from a running event loop; the first exchange is
        scheduled on it and not awaited.

        Args:
            parent_node_id: Node whose reply the text was highlighted in
            selected_text: The highlighted span

        Returns:
            Branch with the new node and its first-exchange task

        Raises:
            UnknownParentError: If the parent node does not exist
            ValueError: If selected_text is blank
        """
        if not self.graph.has_node(parent_node_id):
            raise UnknownParentError(parent_node_id)
        if not selected_text or not selected_text.strip():
            raise ValueError("Cannot branch from an empty selection")

        loop = asyncio.get_running_loop()

        x, y = self.graph.compute_branch_position(parent_node_id)
        node = Node(
            id=new_branch_id(),
            label=selected_text[: self.label_max_length],
            x=x,
            y=y,
            kind=NodeKind.SUB,
        )

        self.graph.add_node(node)
        self.graph.add_edge(Edge(source_id=parent_node_id, target_id=node.id, kind=EdgeKind.SUB))
        self.conversations.create(node.id)

        question = INITIAL_QUESTION.format(selection=selected_text)
        self.session.open_side_panel(node.id, parent_node_id, question)

        task = loop.create_task(
            self.dispatcher.send_message(node.id, question),
            name=f"branch-{node.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.info(f"Created branch {node.id} from {parent_node_id} at ({x}, {y})")

        return Branch(
            node=node,
            parent_node_id=parent_node_id,
            initial_question=question,
            task=task,
        )

    async def wait_pending(self) -> None:
        """Wait for every scheduled first exchange to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))
