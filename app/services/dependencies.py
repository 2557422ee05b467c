import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import CyclicDependencyError, NotFoundError
from app.models import Assignment, Topic, TopicDependency
from app.services.deadlines import assign_deadlines
from app.services.dependency_graph import (
    NO_DEPENDENCY,
    DependencyGraph,
    build_dependency_graph,
    common_start_time_layers,
    to_dot,
    topological_order,
)
from app.services.queries import get_assignment

logger = logging.getLogger(__name__)


@dataclass
class DependencyResolution:
    acyclic: bool
    layers: List[List[int]] = field(default_factory=list)
    topological_order: List[int] = field(default_factory=list)
    cycle: List[int] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    graph_path: Optional[str] = None


def _depends_on_ids(depends_on: Any) -> List[int]:
    values = depends_on if isinstance(depends_on, (list, tuple, set)) else [depends_on]
    result = []
    for value in values:
        if value in NO_DEPENDENCY or str(value).strip() == "0":
            continue
        try:
            result.append(int(value))
        except (TypeError, ValueError) as exc:
            raise NotFoundError("Topic", value) from exc
    return result


def dependency_pairs(topics: List[Topic], dependencies: Dict[int, Any]) -> List[Tuple[int, List[int]]]:
    """One ``(topic id, depends-on ids)`` pair per topic; topics left out depend on nothing."""
    topic_ids = {topic.id for topic in topics}
    for topic_id in dependencies:
        if int(topic_id) not in topic_ids:
            raise NotFoundError("Topic", topic_id)

    submitted = {int(topic_id): depends_on for topic_id, depends_on in dependencies.items()}
    pairs = []
    for topic in topics:
        depends_on = _depends_on_ids(submitted.get(topic.id, ["0"]))
        for depends_on_id in depends_on:
            if depends_on_id not in topic_ids:
                raise NotFoundError("Topic", depends_on_id)
        pairs.append((topic.id, depends_on or ["0"]))
    return pairs


def replace_topic_dependencies(db: Session, topics: List[Topic], pairs: List[Tuple[int, List[Any]]]) -> None:
    topic_ids = [topic.id for topic in topics]
    for existing in db.query(TopicDependency).filter(TopicDependency.topic_id.in_(topic_ids)).all():
        db.delete(existing)
    db.flush()

    for topic_id, depends_on in pairs:
        for depends_on_id in sorted(set(_depends_on_ids(depends_on))):
            db.add(TopicDependency(topic_id=topic_id, depends_on_topic_id=depends_on_id))
    db.flush()


def stored_dependency_pairs(db: Session, topics: List[Topic]) -> List[Tuple[int, List[Any]]]:
    topic_ids = [topic.id for topic in topics]
    edges: Dict[int, List[int]] = {topic_id: [] for topic_id in topic_ids}
    rows = (
        db.query(TopicDependency)
        .filter(TopicDependency.topic_id.in_(topic_ids))
        .order_by(TopicDependency.id)
        .all()
    )
    for row in rows:
        edges[row.topic_id].append(row.depends_on_topic_id)
    return [(topic_id, edges[topic_id] or ["0"]) for topic_id in topic_ids]


def export_dependency_graph(assignment_id: int, graph: DependencyGraph, highlight=None) -> Optional[str]:
    """Write the name-labelled graph as DOT; failures are logged and never affect scheduling."""
    settings = get_settings()
    path = os.path.join(settings.graph_output_dir, f"graph_{int(assignment_id)}.dot")
    try:
        os.makedirs(settings.graph_output_dir, exist_ok=True)
        with open(path, "w", encoding="utf-8") as output:
            output.write(to_dot(graph, highlight))
    except OSError as exc:
        logger.warning(f"Could not export dependency graph for assignment {assignment_id}: {exc}")
        return None
    return path


def _resolve(
    db: Session,
    assignment: Assignment,
    topics: List[Topic],
    pairs: List[Tuple[int, List[Any]]],
    assign: bool,
) -> DependencyResolution:
    graph = build_dependency_graph(pairs)
    try:
        layers = common_start_time_layers(graph)
        resolution = DependencyResolution(acyclic=True, layers=layers, topological_order=topological_order(graph))
    except CyclicDependencyError as error:
        logger.warning(f"Assignment {assignment.id}: cyclic topic dependencies {error.cycle}")
        resolution = DependencyResolution(acyclic=False, cycle=list(error.cycle), messages=[error.message])

    if resolution.acyclic and assign and assignment.staggered_deadline:
        plan = assign_deadlines(db, assignment, resolution.layers)
        resolution.messages.extend(plan.messages)

    names = {topic.id: topic.topic_name for topic in topics}
    named_graph = build_dependency_graph(pairs, names.get)
    highlight = [names[topic_id] for topic_id in resolution.cycle] or None
    resolution.graph_path = export_dependency_graph(assignment.id, named_graph, highlight)
    return resolution


def save_topic_dependencies(db: Session, assignment_id: int, dependencies: Dict[int, Any]) -> DependencyResolution:
    """Store the submitted edges, then layer the topics and derive staggered deadlines.

    Edges are kept even when they form a cycle so the instructor can see and
    fix them; layering and deadlines are skipped in that case.
    """
    assignment = get_assignment(db, assignment_id)
    topics = db.query(Topic).filter(Topic.assignment_id == assignment.id).order_by(Topic.id).all()
    pairs = dependency_pairs(topics, dependencies)

    replace_topic_dependencies(db, topics, pairs)
    resolution = _resolve(db, assignment, topics, pairs, assign=True)
    db.commit()

    logger.info(
        f"Saved topic dependencies for assignment {assignment.id}: "
        f"acyclic={resolution.acyclic}, layers={resolution.layers}"
    )
    return resolution


def resolve_topic_dependencies(db: Session, assignment_id: int) -> DependencyResolution:
    assignment = get_assignment(db, assignment_id)
    topics = db.query(Topic).filter(Topic.assignment_id == assignment.id).order_by(Topic.id).all()
    return _resolve(db, assignment, topics, stored_dependency_pairs(db, topics), assign=False)
