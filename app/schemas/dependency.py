from typing import Dict, List, Optional, Union
from pydantic import BaseModel


class TopicDependenciesRequest(BaseModel):
    # topic id -> ids it depends on; 0 or "0" means no dependency
    dependencies: Dict[int, List[Union[int, str]]] = {}


class DependencyResolutionOut(BaseModel):
    ok: bool
    acyclic: bool
    layers: List[List[int]]
    topological_order: List[int]
    cycle: List[int] = []
    messages: List[str] = []
    graph_path: Optional[str] = None
