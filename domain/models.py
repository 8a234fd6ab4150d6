from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from domain.enums import NodeType, RelationshipType


# ============================================================================
# DOMAIN ENTITIES
# Plain values handed to / returned from the repository. The repository keeps
# no copies of them beyond a single call.
# ============================================================================


@dataclass(frozen=True)
class Node:
    """
    Knowledge item (note, concept, question, ...).
    Identity: `id`, generated by the store on creation (None before that).
    Tags are a set semantically; order is kept only for display.
    """
    title: str
    content: str
    type: NodeType
    tags: List[str] = field(default_factory=list)
    id: Optional[str] = None
    created_at: Optional[datetime] = None  # set by the repository, tz-aware
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Relationship:
    """
    Batch of directed edges from one source to one or more targets.
    Each (source, target) pair becomes its own edge with its own id.
    """
    source_id: str
    target_ids: List[str]
    type: RelationshipType
    description: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = None
