from __future__ import annotations

from enum import Enum


class NodeLabel(str, Enum):
    """
    Fixed primary labels of the knowledge graph.
    Every knowledge item carries NODE plus exactly one NodeType label.
    """
    NODE = "Node"
    TAG = "Tag"


class NodeType(str, Enum):
    """
    Closed set of knowledge item kinds.

    The value is stored in the `type` property AND spliced into Cypher as a
    second label, so only members of this enum may ever reach query text.
    """
    NOTE = "Note"
    CONCEPT = "Concept"
    IDEA = "Idea"
    QUESTION = "Question"
    TASK = "Task"
    REFERENCE = "Reference"
    PERSON = "Person"
    PROJECT = "Project"


class RelationshipType(str, Enum):
    """
    Closed vocabulary of directed edges between knowledge items.

    Convention:
    - Direction is meaningful (source -> target)
    - The value is used verbatim as the Cypher relationship type
    """

    RELATED_TO = "RELATED_TO"       # generic association
    DEPENDS_ON = "DEPENDS_ON"       # source cannot be understood/done without target
    PART_OF = "PART_OF"             # source is a component of target
    REFERENCES = "REFERENCES"       # source cites target
    SUPPORTS = "SUPPORTS"           # source is evidence for target
    CONTRADICTS = "CONTRADICTS"     # source is evidence against target
    ANSWERS = "ANSWERS"             # Note/Idea -> Question
    DERIVED_FROM = "DERIVED_FROM"   # source was produced from target


# Structural edge between a knowledge item and its tags; not part of
# RelationshipType so callers can never create or delete it directly.
HAS_TAG = "HAS_TAG"
