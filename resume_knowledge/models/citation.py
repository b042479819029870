"""
Citation domain models.

Alias maps handed to the answer generator and the references resolved
from its output.

Dependencies: pydantic
System role: Citation data structures
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

CitationType = Literal["project", "bullet", "branch", "page"]


class IdMap(BaseModel):
    """
    Bidirectional mapping between entity ids and short aliases.

    Aliases are assigned fresh each turn, so an alias means nothing outside
    the map that produced it.
    """

    forward: dict[str, str] = Field(default_factory=dict, description="entity id -> alias")
    reverse: dict[str, str] = Field(default_factory=dict, description="alias -> entity id")

    def assign(self, entity_id: str, alias: str) -> None:
        self.forward[entity_id] = alias
        self.reverse[alias] = entity_id

    def alias_for(self, entity_id: str) -> str | None:
        return self.forward.get(entity_id)

    def entity_for(self, alias: str) -> str | None:
        return self.reverse.get(alias)

    def merge(self, other: "IdMap") -> "IdMap":
        """
        Combine with a later turn's map.

        On collision the entries of `other` win. Stale forward entries whose
        alias was reassigned are dropped so both directions stay consistent.

        Returns:
            IdMap: New merged map; neither input is modified
        """
        merged = IdMap(forward=dict(self.forward), reverse=dict(self.reverse))
        for alias, entity_id in other.reverse.items():
            previous = merged.reverse.get(alias)
            if previous is not None and merged.forward.get(previous) == alias:
                del merged.forward[previous]
            old_alias = merged.forward.get(entity_id)
            if old_alias is not None and merged.reverse.get(old_alias) == entity_id:
                del merged.reverse[old_alias]
            merged.assign(entity_id, alias)
        return merged

    def __len__(self) -> int:
        return len(self.reverse)


class CitationReference(BaseModel):
    """
    One resolved citation marker.

    Serialized as `{type, text, simpleId, convexId, line_number}`, the
    reference shape chat clients render; attributes stay snake_case.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: CitationType
    text: str = Field(description="Quoted text inside the marker")
    simple_id: str = Field(alias="simpleId", description="Alias as written by the model")
    entity_id: str = Field(alias="convexId", description="Resolved entity id")
    line_number: int | None = Field(default=None, description="Page line reference, if any")


class CitationResolution(BaseModel):
    """Answer text with the references resolved from it."""

    text: str
    references: list[CitationReference] = Field(default_factory=list)


class BranchNode(BaseModel):
    id: str | None = None
    content: str = ""


class BulletNode(BaseModel):
    id: str | None = None
    content: str = ""
    branches: list[BranchNode] = Field(default_factory=list)


class ProjectNode(BaseModel):
    id: str | None = None
    title: str = ""
    description: str | None = None
    bullets: list[BulletNode] = Field(default_factory=list)


class PageNode(BaseModel):
    id: str | None = None
    title: str = ""


class AliasSource(BaseModel):
    """Ordered résumé structure that aliases are assigned from."""

    pages: list[PageNode] = Field(default_factory=list)
    projects: list[ProjectNode] = Field(default_factory=list)
