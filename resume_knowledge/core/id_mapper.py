"""
Per-turn alias assignment.

Maps entity ids to short aliases (P1, B1, BR1, PG1) that the answer
generator cites instead of raw ids. Order is fixed: pages, then
projects, then bullets within each project, then branches within each
bullet, each kind with its own counter from 1. Given the same ordered
input the same map is produced.

Dependencies: resume_knowledge.models.citation
System role: Alias construction for citation round-trips
"""

from typing import Any

from resume_knowledge.core.citation_grammar import make_alias
from resume_knowledge.models.citation import AliasSource, IdMap


def build_aliases(source: AliasSource) -> IdMap:
    """
    Assign aliases to every entity in `source` that has an id.

    Entities without an id are skipped without consuming a counter. An
    entity listed twice keeps its first alias.
    """
    id_map = IdMap()
    counters = {"page": 0, "project": 0, "bullet": 0, "branch": 0}

    def assign(kind: str, entity_id: str | None) -> None:
        if not entity_id or entity_id in id_map.forward:
            return
        counters[kind] += 1
        id_map.assign(entity_id, make_alias(kind, counters[kind]))

    for page in source.pages:
        assign("page", page.id)

    for project in source.projects:
        assign("project", project.id)
        for bullet in project.bullets:
            assign("bullet", bullet.id)
            for branch in bullet.branches:
                assign("branch", branch.id)

    return id_map


def annotate_resume_context(source: AliasSource, id_map: IdMap) -> dict[str, Any]:
    """
    Alias-tagged résumé structure for the answer generator.

    Raw entity ids never appear in the output; entities without an alias
    in `id_map` are left out.
    """
    pages = [
        {"id": id_map.forward[page.id], "title": page.title}
        for page in source.pages
        if page.id in id_map.forward
    ]
    projects = []
    for project in source.projects:
        if project.id not in id_map.forward:
            continue
        bullets = []
        for bullet in project.bullets:
            if bullet.id not in id_map.forward:
                continue
            bullets.append(
                {
                    "id": id_map.forward[bullet.id],
                    "content": bullet.content,
                    "branches": [
                        {"id": id_map.forward[branch.id], "content": branch.content}
                        for branch in bullet.branches
                        if branch.id in id_map.forward
                    ],
                }
            )
        projects.append(
            {
                "id": id_map.forward[project.id],
                "title": project.title,
                "description": project.description,
                "bullets": bullets,
            }
        )
    return {"pages": pages, "projects": projects}
