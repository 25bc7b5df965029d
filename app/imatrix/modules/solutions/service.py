from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.imatrix.audit import audit_log
from app.imatrix.modules.solutions.models import Solution
from app.imatrix.slugs import unique_slug

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.imatrix.models import User
    from app.imatrix.modules.solutions.schemas import SolutionIn


def create_solution(s: "Session", payload: "SolutionIn", user: "User") -> Solution:
    solution = Solution(
        name=payload.name,
        slug=unique_slug(s, Solution, payload.name),
        description=payload.description,
        benefits=payload.benefits,
        features=payload.features,
    )
    s.add(solution)
    s.commit()

    audit_log(user.email, "CREATE", "Solution", solution.id, {"name": solution.name})
    return solution


def update_solution(s: "Session", solution: Solution, changes: dict[str, Any], user: "User") -> Solution:
    if "name" in changes:
        solution.slug = unique_slug(s, Solution, changes["name"], exclude_id=solution.id)
    for field, value in changes.items():
        setattr(solution, field, value)
    s.commit()

    audit_log(user.email, "UPDATE", "Solution", solution.id, {"name": solution.name})
    return solution


def delete_solution(s: "Session", solution: Solution, user: "User") -> None:
    solution_id, name = solution.id, solution.name
    s.delete(solution)
    s.commit()

    audit_log(user.email, "DELETE", "Solution", solution_id, {"name": name})
