from __future__ import annotations

from flask import Blueprint, g, request

from app.imatrix.api import ApiError, dump, dump_many, get_or_404, ok, parse_body, query_limit
from app.imatrix.db import db_session
from app.imatrix.models import User
from app.imatrix.modules.solutions.models import Solution
from app.imatrix.modules.solutions.schemas import SolutionIn, SolutionOut, SolutionUpdate
from app.imatrix.modules.solutions.service import create_solution, delete_solution, update_solution
from app.imatrix.rbac import require_role

bp = Blueprint("solutions", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


@bp.get("")
def solutions_list():
    s = db_session()
    search = (request.args.get("search") or "").strip()

    q = s.query(Solution)
    if search:
        like = f"%{search}%"
        q = q.filter((Solution.name.ilike(like)) | (Solution.description.ilike(like)))

    solutions = q.order_by(Solution.created_at.desc(), Solution.id.desc()).limit(query_limit()).all()
    return ok(dump_many(SolutionOut, solutions))


@bp.get("/id/<int:solution_id>")
def solutions_detail(solution_id: int):
    s = db_session()
    return ok(dump(SolutionOut, get_or_404(s, Solution, solution_id, "Solution")))


@bp.get("/<slug>")
def solutions_by_slug(slug: str):
    s = db_session()
    solution = s.query(Solution).filter(Solution.slug == slug).one_or_none()
    if not solution:
        raise ApiError(404, "Solution not found")
    return ok(dump(SolutionOut, solution))


@bp.post("")
@require_role("ADMIN", "EDITOR")
def solutions_create():
    s = db_session()
    payload = parse_body(SolutionIn)
    solution = create_solution(s, payload, _current_user())
    return ok(dump(SolutionOut, solution), status=201)


@bp.patch("/<int:solution_id>")
@require_role("ADMIN", "EDITOR")
def solutions_update(solution_id: int):
    s = db_session()
    solution = get_or_404(s, Solution, solution_id, "Solution")
    changes = parse_body(SolutionUpdate).changes()
    solution = update_solution(s, solution, changes, _current_user())
    return ok(dump(SolutionOut, solution))


@bp.delete("/<int:solution_id>")
@require_role("ADMIN")
def solutions_delete(solution_id: int):
    s = db_session()
    solution = get_or_404(s, Solution, solution_id, "Solution")
    delete_solution(s, solution, _current_user())
    return ok(message="Solution deleted")
