"""
HTML pages: intro, project dashboard and the graph editor.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from vaev.db.database import get_db
from vaev.db.models import Project
from vaev.db.repositories import ProjectRepository
from vaev.dependencies import get_current_user, owned_project
from vaev.domain.entities import UserRecord
from vaev.security.guards import redirect_guard
from vaev.templating import render_page

router = APIRouter()

require_login = redirect_guard()


@router.get("/")
def index(request: Request, user: Optional[UserRecord] = Depends(get_current_user)):
    """
    Intro page for guests; signed-in users go straight to their projects.
    """
    if user is not None:
        return RedirectResponse("/dashboard/projects", status_code=303)
    return render_page(request, "intro.html")


@router.get("/dashboard/projects")
def dashboard(
    request: Request,
    user: UserRecord = Depends(require_login),
    db: Session = Depends(get_db),
):
    """
    List the caller's projects, newest first.
    """
    projects = ProjectRepository(db).get_owner_projects(user["id"])
    return render_page(request, "dashboard.html", projects=projects)


@router.get("/project/{id}")
def editor(request: Request, project: Project = Depends(owned_project(require_login))):
    """
    The graph editor shell; the graph itself arrives over the snapshot stream.
    """
    return render_page(request, "editor.html", project=project)
