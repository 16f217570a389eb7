# app/routers/projects.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.auth import get_current_user, is_admin, require_admin
from app.database import get_session
from app.models.user import User
from app.repositories.project_repo import ProjectRepository
from app.schemas.project import (
    ProjectCreate,
    ProjectImageCreate,
    ProjectImageRead,
    ProjectImageUpdate,
    ProjectRead,
    ProjectUpdate,
)
from app.services.project_service import ProjectService

router = APIRouter(tags=["Projects"])

repo = ProjectRepository()
service = ProjectService(repo)


# -------- Public endpoints --------


@router.get("/projects", response_model=list[ProjectRead])
def list_projects(
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
    category_id: uuid.UUID | None = None,
    search: str | None = None,
    published: bool | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
):
    """
    Portfolio listing, newest first.

    - Public visitors only see published projects.
    - Admins see everything and may filter with `published`.
    """
    return service.list_projects(
        session,
        include_unpublished=is_admin(current_user),
        published=published,
        category_id=category_id,
        search=search,
        skip=skip,
        limit=limit,
    )


@router.get("/projects/{id_or_slug}", response_model=ProjectRead)
def get_project(
    id_or_slug: str,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Get a project by id or slug. Unpublished projects are 404 for the public.
    """
    return service.get_by_id_or_slug(
        session,
        id_or_slug,
        include_unpublished=is_admin(current_user),
    )


@router.get(
    "/projects/{project_id}/images",
    response_model=list[ProjectImageRead],
)
def list_project_images(
    project_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    return service.list_images(
        session,
        project_id,
        include_unpublished=is_admin(current_user),
    )


# -------- Admin endpoints --------


@router.post(
    "/projects",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_project(
    payload: ProjectCreate,
    session: Session = Depends(get_session),
):
    return service.create_project(session, payload)


@router.patch(
    "/projects/{project_id}",
    response_model=ProjectRead,
    dependencies=[Depends(require_admin)],
)
def update_project(
    project_id: uuid.UUID,
    payload: ProjectUpdate,
    session: Session = Depends(get_session),
):
    return service.update_project(session, project_id, payload)


@router.delete(
    "/projects/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_project(
    project_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a project and its gallery (admin only).
    """
    service.delete_project(session, project_id)
    return None


@router.post(
    "/projects/{project_id}/images",
    response_model=ProjectImageRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def add_project_image(
    project_id: uuid.UUID,
    payload: ProjectImageCreate,
    session: Session = Depends(get_session),
):
    """
    Add an already-hosted image URL to the gallery (at most 7 per project).
    """
    return service.add_image(session, project_id, payload)


@router.patch(
    "/project-images/{image_id}",
    response_model=ProjectImageRead,
    dependencies=[Depends(require_admin)],
)
def update_project_image(
    image_id: uuid.UUID,
    payload: ProjectImageUpdate,
    session: Session = Depends(get_session),
):
    return service.update_image(session, image_id, payload)


@router.delete(
    "/project-images/{image_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_project_image(
    image_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    service.remove_image(session, image_id)
    return None
