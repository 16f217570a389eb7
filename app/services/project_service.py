# app/services/project_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from app.core.errors import NotFound, ValidationError
from app.core.slugs import ensure_unique_slug, slugify
from app.models.catalog import Category
from app.models.order import Order
from app.models.project import Project, ProjectImage
from app.repositories.project_repo import ProjectRepository
from app.schemas.project import (
    ProjectCreate,
    ProjectImageCreate,
    ProjectImageUpdate,
    ProjectUpdate,
)

logger = logging.getLogger(__name__)

# Gallery cap per project
MAX_PROJECT_IMAGES = 7


class ProjectService:
    """
    Business logic for portfolio projects & their gallery.

    Responsibilities:
      - slug generation & uniqueness
      - public visibility (unpublished projects behave as missing)
      - gallery ordering and the per-project image cap
    """

    def __init__(self, repo: ProjectRepository):
        self.repo = repo

    # ----- Helpers -----

    def _unique_slug(self, session: Session, raw: str) -> str:
        base_slug = slugify(raw, fallback="project")
        return ensure_unique_slug(base_slug, lambda s: self.repo.get_by_slug(session, s))

    @staticmethod
    def _check_links(
        session: Session,
        category_id: uuid.UUID | None,
        order_id: uuid.UUID | None,
    ) -> None:
        if category_id is not None and session.get(Category, category_id) is None:
            raise ValidationError("Category does not exist", field="category_id")
        if order_id is not None and session.get(Order, order_id) is None:
            raise ValidationError("Order does not exist", field="order_id")

    # ----- Projects -----

    def list_projects(
        self,
        session: Session,
        include_unpublished: bool = False,
        published: bool | None = None,
        category_id: uuid.UUID | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Project]:
        """
        Public callers only ever see published projects; admins may filter
        on the published flag or see everything.
        """
        if not include_unpublished:
            published = True
        return self.repo.list_projects(
            session,
            published=published,
            category_id=category_id,
            search=search.strip() if search else None,
            skip=skip,
            limit=limit,
        )

    def get_project(
        self,
        session: Session,
        project_id: uuid.UUID,
        include_unpublished: bool = True,
    ) -> Project:
        project = self.repo.get_by_id(session, project_id)
        if not project or (not include_unpublished and not project.is_published):
            raise NotFound("Project not found")
        return project

    def get_by_id_or_slug(
        self,
        session: Session,
        id_or_slug: str,
        include_unpublished: bool = False,
    ) -> Project:
        project = None
        try:
            project = self.repo.get_by_id(session, uuid.UUID(id_or_slug))
        except ValueError:
            pass
        if project is None:
            project = self.repo.get_by_slug(session, id_or_slug)

        if not project or (not include_unpublished and not project.is_published):
            raise NotFound("Project not found")
        return project

    def create_project(self, session: Session, payload: ProjectCreate) -> Project:
        self._check_links(session, payload.category_id, payload.order_id)

        data = payload.model_dump(exclude={"slug"})
        project = Project(
            **data,
            slug=self._unique_slug(session, payload.slug or payload.title),
        )
        return self.repo.save(session, project)

    def update_project(
        self,
        session: Session,
        project_id: uuid.UUID,
        payload: ProjectUpdate,
    ) -> Project:
        """
        Partial update. Explicit nulls clear optional links/fields.
        """
        project = self.get_project(session, project_id)
        changes = payload.model_dump(exclude_unset=True)

        self._check_links(session, changes.get("category_id"), changes.get("order_id"))

        slug = changes.pop("slug", None)
        if slug is not None:
            new_base_slug = slugify(slug, fallback="project")
            if new_base_slug != project.slug:
                project.slug = self._unique_slug(session, new_base_slug)

        for field in ("title", "is_published"):
            if field in changes and changes[field] is None:
                changes.pop(field)

        for field, value in changes.items():
            setattr(project, field, value)

        project.updated_at = datetime.now(timezone.utc)
        return self.repo.save(session, project)

    def delete_project(self, session: Session, project_id: uuid.UUID) -> None:
        """
        Delete a project and all its gallery images.

        Refused while sessions still reference the project.
        """
        project = self.get_project(session, project_id)
        if self.repo.count_sessions(session, project.id):
            raise ValidationError("Project has scheduled sessions; delete them first")
        self.repo.delete_with_images(session, project)
        logger.info(f"Deleted project {project_id} and its gallery")

    # ----- Gallery images -----

    def list_images(
        self,
        session: Session,
        project_id: uuid.UUID,
        include_unpublished: bool = True,
    ) -> list[ProjectImage]:
        """
        List gallery images for a project (sorted by sort_order).
        """
        self.get_project(session, project_id, include_unpublished=include_unpublished)
        return self.repo.list_images(session, project_id)

    def add_image(
        self,
        session: Session,
        project_id: uuid.UUID,
        payload: ProjectImageCreate,
    ) -> ProjectImage:
        """
        Append an image to the gallery (or insert at an explicit sort_order).
        """
        project = self.get_project(session, project_id)
        existing = self.repo.list_images(session, project.id)
        if len(existing) >= MAX_PROJECT_IMAGES:
            raise ValidationError(
                f"A project can hold at most {MAX_PROJECT_IMAGES} images"
            )

        sort_order = payload.sort_order
        if sort_order is None:
            sort_order = max((img.sort_order for img in existing), default=-1) + 1

        image = ProjectImage(
            project_id=project.id,
            url=payload.url,
            caption=payload.caption,
            sort_order=sort_order,
        )
        return self.repo.save_image(session, image)

    def update_image(
        self,
        session: Session,
        image_id: uuid.UUID,
        payload: ProjectImageUpdate,
    ) -> ProjectImage:
        image = self.repo.get_image(session, image_id)
        if not image:
            raise NotFound("Project image not found")

        if payload.url is not None:
            url = payload.url.strip()
            if not url:
                raise ValidationError("url cannot be empty", field="url")
            image.url = url

        if payload.caption is not None:
            image.caption = payload.caption.strip() or None

        if payload.sort_order is not None:
            image.sort_order = payload.sort_order

        return self.repo.save_image(session, image)

    def remove_image(self, session: Session, image_id: uuid.UUID) -> None:
        image = self.repo.get_image(session, image_id)
        if not image:
            raise NotFound("Project image not found")
        self.repo.delete_image(session, image)
