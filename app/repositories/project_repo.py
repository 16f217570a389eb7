# app/repositories/project_repo.py
import uuid

from sqlalchemy import func, or_
from sqlmodel import Session, select

from app.models.project import Project, ProjectImage
from app.models.scheduling import PhotoSession


class ProjectRepository:
    """
    Data access layer for Project & ProjectImage.
    """

    # ----- Projects -----

    def get_by_id(self, session: Session, project_id: uuid.UUID) -> Project | None:
        return session.get(Project, project_id)

    def get_by_slug(self, session: Session, slug: str) -> Project | None:
        stmt = select(Project).where(Project.slug == slug)
        return session.exec(stmt).first()

    def list_projects(
        self,
        session: Session,
        published: bool | None = None,
        category_id: uuid.UUID | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Project]:
        stmt = select(Project)
        if published is not None:
            stmt = stmt.where(Project.is_published == published)
        if category_id is not None:
            stmt = stmt.where(Project.category_id == category_id)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Project.title).like(pattern),
                    func.lower(Project.client_name).like(pattern),
                )
            )
        stmt = stmt.order_by(Project.created_at.desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def save(self, session: Session, project: Project) -> Project:
        session.add(project)
        session.commit()
        session.refresh(project)
        return project

    def delete_with_images(self, session: Session, project: Project) -> None:
        """
        Delete a project and its gallery in one transaction.

        The FK also cascades in Postgres; deleting explicitly keeps SQLite
        (no FK enforcement by default) consistent.
        """
        for image in self.list_images(session, project.id):
            session.delete(image)
        session.delete(project)
        session.commit()

    def count_sessions(self, session: Session, project_id: uuid.UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(PhotoSession)
            .where(PhotoSession.project_id == project_id)
        )
        return int(session.exec(stmt).one() or 0)

    # ----- Project images -----

    def list_images(
        self,
        session: Session,
        project_id: uuid.UUID,
    ) -> list[ProjectImage]:
        stmt = (
            select(ProjectImage)
            .where(ProjectImage.project_id == project_id)
            .order_by(ProjectImage.sort_order, ProjectImage.created_at)
        )
        return session.exec(stmt).all()

    def get_image(self, session: Session, image_id: uuid.UUID) -> ProjectImage | None:
        return session.get(ProjectImage, image_id)

    def save_image(self, session: Session, image: ProjectImage) -> ProjectImage:
        session.add(image)
        session.commit()
        session.refresh(image)
        return image

    def delete_image(self, session: Session, image: ProjectImage) -> None:
        session.delete(image)
        session.commit()
