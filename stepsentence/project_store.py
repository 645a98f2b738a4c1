"""Persists projects and their sentences."""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import List, Optional

from .audio_store import AudioFileStore
from .exceptions import ProjectNotFoundError, ProjectStoreError
from .models import Project
from .utils import ensure_dir_exists

logger = logging.getLogger(__name__)

class ProjectStore(ABC):
    """Abstract base class for project persistence."""

    @abstractmethod
    def save(self, project: Project) -> None:
        """
        Creates or replaces a stored project together with its sentences.

        Raises:
            ProjectStoreError: If the project cannot be written.
        """
        pass

    @abstractmethod
    def load(self, project_id: str) -> Project:
        """
        Loads a project by id.

        Raises:
            ProjectNotFoundError: If no project has that id.
            ProjectStoreError: If the stored data is unreadable.
        """
        pass

    @abstractmethod
    def list_projects(self) -> List[Project]:
        """Returns all stored projects, newest first."""
        pass

    @abstractmethod
    def delete(self, project_id: str) -> None:
        """
        Deletes a project and everything it owns.

        Raises:
            ProjectNotFoundError: If no project has that id.
        """
        pass


class JsonProjectStore(ProjectStore):
    """Stores each project as <root>/projects/<project_id>.json."""

    PROJECTS_FOLDER = "projects"

    def __init__(self, root_dir: str, audio_store: Optional[AudioFileStore] = None):
        """
        Initializes the JsonProjectStore.

        Args:
            root_dir: Storage root directory.
            audio_store: When given, deleting a project also removes its
                         recordings and its imported source audio.
        """
        self.projects_dir = os.path.join(root_dir, self.PROJECTS_FOLDER)
        self.audio_store = audio_store
        ensure_dir_exists(self.projects_dir)

    def _path_for(self, project_id: str) -> str:
        # Ids name a file directly inside projects_dir
        if (not project_id or project_id in (".", "..")
                or any(sep in project_id for sep in ("/", "\\", os.sep))):
            raise ProjectStoreError(f"Invalid project id: {project_id!r}")
        return os.path.join(self.projects_dir, f"{project_id}.json")

    def save(self, project: Project) -> None:
        path = self._path_for(project.id)
        tmp_path = f"{path}.tmp"
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(project.to_dict(), f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save project {project.id} to {path}: {e}", exc_info=True)
            raise ProjectStoreError(f"Could not save project {project.id}: {e}") from e
        logger.info(f"Saved project '{project.title}' ({project.id}) with {project.total_count} sentences.")

    def load(self, project_id: str) -> Project:
        path = self._path_for(project_id)
        if not os.path.isfile(path):
            raise ProjectNotFoundError(f"Project not found: {project_id}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return Project.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to load project {project_id} from {path}: {e}", exc_info=True)
            raise ProjectStoreError(f"Could not load project {project_id}: {e}") from e

    def list_projects(self) -> List[Project]:
        projects = []
        for filename in sorted(os.listdir(self.projects_dir)):
            if not filename.endswith(".json"):
                continue
            project_id = filename[:-len(".json")]
            try:
                projects.append(self.load(project_id))
            except ProjectStoreError as e:
                logger.warning(f"Skipping unreadable project file {filename}: {e}")
        projects.sort(key=lambda p: p.created_at, reverse=True)
        return projects

    def delete(self, project_id: str) -> None:
        project = self.load(project_id)
        if self.audio_store is not None:
            self.audio_store.remove_project_recordings(project.id)
            if project.source_audio_file_name:
                self.audio_store.remove(project.source_audio_file_name)
        try:
            os.remove(self._path_for(project_id))
        except OSError as e:
            logger.error(f"Failed to delete project file for {project_id}: {e}", exc_info=True)
            raise ProjectStoreError(f"Could not delete project {project_id}: {e}") from e
        logger.info(f"Deleted project '{project.title}' ({project_id}) and its {project.total_count} sentences.")
