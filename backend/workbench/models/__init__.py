from workbench.models.project import Project
from workbench.models.project_file import ProjectFile
from workbench.models.conversation import Conversation

__all__ = ["Project", "ProjectFile", "Conversation"]
