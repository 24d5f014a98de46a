import logging
from collections.abc import Awaitable, Callable

from openai import AsyncOpenAI
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from workbench.models.project_file import ProjectFile
from workbench.pipeline.confirmation import ConfirmationGate, confirmation_gate
from workbench.pipeline.errors import MirrorError, OracleError
from workbench.pipeline.generation import generate_code, generate_project_structure
from workbench.pipeline.prompts.generation import build_web_page_request
from workbench.schemas.actions import (
    Action,
    AddFileAction,
    CreateProjectAction,
    CreateWebPageAction,
    DeleteFileAction,
    GenerateCodeSnippetAction,
    ModifyApkAction,
    RunPythonAction,
    UpdateFileAction,
)
from workbench.schemas.pipeline import ActionOutcome
from workbench.schemas.project import ProjectCreate, ProjectResponse
from workbench.schemas.project_file import ProjectFileCreate, ProjectFileResponse, ProjectFileUpdate
from workbench.services import apk_service, file_service, project_service
from workbench.services.file_mirror import FileMirror
from workbench.services.python_executor import ExecutionResult, execute_code

logger = logging.getLogger(__name__)

# Never run on first request; parked in the confirmation gate instead
REQUIRES_CONFIRMATION = frozenset({"modify_apk"})

NOT_FOUND_OR_PROCESSED = "Action not found or already processed."
CANCELLED_BY_USER = "Action cancelled by user."
GENERATOR_UNAVAILABLE = "The code generator could not produce a usable result. Please try again."


def _file_data(file: ProjectFile) -> dict:
    return ProjectFileResponse.model_validate(file).model_dump(mode="json", by_alias=True)


class ActionExecutor:
    """Runs validated actions against the project store, the mirror and the sandbox.

    ``execute`` and ``confirm`` always return an ActionOutcome; failures are
    logged and reported as ``success=False`` with a readable message.
    """

    def __init__(
        self,
        db: AsyncSession,
        client: AsyncOpenAI,
        mirror: FileMirror,
        gate: ConfirmationGate = confirmation_gate,
        run_python: Callable[[str], Awaitable[ExecutionResult]] = execute_code,
    ):
        self.db = db
        self.client = client
        self.mirror = mirror
        self.gate = gate
        self.run_python = run_python
        self._handlers: dict[str, Callable[..., Awaitable[ActionOutcome]]] = {
            "create_project": self._create_project,
            "add_file": self._add_file,
            "update_file": self._update_file,
            "delete_file": self._delete_file,
            "create_web_page": self._create_web_page,
            "modify_apk": self._modify_apk,
            "run_python": self._run_python,
            "generate_code_snippet": self._generate_code_snippet,
        }

    async def execute(self, action: Action, user_id: str | None = None, *, confirmed: bool = False) -> ActionOutcome:
        action_type = getattr(action, "type", None)
        handler = self._handlers.get(action_type)
        if handler is None:
            return ActionOutcome(success=False, message=f"Unsupported action type: {action_type}")

        if action_type in REQUIRES_CONFIRMATION and not confirmed:
            return self._request_confirmation(action, user_id)

        try:
            return await handler(action)
        except Exception:
            logger.exception("Error executing %s action", action_type)
            try:
                await self.db.rollback()
            except Exception:
                logger.exception("Rollback after failed %s action also failed", action_type)
            return ActionOutcome(success=False, message=f"Error executing the {action_type} action.")

    async def confirm(self, token: str, confirmed: bool) -> ActionOutcome:
        pending = self.gate.take(token)
        if pending is None:
            return ActionOutcome(success=False, message=NOT_FOUND_OR_PROCESSED)

        if not confirmed:
            logger.info("Pending %s action %s denied", pending.action.type, token)
            return ActionOutcome(success=False, message=CANCELLED_BY_USER)

        logger.info("Pending %s action %s confirmed", pending.action.type, token)
        return await self.execute(pending.action, pending.requesting_user, confirmed=True)

    def _request_confirmation(self, action: ModifyApkAction, user_id: str | None) -> ActionOutcome:
        token = self.gate.register(action, user_id)
        return ActionOutcome(
            success=False,
            message="Modifying an APK is a complex operation and needs your confirmation.",
            requires_confirmation=True,
            confirmation_message=apk_service.describe_modification(action),
            action_id=token,
        )

    async def _mirror(self, op: Callable[..., Awaitable[None]], *args) -> bool:
        """Best-effort mirror write. The database record is authoritative."""
        try:
            await op(*args)
            return True
        except MirrorError as e:
            logger.warning("Mirror %s%r failed: %s", op.__name__, args[:2], e)
            return False

    # ─── Handlers ──────────────────────────────────────────

    async def _create_project(self, action: CreateProjectAction) -> ActionOutcome:
        try:
            structure = await generate_project_structure(
                self.client, action.project_type, action.description or action.name, action.template
            )
        except OracleError as e:
            logger.warning("Project structure generation failed: %s", e)
            return ActionOutcome(success=False, message=f"Error creating the project. {GENERATOR_UNAVAILABLE}")

        project = await project_service.create_project(self.db, ProjectCreate(
            name=action.name,
            type=action.project_type,
            description=action.description or f"{action.project_type} project created with AI",
        ))
        project_data = ProjectResponse.model_validate(project).model_dump(mode="json", by_alias=True)

        created: list[ProjectFile] = []
        try:
            await self.mirror.create_project(project.id)
            for generated in structure.files:
                file = await file_service.create_file(self.db, project.id, ProjectFileCreate(
                    path=generated.path,
                    name=generated.name,
                    content=generated.content,
                    type=generated.type,
                ))
                created.append(file)
                await self.mirror.create_file(project.id, generated.path, generated.content)
        except (MirrorError, SQLAlchemyError) as e:
            # Records created so far are kept
            logger.error("Project %s left partially created after %d files: %s", project.id, len(created), e)
            files_data = [_file_data(f) for f in created]
            await self.db.rollback()
            return ActionOutcome(
                success=False,
                message=(
                    f'Project "{action.name}" was created, but setting up its files stopped after '
                    f"{len(created)} of {len(structure.files)} files."
                ),
                data={"project": project_data, "files": files_data},
            )

        return ActionOutcome(
            success=True,
            message=f'Project "{action.name}" created with {len(created)} files.',
            data={"project": project_data, "files": [_file_data(f) for f in created]},
        )

    async def _add_file(self, action: AddFileAction) -> ActionOutcome:
        if not await project_service.get_project(self.db, action.project_id):
            return ActionOutcome(success=False, message="Project not found.")

        file = await file_service.create_file(self.db, action.project_id, ProjectFileCreate(
            path=action.path,
            name=action.name,
            content=action.content,
            type=action.file_type,
        ))
        await self._mirror(self.mirror.create_file, action.project_id, action.path, action.content)

        return ActionOutcome(
            success=True,
            message=f'File "{action.name}" added.',
            data={"file": _file_data(file)},
        )

    async def _update_file(self, action: UpdateFileAction) -> ActionOutcome:
        file = await file_service.get_file(self.db, action.file_id)
        if not file:
            return ActionOutcome(success=False, message="File not found.")
        old_path = file.path

        updates = ProjectFileUpdate.model_validate(
            action.model_dump(include={"content", "path", "name"}, exclude_none=True)
        )
        file = await file_service.update_file(self.db, action.file_id, updates)

        if file.path != old_path:
            await self._mirror(self.mirror.create_file, file.project_id, file.path, file.content)
            await self._mirror(self.mirror.delete_file, file.project_id, old_path)
        elif action.content is not None:
            await self._mirror(self.mirror.update_file, file.project_id, file.path, file.content)

        return ActionOutcome(
            success=True,
            message=f'File "{file.name}" updated.',
            data={"file": _file_data(file)},
        )

    async def _delete_file(self, action: DeleteFileAction) -> ActionOutcome:
        file = await file_service.get_file(self.db, action.file_id)
        if not file:
            return ActionOutcome(success=False, message="File not found.")
        project_id, path, name = file.project_id, file.path, file.name

        if not await file_service.delete_file(self.db, action.file_id):
            return ActionOutcome(success=False, message="Could not delete the file.")
        await self._mirror(self.mirror.delete_file, project_id, path)

        return ActionOutcome(success=True, message=f'File "{name}" deleted.')

    async def _create_web_page(self, action: CreateWebPageAction) -> ActionOutcome:
        if not await project_service.get_project(self.db, action.project_id):
            return ActionOutcome(success=False, message="Project not found.")

        request = build_web_page_request(action.page_name, action.page_type, action.style, action.features)
        try:
            structure = await generate_project_structure(self.client, "web", request)
        except OracleError as e:
            logger.warning("Web page generation failed: %s", e)
            return ActionOutcome(success=False, message=f"Error creating the page. {GENERATOR_UNAVAILABLE}")

        created: list[ProjectFile] = []
        for generated in structure.files:
            path = f"pages/{action.page_name}/{generated.name}"
            try:
                file = await file_service.create_file(self.db, action.project_id, ProjectFileCreate(
                    path=path,
                    name=f"{action.page_name}-{generated.name}",
                    content=generated.content,
                    type=generated.type,
                ))
            except SQLAlchemyError as e:
                logger.error("Page %s left partially created after %d files: %s", action.page_name, len(created), e)
                files_data = [_file_data(f) for f in created]
                await self.db.rollback()
                return ActionOutcome(
                    success=False,
                    message=(
                        f'Page "{action.page_name}" stopped after {len(created)} of '
                        f"{len(structure.files)} files."
                    ),
                    data={"files": files_data},
                )
            created.append(file)
            await self._mirror(self.mirror.create_file, action.project_id, path, generated.content)

        return ActionOutcome(
            success=True,
            message=f'Page "{action.page_name}" created with {len(created)} files.',
            data={"files": [_file_data(f) for f in created]},
        )

    async def _modify_apk(self, action: ModifyApkAction) -> ActionOutcome:
        """Apply a confirmed APK change to the project's decompiled sources."""
        if not await project_service.get_project(self.db, action.project_id):
            return ActionOutcome(success=False, message="Project not found.")

        files = await file_service.list_files(self.db, action.project_id)
        manifest = next((f for f in files if f.name == apk_service.MANIFEST_NAME), None)
        if manifest is None:
            return ActionOutcome(success=False, message="AndroidManifest.xml not found in project.")
        strings = next((f for f in files if f.path.endswith(apk_service.STRINGS_PATH)), None)

        try:
            changes = apk_service.apply_modification(action, manifest.content, strings.content if strings else None)
        except apk_service.ApkModificationError as e:
            return ActionOutcome(success=False, message=str(e))

        changed: list[ProjectFile] = []
        if changes.manifest is not None:
            changed.append(await file_service.update_file(
                self.db, manifest.id, ProjectFileUpdate(content=changes.manifest)
            ))
        if changes.strings is not None:
            if strings:
                changed.append(await file_service.update_file(
                    self.db, strings.id, ProjectFileUpdate(content=changes.strings)
                ))
            else:
                base = manifest.path.rsplit("/", 1)[0] if "/" in manifest.path else ""
                path = f"{base}/{apk_service.STRINGS_PATH}" if base else apk_service.STRINGS_PATH
                changed.append(await file_service.create_file(
                    self.db,
                    action.project_id,
                    ProjectFileCreate(path=path, name="strings.xml", content=changes.strings, type="xml"),
                    is_modified=True,
                ))

        for file in changed:
            await self._mirror(self.mirror.update_file, file.project_id, file.path, file.content)

        return ActionOutcome(
            success=True,
            message=f"Applied {action.action} to the APK sources.",
            data={"files": [_file_data(f) for f in changed]},
        )

    async def _run_python(self, action: RunPythonAction) -> ActionOutcome:
        result = await self.run_python(action.code)
        return ActionOutcome(
            success=result.success,
            message="Python code ran successfully." if result.success else "Python code failed.",
            data=result.model_dump(),
        )

    async def _generate_code_snippet(self, action: GenerateCodeSnippetAction) -> ActionOutcome:
        try:
            code = await generate_code(self.client, action.description, action.language, action.context)
        except OracleError as e:
            logger.warning("Code generation failed: %s", e)
            return ActionOutcome(success=False, message=f"Error generating code. {GENERATOR_UNAVAILABLE}")

        return ActionOutcome(
            success=True,
            message=f"{action.language} code generated.",
            data={"code": code, "language": action.language},
        )
