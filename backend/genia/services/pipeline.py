"""
Generation Pipeline - quota-gated multi-stage document generation.

FLOW (one run, strictly sequential):
Quota check
-> OUTLINING   outline request (sections in order)
-> WRITING i/N for each section: prose request, then image request
               section handed to the layout policy immediately
-> ASSEMBLING  export the file, THEN debit one credit, THEN persist
-> DONE

FAILURE RULES:
- Quota exhausted or a run already in flight: rejected before any work
- Outline or prose failure: run ends FAILED, nothing exported, no debit
- Image failure, empty or undecodable image: the section continues without an image
- Export failure: run ends FAILED, no debit
- No automatic retries anywhere
"""
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional
import logging
import re

from genia import config
from genia.errors import (
    ExportFailure,
    GeniaError,
    ImageUnavailable,
    PipelineBusy,
    PipelineStageFailure,
    QuotaExhausted,
)
from genia.models.generation import (
    ExportedFile,
    GenerationRequest,
    GenerationResult,
    OutputKind,
    PipelineProgress,
    PipelineState,
)
from genia.models.session import Session
from genia.services import layout
from genia.services.content_provider import content_provider as default_provider
from genia.services.ledger import license_ledger
from genia.services.renderers import builder_for, export_filename, is_placeable_image
from genia.services.session_store import session_store

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[PipelineProgress], None]

ACTIVE_STATES = (PipelineState.OUTLINING, PipelineState.WRITING, PipelineState.ASSEMBLING)


def _safe_filename(filename: str) -> str:
    return re.sub(r'[\\/:*?"<>|]', "_", filename)


class GenerationPipeline:
    """
    Drives one generation run at a time for a session.

    Collaborators (content provider, ledger, store, renderer factory) are
    injected so the run can be exercised without network or database.
    """

    def __init__(
        self,
        provider=None,
        ledger=None,
        store=None,
        builder_factory=builder_for,
        output_dir: Optional[str] = config.OUTPUT_DIR,
    ):
        self.provider = provider or default_provider
        self.ledger = ledger or license_ledger
        self.store = store or session_store
        self.builder_factory = builder_factory
        self.output_dir = output_dir
        self.state = PipelineState.IDLE
        self._on_progress: Optional[ProgressCallback] = None

    @property
    def busy(self) -> bool:
        return self.state in ACTIVE_STATES

    async def generate(
        self,
        session: Session,
        request: GenerationRequest,
        on_progress: Optional[ProgressCallback] = None,
    ) -> GenerationResult:
        """
        Run the full pipeline for `request`.

        Raises PipelineBusy or QuotaExhausted before any work starts.
        Every later failure is returned as a FAILED result.
        """
        if self.busy:
            raise PipelineBusy()
        if not self.ledger.check_quota(session):
            logger.warning(f"Quota exhausted for {session.uid}; generation blocked")
            raise QuotaExhausted()

        self._on_progress = on_progress
        start_time = datetime.now(timezone.utc)
        result = GenerationResult(
            status=PipelineState.OUTLINING,
            kind=request.kind,
            subject=request.subject,
        )
        try:
            await self._run(session, request, result)
        except PipelineStageFailure as e:
            self._fail(result, e)
        except Exception as e:
            # Unexpected faults still end the run as a plain failure
            self._fail(result, PipelineStageFailure("pipeline", str(e), cause=e))
        finally:
            if self.state in ACTIVE_STATES:
                self.state = PipelineState.FAILED
            self._on_progress = None
            result.quota_after = session.quota
            result.execution_time_ms = int((datetime.now(timezone.utc) - start_time).total_seconds() * 1000)

        logger.info(
            f"Generation {result.status.value} for {session.uid}: {request.kind.value} "
            f"'{request.subject}' {result.sections_written}/{result.sections_total} sections "
            f"in {result.execution_time_ms}ms"
        )
        return result

    async def _run(self, session: Session, request: GenerationRequest, result: GenerationResult) -> None:
        is_document = request.kind == OutputKind.DOCUMENT

        # Outline
        self._transition(
            PipelineState.OUTLINING,
            message="Architecture du livre..." if is_document else "Architecture de la présentation...",
        )
        try:
            sections = await self.provider.outline(
                request.subject,
                request.kind,
                request.language,
                request.section_count,
                request.style,
            )
        except Exception as e:
            raise PipelineStageFailure("outline", f"Outline request failed: {e}", cause=e)
        if not sections:
            raise PipelineStageFailure("outline", "Outline is empty")
        total = len(sections)
        result.sections_total = total

        builder = self.builder_factory(request.kind, title=request.subject)
        if is_document:
            cover = await self._request_image(f"Book Cover: {request.subject}", result)
            layout.layout_cover(builder, request.subject, cover)
        else:
            layout.layout_title_slide(builder, request.subject)

        # Sections, one at a time and in outline order
        for index, section in enumerate(sections):
            self._transition(
                PipelineState.WRITING,
                index=index,
                total=total,
                message=(
                    f"Rédaction Chapitre {index + 1}/{total}..."
                    if is_document else f"Slide: {section.title}..."
                ),
            )
            try:
                prose = await self.provider.write_section(
                    section.title,
                    section.brief,
                    request.language,
                    request.depth,
                )
            except Exception as e:
                raise PipelineStageFailure("write", f"Section {index + 1}/{total} failed: {e}", cause=e)

            image = await self._request_image(section.image_prompt or section.title, result)
            if is_document:
                layout.layout_document_section(builder, section.title, prose, image)
            else:
                layout.layout_deck_slide(builder, section.title, prose, image)
            result.sections_written += 1

        # Assembly: export first, debit only once the file exists
        self._transition(PipelineState.ASSEMBLING, index=total, total=total, message="Finalisation...")
        result.file = self._export(builder, request)

        self.ledger.debit(session, request.kind)
        if not await self.store.save(session):
            result.warnings.append("Session could not be persisted")

        result.status = PipelineState.DONE
        self._transition(PipelineState.DONE, index=total, total=total, message="Terminé")

    async def _request_image(self, prompt: str, result: GenerationResult) -> Optional[bytes]:
        """Image for a prompt, or None. Never fails the run."""
        try:
            image = await self.provider.render_image(prompt)
            if not image:
                raise ImageUnavailable(f"No image returned for '{prompt[:60]}'")
            if not is_placeable_image(image):
                raise ImageUnavailable(f"Undecodable image returned for '{prompt[:60]}'")
            return image
        except Exception as e:
            if not isinstance(e, ImageUnavailable):
                e = ImageUnavailable(f"Image request failed: {e}")
            logger.warning(e.message)
            result.images_missing += 1
            return None

    def _export(self, builder, request: GenerationRequest) -> ExportedFile:
        filename = export_filename(request.kind, request.subject)
        try:
            content = builder.export()
            path = None
            if self.output_dir:
                target = Path(self.output_dir)
                target.mkdir(parents=True, exist_ok=True)
                path = target / _safe_filename(filename)
                path.write_bytes(content)
        except Exception as e:
            raise ExportFailure(f"Export of {filename} failed: {e}", cause=e)

        logger.info(f"Exported {filename} ({len(content)} bytes)")
        return ExportedFile(
            filename=filename,
            media_type=builder.media_type,
            content=content,
            path=str(path) if path else None,
        )

    def _fail(self, result: GenerationResult, error: GeniaError) -> None:
        result.status = PipelineState.FAILED
        result.error = error
        result.failed_stage = getattr(error, "stage", None)
        result.file = None
        logger.error(f"Generation failed at {result.failed_stage}: {error.message}")
        self._transition(PipelineState.FAILED, message="Erreur de génération.")

    def _transition(self, state: PipelineState, index: int = 0, total: int = 0, message: str = "") -> None:
        self.state = state
        if self._on_progress is not None:
            self._on_progress(PipelineProgress(state=state, index=index, total=total, message=message))


# Global pipeline instance
generation_pipeline = GenerationPipeline()
