"""
Two-pass application pipeline.

The prompt pass turns course input into a saved SOP prompt; the SOP pass sends
saved prompts to the SOP model. Both passes walk the record collection in
order, record their outcome in the ``promptPath`` / ``sopPath`` columns and
persist the collection once at the end, so re-running either pass only picks
up new or retryable work.
"""
import re
from pathlib import Path
from typing import List, Optional, Set, Tuple

from ...config import Settings
from ...errors import PromptFileMissing
from ...logging_config import setup_logging
from ...models import (
    FAILED_MISSING_PROMPT,
    FAILED_PROCESSING,
    ApplicationRecord,
    FieldState,
    needs_prompt,
    needs_sop,
)
from ...utils.content_fetcher import ContentFetcher, sanitize_file_name, save_text_file
from ...utils.storage import ApplicationStore
from ..llm.metadata_extractor import MetadataExtractor
from ..llm.sop_generator import SOPGenerator
from ..prompts.prompt_builder import build_sop_prompt

logger = setup_logging(__name__)

PROMPT_SUFFIX = "_prompt.txt"
SOP_SUFFIX = "_sop.txt"
PROMPT_SUFFIX_RE = re.compile(r"_prompt\.txt$", re.IGNORECASE)


def prompt_file_name(course: str, university: str) -> str:
    return f"{sanitize_file_name(course)}_{sanitize_file_name(university)}{PROMPT_SUFFIX}"


def unique_prompt_path(
    directory: Path, course: str, university: str, taken: Optional[Set[str]] = None
) -> Path:
    """Pick a prompt path no other record or existing file uses.

    The first record for a course gets ``<course>_<university>_prompt.txt``;
    later ones get ``_2``, ``_3``... before the suffix.
    """
    taken = taken or set()
    directory = Path(directory)
    base = prompt_file_name(course, university)[: -len(PROMPT_SUFFIX)]
    candidate = directory / f"{base}{PROMPT_SUFFIX}"
    counter = 2
    while candidate.exists() or str(candidate) in taken:
        candidate = directory / f"{base}_{counter}{PROMPT_SUFFIX}"
        counter += 1
    return candidate


def sop_file_name(prompt_path: str) -> str:
    """Derive the SOP file name from the prompt file's own name."""
    name = Path(prompt_path).name
    if PROMPT_SUFFIX_RE.search(name):
        return PROMPT_SUFFIX_RE.sub(SOP_SUFFIX, name)
    return f"{Path(name).stem}{SOP_SUFFIX}"


def read_prompt_file(prompt_path: Optional[str]) -> str:
    """Read a saved prompt in full.

    Raises:
        PromptFileMissing: If the path is unset, not a file, or unreadable
    """
    if not prompt_path or not Path(prompt_path).is_file():
        raise PromptFileMissing(
            f"Prompt file not found for this application: {prompt_path or 'path not specified'}"
        )
    try:
        return Path(prompt_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PromptFileMissing(f"Prompt file could not be read: {prompt_path}: {e}") from e


class ApplicationPipeline:
    """Drives the prompt pass and the SOP pass over the application records."""

    def __init__(
        self,
        settings: Settings,
        store: ApplicationStore,
        fetcher: ContentFetcher,
        extractor: MetadataExtractor,
        generator: SOPGenerator,
    ):
        self.settings = settings
        self.store = store
        self.fetcher = fetcher
        self.extractor = extractor
        self.generator = generator

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApplicationPipeline":
        """Wire the default collaborators for the given configuration."""
        return cls(
            settings,
            store=ApplicationStore(settings.csv_file),
            fetcher=ContentFetcher(settings.resumes_dir, settings.request_timeout),
            extractor=MetadataExtractor(settings),
            generator=SOPGenerator(settings),
        )

    # --- Pass 1: metadata -> prompt ---

    async def build_prompt(
        self, record: ApplicationRecord, taken: Optional[Set[str]] = None
    ) -> Tuple[str, str, Path]:
        """Run the prompt steps for one record.

        Args:
            record: The application to build a prompt for
            taken: Prompt paths already held by other records

        Returns:
            Tuple of course name, university name and the saved prompt path

        Raises:
            SOPWriterError: Or any other error from the fetch/extract/write steps
        """
        course_text = await self.fetcher.fetch_course_text(record.course_input)
        metadata = await self.extractor.extract(course_text)

        resume_text = await self.fetcher.read_resume(record.resume_file)
        if record.resume_file and not resume_text:
            logger.warning(
                f"Could not read resume for {record.candidate_name}, proceeding without it.",
                extra={"candidate": record.candidate_name, "resume_file": record.resume_file},
            )

        prompt_text = build_sop_prompt(metadata, resume_text)
        target = unique_prompt_path(
            self.settings.prompts_dir, metadata.course, metadata.university, taken
        )
        saved_path = save_text_file(target.parent, target.name, prompt_text)
        logger.info(f"Prompt saved to: {saved_path}", extra={"candidate": record.candidate_name})
        return metadata.course, metadata.university, saved_path

    async def run_prompt_pass(
        self, records: List[ApplicationRecord]
    ) -> Tuple[List[ApplicationRecord], int]:
        """Build prompts for every record that does not have one yet.

        A failing record is marked FAILED_PROCESSING and never retried by this
        pass; it does not stop the remaining records.

        Returns:
            The same (mutated) record list and the number of new prompts
        """
        processed_count = 0
        taken = {r.prompt_path for r in records if r.prompt_state is FieldState.PATH}
        for record in records:
            if not needs_prompt(record):
                continue

            logger.info(
                f"Processing application for: {record.candidate_name}",
                extra={"candidate": record.candidate_name},
            )
            try:
                course, university, saved_path = await self.build_prompt(record, taken)
            except Exception as e:
                logger.error(
                    f"Failed to process application for {record.candidate_name}. Skipping.",
                    extra={
                        "candidate": record.candidate_name,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    },
                )
                record.prompt_path = FAILED_PROCESSING
                continue

            record.course_name = course
            record.university_name = university
            record.prompt_path = str(saved_path)
            taken.add(record.prompt_path)
            processed_count += 1

        return records, processed_count

    async def generate_prompts(self) -> int:
        """Load the store, run the prompt pass and persist new prompts."""
        logger.info("--- Starting SOP Prompt Generation Process ---")
        records = self.store.load()
        if not records:
            logger.warning("The applications CSV file is empty. Please add applications to process.")
            logger.info("CSV format: candidateName,resumeFile,courseInput")
            return 0

        records, processed_count = await self.run_prompt_pass(records)

        if processed_count > 0:
            logger.info(f"Processed {processed_count} new application(s).")
            self.store.save(records)
        else:
            logger.info("No new applications to process. All entries are up-to-date.")

        logger.info("--- Process Complete ---")
        return processed_count

    # --- Pass 2: prompt -> SOP ---

    async def write_sop(self, record: ApplicationRecord) -> Path:
        """Generate and save the SOP for one record.

        Raises:
            PromptFileMissing: If the record's prompt file cannot be read
            GenerationFailed: If the SOP model call fails
        """
        prompt_text = read_prompt_file(record.prompt_path)
        sop_text = await self.generator.generate(prompt_text)

        sop_path = save_text_file(
            self.settings.sops_dir, sop_file_name(record.prompt_path), sop_text
        )
        logger.info(f"SOP saved to: {sop_path}", extra={"candidate": record.candidate_name})
        return sop_path

    async def run_sop_pass(
        self, records: List[ApplicationRecord]
    ) -> Tuple[List[ApplicationRecord], int, bool]:
        """Generate SOPs for every record with a usable prompt and no SOP.

        A missing prompt file is permanent (FAILED_MISSING_PROMPT); any other
        failure leaves ``sop_path`` untouched so the next run retries it.

        Returns:
            The same (mutated) record list, the number of new SOPs and whether
            any record changed
        """
        pending = [record for record in records if needs_sop(record)]
        if not pending:
            logger.info("No new prompts to process. All SOPs seem to be generated or marked as failed.")
            return records, 0, False

        logger.info(f"Found {len(pending)} new application(s) to generate SOPs for.")

        processed_count = 0
        changed = False
        for record in pending:
            logger.info(
                f"Generating SOP for: {record.candidate_name} - {record.course_name}",
                extra={"candidate": record.candidate_name},
            )
            try:
                sop_path = await self.write_sop(record)
            except PromptFileMissing as e:
                logger.error(
                    f"Failed to generate SOP for {record.candidate_name}. Prompt file is missing.",
                    extra={"candidate": record.candidate_name, "error": str(e)},
                )
                record.sop_path = FAILED_MISSING_PROMPT
                changed = True
                continue
            except Exception as e:
                logger.error(
                    f"Failed to generate SOP for {record.candidate_name}. Skipping for this run.",
                    extra={
                        "candidate": record.candidate_name,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    },
                )
                continue

            record.sop_path = str(sop_path)
            processed_count += 1
            changed = True

        return records, processed_count, changed

    async def generate_sops(self) -> int:
        """Load the store, run the SOP pass and persist any change."""
        logger.info("--- Starting Final SOP Generation Process ---")
        records = self.store.load()
        records, processed_count, changed = await self.run_sop_pass(records)

        if changed:
            if processed_count > 0:
                logger.info(f"Successfully generated and saved {processed_count} new SOP(s).")
            else:
                logger.warning("No SOPs were successfully generated, but CSV updated with failure states.")
            self.store.save(records)
        else:
            logger.info("No changes were made to the CSV file in this run.")

        logger.info("--- SOP Generation Process Complete ---")
        return processed_count
