"""Service layer for Basic Diff API."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ... import __version__
from ...config import DiffConfig
from ...context import ContextEnricher
from ...errors import BasicDiffError
from ...parser import UnifiedDiffParser
from ...scanner import strip_ansi
from ...serialize import DeterministicSerializer
from ...vcs import GitClient

logger = logging.getLogger(__name__)


class DiffService:
    """Service class that encapsulates parsing and optional context enrichment."""

    def process_parse_request(
        self,
        diff_text: str,
        file_id_seed: str = "",
        strict: bool = False,
        detect_mode_changes: bool = False,
        repo_path: Optional[str] = None,
        base_ref: Optional[str] = None,
        head_ref: Optional[str] = None,
        context_radius: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Process a parse request and return the complete JSON envelope."""
        serializer = DeterministicSerializer()
        try:
            overrides: Dict[str, Any] = {
                "file_id_seed": file_id_seed,
                "strict": strict,
                "detect_mode_changes": detect_mode_changes,
                "cwd": repo_path,
            }
            if context_radius is not None:
                overrides["context_radius"] = context_radius
            config = DiffConfig.from_env(**overrides)

            payload = self._process_parse_core(config, diff_text, base_ref, head_ref)
            result = serializer.create_success_envelope(payload)

            logger.info(
                "Parse processing succeeded",
                extra={
                    "files": len(payload.get("files", [])),
                    "warnings": len(payload.get("warnings", [])),
                },
            )
            return result

        except BasicDiffError as exc:
            logger.warning("Known basic diff error", extra={"code": exc.code})
            return serializer.create_error_envelope(exc.code, exc.message, exc.details)

        except ValueError as exc:
            logger.warning("Invalid parse options", extra={"error": str(exc)})
            return serializer.create_error_envelope("INVALID_REQUEST", str(exc))

    def _process_parse_core(
        self,
        config: DiffConfig,
        diff_text: str,
        base_ref: Optional[str] = None,
        head_ref: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Parse, enrich when a repository is given, and serialize."""
        parser = UnifiedDiffParser(
            file_id_seed=config.file_id_seed,
            strict=config.strict,
            detect_mode_changes=config.detect_mode_changes,
        )
        meta = {
            "created_at": datetime.now(timezone.utc).isoformat(),
            "tool": {"name": "basicdiff", "version": __version__},
            "source": "api",
        }
        document = parser.parse(strip_ansi(diff_text), meta=meta)

        if config.cwd and config.effective_radius > 0:
            logger.debug(
                "Attaching context",
                extra={"repo": config.cwd, "radius": config.effective_radius},
            )
            enricher = ContextEnricher(
                GitClient(config),
                radius=config.effective_radius,
                base_ref=base_ref,
                head_ref=head_ref,
                max_workers=config.max_workers,
            )
            document = enricher.enrich(document)

        return DeterministicSerializer().serialize_document(document)
