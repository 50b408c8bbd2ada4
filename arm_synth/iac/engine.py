"""Synthesis engine for turning construct trees into ARM templates.

The engine runs the pipeline for one deployment unit:
collect → transform → resolve → sort → lint → assemble.
Each unit gets its own transformer and resolver, so units never share
graph state and can be synthesized concurrently.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog

from ..config.loader import load_config
from ..config.models import SynthesisConfig
from ..logging_config import configure_logging
from ..models.construct import Construct, Resource, Stack
from ..models.record import CanonicalRecord
from ..validation.models import ValidationResult, ValidationSeverity
from ..validation.record_validator import find_duplicate_records
from ..validation.template_validator import validate_template
from .dependency_resolver import DependencyResolver
from .emitters import get_emitter
from .resource_transformer import ResourceTransformer

logger = structlog.get_logger(__name__)


@dataclass
class SynthesisResult:
    """Output of synthesizing one stack."""

    stack_name: str
    scope: str
    records: List[CanonicalRecord]
    template: Dict[str, Any]
    validation: ValidationResult = field(default_factory=ValidationResult)


class SynthesisEngine:
    """Runs the synthesis pipeline over stacks of a construct tree."""

    def __init__(
        self, config: Optional[SynthesisConfig] = None, emitter_format: str = "arm"
    ) -> None:
        """Initialize synthesis engine.

        Args:
            config: Pipeline configuration; defaults when None
            emitter_format: Registered emitter used to assemble templates
        """
        self.config = config or SynthesisConfig()
        self.emitter_format = emitter_format

    @classmethod
    def from_config_file(
        cls,
        config_path: Optional[Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "SynthesisEngine":
        """Create an engine from the layered configuration and set up logging.

        Raises:
            ConfigError: If configuration is invalid
        """
        config = load_config(config_path, overrides)
        configure_logging(config.log_level)
        return cls(config)

    def collect_resources(self, stack: Stack) -> List[Resource]:
        """Resources of ``stack`` in depth-first order, nested stacks excluded."""
        return stack.resources()

    def synthesize(self, stack: Stack) -> SynthesisResult:
        """Synthesize one stack into a template.

        Raises:
            CircularDependencyError: If the stack's resources depend on each
                other in a cycle
        """
        resources = self.collect_resources(stack)
        logger.info(
            "Synthesizing stack", stack=stack.path, resource_count=len(resources)
        )

        transformer = ResourceTransformer(self.config.transformer)
        resolver = DependencyResolver(self.config.resolver)
        emitter = get_emitter(self.emitter_format)(self.config.template)

        records = transformer.transform_all(resources)
        # The resolver keeps one record per key, so duplicates must be caught here
        duplicates = find_duplicate_records(records)
        resolved = resolver.resolve(records, resources)
        ordered = resolver.topological_sort(resolved)

        template = emitter.build_template(ordered, stack.deployment_scope)

        validation = ValidationResult()
        if self.config.validation.enabled:
            validation = ValidationResult(issues=duplicates).merge(
                validate_template(template)
            )
            self._log_issues(stack, validation)

        return SynthesisResult(
            stack_name=stack.path,
            scope=stack.deployment_scope.value,
            records=ordered,
            template=template,
            validation=validation,
        )

    def synthesize_all(
        self, root: Construct, max_workers: Optional[int] = None
    ) -> Dict[str, SynthesisResult]:
        """Synthesize every stack under ``root``.

        Args:
            root: Construct tree root; it is included when it is a Stack
            max_workers: Thread pool size; stacks run one by one when None or 1

        Returns:
            Results keyed by stack path, in tree order
        """
        stacks = [node for node in root.walk() if isinstance(node, Stack)]
        logger.info("Found stacks", count=len(stacks))

        if not max_workers or max_workers <= 1 or len(stacks) <= 1:
            return {stack.path: self.synthesize(stack) for stack in stacks}

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(self.synthesize, stack) for stack in stacks]
            return {
                stack.path: future.result() for stack, future in zip(stacks, futures)
            }

    def _log_issues(self, stack: Stack, validation: ValidationResult) -> None:
        for issue in validation.issues:
            log = (
                logger.error
                if issue.severity == ValidationSeverity.ERROR
                else logger.warning
            )
            log(
                "Validation issue",
                stack=stack.path,
                message=issue.message,
                field_path=issue.field_path,
                suggestion=issue.suggestion,
            )
        if validation.issues:
            logger.info(
                "Validation finished",
                stack=stack.path,
                errors=validation.error_count,
                warnings=validation.warning_count,
            )
