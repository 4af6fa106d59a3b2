"""Application services."""

from cardclass.application.services.batch_classification_service import (
    BatchClassificationService,
)
from cardclass.application.services.classification_comparison_service import (
    ClassificationComparisonService,
)
from cardclass.application.services.prompt_improvement_service import (
    PromptImprovementService,
    PromptSuggestion,
)
from cardclass.application.services.rule_coverage_service import (
    RuleCoverageReport,
    analyze_rule_coverage,
)

__all__ = [
    "BatchClassificationService",
    "ClassificationComparisonService",
    "PromptImprovementService",
    "PromptSuggestion",
    "RuleCoverageReport",
    "analyze_rule_coverage",
]
