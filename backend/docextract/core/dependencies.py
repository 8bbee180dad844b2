from docextract.services.ai.common.pipeline import ExtractionPipeline
from docextract.services.ai.operations import get_pipeline as _get_pipeline


def get_pipeline() -> ExtractionPipeline:
    return _get_pipeline()
