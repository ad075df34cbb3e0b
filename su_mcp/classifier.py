# su_mcp/classifier.py
"""Lexical shader source classifier.

All estimates are plain substring matches over the raw source. Identifiers,
comments and string literals are not excluded, so a variable named
``halfVector`` reads as half precision and ``addition`` counts as an ``add``.
"""
from typing import Optional, Sequence, Tuple

from su_mcp.models import Precision, ShaderClassification, ShadingModel

# Checked in order; the first marker present anywhere in the source wins.
SHADING_MODEL_MARKERS: Tuple[Tuple[str, ShadingModel], ...] = (
    ("target 2.0", ShadingModel.SM_2_0),
    ("target 2.5", ShadingModel.SM_2_5),
    ("target 3.0", ShadingModel.SM_3_0),
    ("target 3.5", ShadingModel.SM_3_5),
    ("target 4.0", ShadingModel.SM_4_0),
    ("target 4.5", ShadingModel.SM_4_5),
    ("target 5.0", ShadingModel.SM_5_0),
    ("target 5.1", ShadingModel.SM_5_1),
    ("target 6.0", ShadingModel.SM_6_0),
    ("target 6.2", ShadingModel.SM_6_2),
)

PRECISION_MARKERS: Tuple[Tuple[str, Precision], ...] = (
    ("half", Precision.HALF),
    ("float", Precision.FLOAT),
    ("fixed", Precision.FIXED),
)

INSTRUCTION_KEYWORDS: Tuple[str, ...] = (
    "add", "mul", "sub", "div", "dot", "cross", "normalize",
    "lerp", "sin", "cos", "tan", "exp", "log",
)

TEXTURE_SAMPLE_TOKEN = "tex2D("


def count_occurrences(source: str, needle: str) -> int:
    """Count non-overlapping occurrences of ``needle``, scanning left to right.

    The search resumes right after each hit, so ``"aaa"`` holds one ``"aa"``.
    """
    if not needle:
        return 0
    count = 0
    index = source.find(needle)
    while index != -1:
        count += 1
        index = source.find(needle, index + len(needle))
    return count


def classify_shading_model(source: Optional[str]) -> ShadingModel:
    if source is None:
        return ShadingModel.UNKNOWN
    for marker, model in SHADING_MODEL_MARKERS:
        if marker in source:
            return model
    return ShadingModel.UNKNOWN


def classify_precision(source: Optional[str]) -> Precision:
    if source is None:
        return Precision.UNKNOWN
    for marker, precision in PRECISION_MARKERS:
        if marker in source:
            return precision
    return Precision.UNKNOWN


def estimate_instruction_count(
    source: Optional[str],
    keywords: Sequence[str] = INSTRUCTION_KEYWORDS
) -> int:
    if source is None:
        return 0
    return sum(count_occurrences(source, keyword) for keyword in keywords)


def estimate_texture_samples(source: Optional[str]) -> int:
    # matches call sites only; property declarations have no parenthesis
    if source is None:
        return 0
    return count_occurrences(source, TEXTURE_SAMPLE_TOKEN)


def classify(source: Optional[str]) -> ShaderClassification:
    """Classify shader source text.

    Args:
        source: Raw shader source, or None when it could not be retrieved

    Returns:
        ShaderClassification; all fields are Unknown/0 when source is None
    """
    return ShaderClassification(
        shading_model=classify_shading_model(source),
        precision=classify_precision(source),
        instruction_count=estimate_instruction_count(source),
        texture_sample_count=estimate_texture_samples(source),
    )
