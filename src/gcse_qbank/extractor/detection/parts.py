"""
Module: extractor.detection.parts

Purpose:
    Part detail detection - reads the per-part facts that depend on line
    structure: the part's question type, its multiple-choice options and
    any quoted code blocks.

Key Functions:
    - split_code_segments(): Separate code blocks from prose lines
    - find_options(): "A) ..." style option lines with markers stripped
    - describe_part(): PartRecord with type, options and code filled in

Dependencies:
    - re (std)
    - gcse_qbank.extractor.classification: classify_question_type

Used By:
    - extractor.detection.marks: annotate_record() describes every part

Code Blocks:
    A block starts at a line opening with a declaration keyword (`def`,
    `function`, `class`, `public`, `private`, `void`) and runs until the
    next block start or the end of the part. Normalized lines carry no
    blank separators, so a block never ends earlier.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Iterable, List, Tuple

from gcse_qbank.core.models.records import PartRecord
from gcse_qbank.extractor.classification import classify_question_type

CODE_BLOCK_START = re.compile(r"^(function|def|class|public|private|void)\s")
OPTION_LINE = re.compile(r"^[A-D][)\s]")

MULTIPLE_CHOICE = "multiple-choice"


def split_code_segments(lines: Iterable[str]) -> Tuple[List[str], List[str]]:
    """
    Split part lines into prose lines and code blocks.

    Returns:
        (prose lines, code blocks); each block's lines joined with newlines

    Example:
        >>> split_code_segments(["Complete the function.", "def area(w, h):", "return ___"])
        (['Complete the function.'], ['def area(w, h):\\nreturn ___'])
    """
    prose: List[str] = []
    segments: List[str] = []
    current: List[str] = []

    for line in lines:
        if CODE_BLOCK_START.match(line):
            if current:
                segments.append("\n".join(current))
            current = [line]
        elif current:
            current.append(line)
        else:
            prose.append(line)

    if current:
        segments.append("\n".join(current))
    return prose, segments


def find_options(lines: Iterable[str]) -> List[str]:
    """
    Option lines ("A) Abstraction", "B Conversion") with the letter stripped.

    Example:
        >>> find_options(["Which is a method?", "A) Abstraction", "B Conversion"])
        ['Abstraction', 'Conversion']
    """
    return [OPTION_LINE.sub("", line, count=1).strip() for line in lines if OPTION_LINE.match(line)]


def describe_part(part: PartRecord) -> PartRecord:
    """
    Fill a part's type, options and code segments from its lines.

    The type is classified on prose only, so keywords inside quoted code
    do not count. Options are read only from multiple-choice parts.
    """
    lines = part.content_lines or ((part.content,) if part.content else ())
    prose, segments = split_code_segments(lines)
    question_type = classify_question_type(" ".join(prose))
    options = find_options(prose) if question_type == MULTIPLE_CHOICE else []
    return replace(
        part,
        question_type=question_type,
        options=tuple(options),
        code_segments=tuple(segments),
    )
