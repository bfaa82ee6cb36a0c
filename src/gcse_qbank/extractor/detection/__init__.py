"""
Module: extractor.detection

Purpose:
    Detection subpackage for reading facts out of closed segments.
    Classification decides where a line belongs; detection decides what
    marks, options and code it carries.

Key Modules:
    - marks: Mark allocation tokens ([N marks], (Total N marks))
    - parts: Per-part type, multiple-choice options and code blocks

Used By:
    - extractor.pipeline: Annotates records with marks
"""
