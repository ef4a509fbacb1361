"""
Core Models Package

Immutable, validated records for authored artifacts and the Questions
derived from them. Changes produce new instances via dataclasses.replace;
Part and ModuleContent are the only mutable containers.
"""

from .fields import ImageField
from .table import BlankCell, TableColumn, TableRow, TableStructure, TextCell
from .questions import FlowChartQuestion, Question, QuestionKind, TableCompletionQuestion
from .groups import FlowChartArtifact, QuestionGroup, TableArtifact
from .parts import ModuleContent, Part, PartAspect

__all__ = [
    "ImageField",
    "BlankCell",
    "TableColumn",
    "TableRow",
    "TableStructure",
    "TextCell",
    "FlowChartQuestion",
    "Question",
    "QuestionKind",
    "TableCompletionQuestion",
    "FlowChartArtifact",
    "QuestionGroup",
    "TableArtifact",
    "ModuleContent",
    "Part",
    "PartAspect",
]
