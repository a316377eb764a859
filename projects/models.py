"""
Plain records for the project schema.
Child collections on Project are only filled by the single-project fetch.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass
class Material:
    material_id: Optional[int] = None
    project_id: Optional[int] = None
    material_name: Optional[str] = None
    num_required: Optional[int] = None
    cost: Optional[Decimal] = None


@dataclass
class Step:
    step_id: Optional[int] = None
    project_id: Optional[int] = None
    step_text: Optional[str] = None
    step_order: Optional[int] = None


@dataclass
class Category:
    category_id: Optional[int] = None
    category_name: Optional[str] = None


@dataclass
class Project:
    project_id: Optional[int] = None
    project_name: Optional[str] = None
    estimated_hours: Optional[Decimal] = None
    actual_hours: Optional[Decimal] = None
    difficulty: Optional[int] = None
    notes: Optional[str] = None
    materials: List[Material] = field(default_factory=list)
    steps: List[Step] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)

    def fields(self) -> dict:
        """The five mutable columns plus the id, for logging."""
        return {
            "project_id": self.project_id,
            "project_name": self.project_name,
            "estimated_hours": self.estimated_hours,
            "actual_hours": self.actual_hours,
            "difficulty": self.difficulty,
            "notes": self.notes,
        }
