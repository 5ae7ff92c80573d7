"""Reference data types and JSON-safe record containers for acquisitions grids."""

from __future__ import annotations

import datetime as dt
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

Results = Dict[str, Dict[int, Optional[str]]]


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Criterion:
    id: int
    label: str


@dataclass(frozen=True)
class Competency:
    id: str
    label: str
    criteria: Tuple[Criterion, ...]


@dataclass(frozen=True)
class SubjectDefinition:
    id: str
    label: str
    competencies: Tuple[Competency, ...]

    @property
    def total_criteria(self) -> int:
        return sum(len(comp.criteria) for comp in self.competencies)


def _results_to_dict(results: Results) -> Dict[str, Dict[str, Optional[str]]]:
    return {
        comp_id: {str(crit_id): grade for crit_id, grade in crits.items()}
        for comp_id, crits in results.items()
    }


def _results_from_dict(payload: Dict) -> Results:
    return {
        str(comp_id): {int(crit_id): grade for crit_id, grade in (crits or {}).items()}
        for comp_id, crits in (payload or {}).items()
    }


@dataclass
class AcqStudent:
    full_name: str
    results: Results = field(default_factory=dict)
    id: str = field(default_factory=new_id)

    def grades(self) -> List[Optional[str]]:
        """Flat list of every recorded slot, in insertion order."""

        return [grade for crits in self.results.values() for grade in crits.values()]

    def to_dict(self) -> Dict:
        return {"id": self.id, "fullName": self.full_name, "results": _results_to_dict(self.results)}

    @classmethod
    def from_dict(cls, payload: Dict) -> "AcqStudent":
        return cls(
            full_name=str(payload.get("fullName", "")),
            results=_results_from_dict(payload.get("results")),
            id=str(payload.get("id") or new_id()),
        )


@dataclass
class AcqGlobalStudent:
    number: int
    subjects: Dict[str, str] = field(default_factory=dict)
    id: str = field(default_factory=new_id)

    def to_dict(self) -> Dict:
        return {"id": self.id, "number": self.number, "subjects": dict(self.subjects)}

    @classmethod
    def from_dict(cls, payload: Dict) -> "AcqGlobalStudent":
        return cls(
            number=int(payload.get("number") or 0),
            subjects=dict(payload.get("subjects") or {}),
            id=str(payload.get("id") or new_id()),
        )


def _today() -> str:
    return dt.date.today().isoformat()


@dataclass
class AcqClassRecord:
    school_name: str
    class_name: str
    level: str
    subject: str
    academic_year: str = ""
    students: List[AcqStudent] = field(default_factory=list)
    upload_date: str = field(default_factory=_today)
    id: str = field(default_factory=new_id)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "schoolName": self.school_name,
            "className": self.class_name,
            "level": self.level,
            "subject": self.subject,
            "academicYear": self.academic_year,
            "uploadDate": self.upload_date,
            "students": [s.to_dict() for s in self.students],
        }

    @classmethod
    def from_dict(cls, payload: Dict) -> "AcqClassRecord":
        return cls(
            school_name=str(payload.get("schoolName", "")),
            class_name=str(payload.get("className", "")),
            level=str(payload.get("level", "")),
            subject=str(payload.get("subject", "")),
            academic_year=str(payload.get("academicYear", "")),
            students=[AcqStudent.from_dict(s) for s in payload.get("students") or []],
            upload_date=str(payload.get("uploadDate") or _today()),
            id=str(payload.get("id") or new_id()),
        )


@dataclass
class AcqGlobalRecord:
    school_name: str
    academic_year: str = ""
    include_amazigh: bool = True
    detected_subjects: List[str] = field(default_factory=list)
    students: List[AcqGlobalStudent] = field(default_factory=list)
    upload_date: str = field(default_factory=_today)
    id: str = field(default_factory=new_id)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "schoolName": self.school_name,
            "academicYear": self.academic_year,
            "includeAmazigh": self.include_amazigh,
            "detectedSubjects": list(self.detected_subjects),
            "uploadDate": self.upload_date,
            "students": [s.to_dict() for s in self.students],
        }

    @classmethod
    def from_dict(cls, payload: Dict) -> "AcqGlobalRecord":
        return cls(
            school_name=str(payload.get("schoolName", "")),
            academic_year=str(payload.get("academicYear", "")),
            include_amazigh=bool(payload.get("includeAmazigh", True)),
            detected_subjects=list(payload.get("detectedSubjects") or []),
            students=[AcqGlobalStudent.from_dict(s) for s in payload.get("students") or []],
            upload_date=str(payload.get("uploadDate") or _today()),
            id=str(payload.get("id") or new_id()),
        )
