"""Competency schemas per (level, subject) and the lookup used by the detailed-grid parser.

Criterion order inside each competency, and competency order inside each
subject, fixes the column-to-slot mapping of a detailed grid row.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from acq_types import Competency, Criterion, SubjectDefinition

def _competency(comp_id: str, label: str, *criteria: str) -> Competency:
    return Competency(
        id=comp_id,
        label=label,
        criteria=tuple(Criterion(id=i, label=text) for i, text in enumerate(criteria, start=1)),
    )


YEAR2_ARABIC = SubjectDefinition(
    id="arabic_y2",
    label="اللغة العربية (السنة الثانية)",
    competencies=(
        _competency(
            "reading_performance",
            "كفاءة الأداء القرائي",
            "الالتزام بالعادات القرائية الحسنة",
            "فك ترميز الكلمات (التهجئة السليمة)",
            "قراءة وحدات لغوية كاملة (الاسترسال والنطق السليم)",
        ),
        _competency(
            "written_comprehension",
            "كفاءة فهم المكتوب",
            "فهم المعاني الصريحة في النص",
            "فهم تسلسل فكر أو الأحداث الواردة في النص",
            "فهم معاني الكلمات الواردة في النص (رصيد لغوي)",
            "التحكم في تطبيقات مهارات الوعي الصوتي",
            "الرسم الإملائي لجمل (الإملاء)",
        ),
    ),
)

YEAR2_MATH = SubjectDefinition(
    id="math_y2",
    label="الرياضيات (السنة الثانية)",
    competencies=(
        _competency(
            "control_numbers",
            "التحكم في نظام العد والحساب",
            "التحكم في موارد نظام العد العشري (قراءة، كتابة، مقارنة، تفكيك)",
            "التحكم في عمليتي الجمع والطرح (آلية الحساب)",
        ),
        _competency(
            "problem_solving",
            "منهجية حل المشكلات الرياضياتية",
            "فهم المشكلة الرياضياتية (تحديد المعطيات والمطلوب)",
            "انسجام عناصر الحل (اختيار العملية المناسبة)",
            "الاستعمال السليم للأدوات الرياضياتية (الإنجاز الصحيح)",
            "التبليغ الرياضياتي (الصياغة والوحدات)",
        ),
    ),
)

YEAR4_ARABIC = SubjectDefinition(
    id="arabic_y4",
    label="اللغة العربية (السنة الرابعة)",
    competencies=(
        _competency(
            "oral_comms",
            "فهم الخطاب والتواصل الشفوي",
            "الالتزام بآداب الاستماع والتحدث",
            "إدراك موضوع الخطاب وفكرته الأساسية",
            "التجاوب مع التعليمات",
            "الاسترسال وسالمة لغة التواصل",
            "توظيف الدلالات اللفظية وغير اللفظية",
        ),
        _competency(
            "reading_perf",
            "كفاءة الأداء القرائي",
            "العادات القرائية الحسنة",
            "قراءة مسترسلة لوحدات لغوية كاملة",
            "قراءة معبرة عن المعاني",
            "احترام زمن الإنجاز (مدة القراءة)",
        ),
        _competency(
            "written_comp",
            "كفاءة فهم المكتوب",
            "توظيف الحصيلة اللغوية",
            "التحليل النحوي لجملة",
            "التحويل الصرفي لفقرة",
            "تشكيل فقرة أو تصحيحها",
            "الرسم الإملائي لفقرة",
        ),
        _competency(
            "written_prod",
            "كفاءة الإنتاج الكتابي",
            "احترام التعليمة والمهمات المرفقة",
            "ترابط الأفكار وتسلسلها",
            "الالتزام بقواعد اللغة",
            "إدراج قيمة أو تحديد موقف أو إبداء رأي",
            "جودة المنتج",
        ),
    ),
)

YEAR4_MATH = SubjectDefinition(
    id="math_y4",
    label="الرياضيات (السنة الرابعة)",
    competencies=(
        _competency(
            "control_resources",
            "التحكم في موارد مختلف الميادين",
            "الأعداد (< 1,000,000)، الأعداد العشرية، الكسور والحساب",
            "الفضاء والهندسة (وحدات القياس، الأشكال، المساحة والمحيط)",
            "تنظيم المعطيات والتناسبية (الخواص الخطية)",
        ),
        _competency(
            "methodological_solving",
            "الكفاءة المنهجية لحل المشكلات",
            "فهم المشكلة (تحديد المعطيات والمطلوب)",
            "انسجام عناصر الحل (اختيار الخوارزمية المناسبة)",
            "الاستعمال السليم للأدوات (صحة الحساب والنتائج)",
            "التبليغ الرياضياتي (الوحدات، التنظيم، الجواب)",
        ),
    ),
)

YEAR5_ARABIC = SubjectDefinition(
    id="arabic_y5",
    label="اللغة العربية (السنة الخامسة)",
    competencies=(
        _competency(
            "oral_comms",
            "فهم الخطاب والتواصل الشفوي",
            "الالتزام بآداب الاستماع والتحدث",
            "إدراك موضوع الخطاب وفكرته العامة",
            "التجاوب مع الخطاب المسموع",
            "التفاعل والمحاورة الشفوية",
            "الاسترسال وسلامة لغة التواصل",
            "توظيف الدلالات اللفظية وغير اللفظية",
        ),
        _competency(
            "reading_perf",
            "كفاءة الأداء القرائي",
            "فك الرموز والقراءة السليمة",
            "قراءة مسترسلة لوحدات لغوية كاملة",
            "قراءة معبرة عن المعاني",
            "احترام زمن الإنجاز",
        ),
        _competency(
            "written_comp",
            "كفاءة فهم المكتوب",
            "فهم المعاني الصريحة",
            "فهم المعاني الضمنية",
            "تحديد نمط النص",
            "فهم النص التفسيري والحجاجي",
            "توظيف الحصيلة اللغوية",
            "التحويل الصرفي",
            "الرسم الإملائي",
            "التحليل النحوي",
            "الرصيد اللغوي",
        ),
        _competency(
            "written_prod",
            "كفاءة الإنتاج الكتابي",
            "احترام التعليمة",
            "بناء النص وهيكلته",
            "ترابط الأفكار وانسجامها",
            "الالتزام بقواعد اللغة",
            "توظيف الموارد المكتسبة",
            "إبداء الرأي والحجاج",
            "جودة الخط والنسخ",
        ),
    ),
)


@dataclass(frozen=True)
class SchemaEntry:
    level: str
    subject_fragment: str
    definition: SubjectDefinition
    min_grades: int
    # Competency ids grouped into the two axes of the performance quadrant.
    axes: Tuple[Tuple[str, ...], Tuple[str, ...]]
    axis_labels: Tuple[str, str]
    # (both high, first axis only, second axis only, both low)
    quadrant_names: Tuple[str, str, str, str]


SCHEMA_TABLE: Tuple[SchemaEntry, ...] = (
    SchemaEntry(
        level="2AP",
        subject_fragment="العربية",
        definition=YEAR2_ARABIC,
        min_grades=4,
        axes=(("reading_performance",), ("written_comprehension",)),
        axis_labels=("reading", "comprehension"),
        quadrant_names=("balanced_high", "rote_reading", "decoding_issue", "struggling"),
    ),
    SchemaEntry(
        level="2AP",
        subject_fragment="الرياضيات",
        definition=YEAR2_MATH,
        min_grades=3,
        axes=(("control_numbers",), ("problem_solving",)),
        axis_labels=("calculation", "problem_solving"),
        quadrant_names=("balanced_high", "rote_learning", "procedural_issue", "struggling"),
    ),
    SchemaEntry(
        level="4AP",
        subject_fragment="العربية",
        definition=YEAR4_ARABIC,
        min_grades=10,
        axes=(("oral_comms", "reading_perf"), ("written_comp", "written_prod")),
        axis_labels=("oral", "written"),
        quadrant_names=("balanced_high", "oral_dominant", "written_dominant", "struggling"),
    ),
    SchemaEntry(
        level="4AP",
        subject_fragment="الرياضيات",
        definition=YEAR4_MATH,
        min_grades=4,
        axes=(("control_resources",), ("methodological_solving",)),
        axis_labels=("resources", "methodology"),
        quadrant_names=("balanced_high", "method_gap", "knowledge_gap", "struggling"),
    ),
    SchemaEntry(
        level="5AP",
        subject_fragment="العربية",
        definition=YEAR5_ARABIC,
        min_grades=15,
        axes=(("oral_comms", "reading_perf"), ("written_comp", "written_prod")),
        axis_labels=("oral", "written"),
        quadrant_names=("balanced_high", "oral_dominant", "written_dominant", "struggling"),
    ),
)

# Subjects offered by the class-record selector for each level.
LEVEL_SUBJECTS: Dict[str, Tuple[str, ...]] = {
    "2AP": ("اللغة العربية", "الرياضيات"),
    "4AP": ("اللغة العربية", "الرياضيات"),
    "5AP": (
        "اللغة العربية",
        "الرياضيات",
        "التربية الإسلامية",
        "التربية المدنية",
        "التربية العلمية",
        "التاريخ",
        "الجغرافيا",
        "اللغة الفرنسية",
        "اللغة الأمازيغية",
        "اللغة الإنجليزية",
        "التربية البدنية",
        "التربية الفنية",
    ),
}


def lookup_schema(level: str, subject: str) -> Optional[SchemaEntry]:
    """Return the first entry whose level equals *level* and whose fragment occurs in *subject*."""

    level = str(level or "").strip()
    subject = str(subject or "")
    for entry in SCHEMA_TABLE:
        if entry.level == level and entry.subject_fragment in subject:
            return entry
    return None


def supported_pairs() -> List[Tuple[str, str]]:
    return [(entry.level, entry.subject_fragment) for entry in SCHEMA_TABLE]
